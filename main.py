"""
Main entry point for the SQLite contact tutorial.

Interactive CLI for running the tutorial steps individually or together.

File: main.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

import sys
from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table
from rich import box

from sqlite_tutorial.database import (
    DatabaseConnectionError,
    SchemaError,
    StatementError,
    TutorialConfig,
    TutorialDatabase,
    create_contact_table,
    destroy_database,
    insert_contacts,
    load_config,
    open_database,
    query_contacts,
    setup_logging,
)

console = Console()

# Tutorial step definitions
STEPS = {
    "0": {
        "name": "Reset database",
        "description": "Delete the database file left by a previous run",
    },
    "1": {
        "name": "Open a connection",
        "description": "Open (or create) the database file",
    },
    "2": {
        "name": "Create a table",
        "description": "CREATE TABLE Contact with an id and a name",
    },
    "3": {
        "name": "Insert contacts",
        "description": "Reuse one prepared INSERT for every contact",
    },
    "4": {
        "name": "Query contacts",
        "description": "Step through SELECT * FROM Contact",
    },
    "5": {
        "name": "Close the connection",
        "description": "Release the database handle",
    },
}


@dataclass
class TutorialSession:
    """State carried between steps: configuration and the open database, if any."""

    config: TutorialConfig = field(default_factory=load_config)
    db: Optional[TutorialDatabase] = None
    interactive: bool = False


def show_menu(session: TutorialSession):
    """Display the main menu."""
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]SQLite Tutorial[/] - Contacts with prepared statements",
            border_style="cyan",
        )
    )
    console.print(f"[dim]Database: {session.config.db_path}[/]")
    console.print()

    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Step", style="cyan", width=4)
    table.add_column("Name", style="white")
    table.add_column("Description", style="dim")

    for key, step in STEPS.items():
        table.add_row(key, step["name"], step["description"])

    console.print(table)
    console.print()
    console.print("[dim]Commands:[/]")
    console.print("  [cyan]0-5[/]  Run a tutorial step")
    console.print("  [cyan]a[/]    Run all steps in order")
    console.print("  [cyan]q[/]    Quit")
    console.print()


def _run_step_0(session: TutorialSession):
    """Delete the database file so every statement starts from a clean slate."""
    if session.db is not None:
        session.db.close()
        session.db = None

    if destroy_database(session.config.db_path):
        console.print(f"Removed existing database at {session.config.db_path}")
    else:
        console.print("[dim]No existing database to remove.[/]")


def _run_step_1(session: TutorialSession):
    """Open a connection. Failing to open ends the program."""
    if session.db is not None:
        console.print(f"[dim]Connection already open at {session.db.path}[/]")
        return

    db_dir = session.config.db_path.parent
    if session.interactive and not db_dir.exists():
        if Confirm.ask(f"Directory {db_dir} does not exist. Create it?", default=True):
            db_dir.mkdir(parents=True, exist_ok=True)

    try:
        session.db = open_database(session.config.db_path)
    except DatabaseConnectionError:
        console.print(
            f"[red]Unable to open database. Verify that the directory {db_dir} exists.[/]"
        )
        sys.exit(1)

    console.print(f"Successfully opened connection to database at {session.config.db_path}")


def _require_database(session: TutorialSession) -> TutorialDatabase:
    if session.db is None:
        _run_step_1(session)
    return session.db


def _run_step_2(session: TutorialSession):
    """Create the Contact table."""
    db = _require_database(session)

    try:
        create_contact_table(db)
    except SchemaError as e:
        if e.during_prepare:
            console.print("[red]CREATE TABLE statement could not be prepared.[/]")
        else:
            console.print("[red]Contact table could not be created.[/]")
        console.print(f"[dim]{e.engine_message}[/]")
        return

    console.print("Contact table created.")


def _run_step_3(session: TutorialSession):
    """Insert the configured contacts through one prepared INSERT."""
    db = _require_database(session)

    try:
        results = insert_contacts(db, session.config.contacts)
    except StatementError as e:
        console.print("[red]INSERT statement could not be prepared.[/]")
        console.print(f"[dim]{e.engine_message}[/]")
        return

    for result in results:
        if result.inserted:
            console.print("Successfully inserted row.")
        else:
            console.print(f"[red]Could not insert row.[/] [dim]{result.error}[/]")


def _run_step_4(session: TutorialSession):
    """Query and print every contact."""
    db = _require_database(session)

    try:
        for contact in query_contacts(db):
            console.print("Query Result:")
            console.print(contact.format_row(), markup=False, highlight=False)
    except StatementError as e:
        if e.during_prepare:
            console.print("[red]SELECT statement could not be prepared.[/]")
        else:
            console.print("[red]SELECT statement failed.[/]")
        console.print(f"[dim]{e.engine_message}[/]")


def _run_step_5(session: TutorialSession):
    """Close the connection."""
    if session.db is None:
        console.print("[dim]No open connection to close.[/]")
        return

    session.db.close()
    session.db = None
    console.print("Database connection closed.")


STEP_RUNNERS = {
    "0": _run_step_0,
    "1": _run_step_1,
    "2": _run_step_2,
    "3": _run_step_3,
    "4": _run_step_4,
    "5": _run_step_5,
}


def run_all_steps(session: TutorialSession):
    """Run every tutorial step in order."""
    console.print("\n[bold cyan]Running the full tutorial...[/]\n")

    for key, step in STEPS.items():
        console.rule(f"[bold]Step {key}: {step['name']}")
        STEP_RUNNERS[key](session)

    console.print()
    console.print(Panel.fit("[bold green]Tutorial complete![/]", border_style="green"))


def run_single_step(session: TutorialSession, step: str):
    """Run a single tutorial step."""
    step_info = STEPS[step]
    console.rule(f"[bold]{step_info['name']}")
    STEP_RUNNERS[step](session)


def main(argv=None):
    """Main entry point with interactive menu."""
    argv = sys.argv[1:] if argv is None else argv

    config = load_config()
    setup_logging(config.log_dir)
    session = TutorialSession(config=config)

    try:
        # Check for command-line argument for non-interactive use
        if argv:
            step = argv[0].lower()
            if step == "all" or step == "a":
                run_all_steps(session)
            elif step in STEPS:
                run_single_step(session, step)
            else:
                console.print(f"[red]Unknown step: {step}[/]")
                console.print("[dim]Valid steps: 0-5, a (all)[/]")
            return

        # Interactive mode
        session.interactive = True
        while True:
            show_menu(session)

            choice = Prompt.ask(
                "Select step",
                choices=list(STEPS.keys()) + ["a", "q"],
                default="q",
            )

            if choice == "q":
                console.print("[dim]Goodbye![/]")
                break
            elif choice == "a":
                run_all_steps(session)
            else:
                run_single_step(session, choice)

            console.print()
            if not Confirm.ask("Continue?", default=True):
                console.print("[dim]Goodbye![/]")
                break
    finally:
        if session.db is not None:
            session.db.close()


if __name__ == "__main__":
    main()
