"""
Opening, closing and resetting the tutorial database.

File: database/connection.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

import logging
import sqlite3
from pathlib import Path
from typing import Set, Type, Union

from .errors import DatabaseConnectionError, StatementError, TutorialDatabaseError
from .statement import PreparedStatement

log = logging.getLogger(__name__)


class TutorialDatabase:
    """
    An open connection plus the statements compiled against it.

    Passed explicitly to every tutorial step. Keeps count of statements that
    have been compiled but not yet finalized so leaks are visible.
    """

    def __init__(self, path: Path, connection: sqlite3.Connection):
        self.path = path
        self._connection = connection
        self._statements: Set[PreparedStatement] = set()
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    @property
    def connection(self) -> sqlite3.Connection:
        if self._closed:
            raise DatabaseConnectionError(f"Connection to {self.path} is closed")
        return self._connection

    @property
    def open_statement_count(self) -> int:
        return len(self._statements)

    def prepare(
        self,
        sql: str,
        error_cls: Type[TutorialDatabaseError] = StatementError,
    ) -> PreparedStatement:
        """
        Create a statement for `sql`. It is compiled when entered as a context
        manager (or on an explicit compile()) and finalized on exit.
        """
        return PreparedStatement(self, sql, error_cls=error_cls)

    def _track_statement(self, statement: PreparedStatement) -> None:
        self._statements.add(statement)

    def _untrack_statement(self, statement: PreparedStatement) -> None:
        self._statements.discard(statement)

    def close(self) -> None:
        """Release the connection. Only the first call has any effect."""
        if self._closed:
            log.debug(f"Connection to {self.path} already closed")
            return

        if self._statements:
            log.warning(f"Finalizing {len(self._statements)} statement(s) left open at close")
            for statement in list(self._statements):
                statement.finalize()

        self._connection.close()
        self._closed = True
        log.info(f"Closed database connection at {self.path}")

    def __enter__(self) -> "TutorialDatabase":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def open_database(path: Union[str, Path]) -> TutorialDatabase:
    """
    Open (creating if needed) the database file at `path`.

    The containing directory must already exist. The connection runs in
    autocommit mode, so each statement is durable once it completes.

    Args:
        path: Location of the database file

    Returns:
        An open TutorialDatabase

    Raises:
        DatabaseConnectionError: If the file cannot be opened or created
    """
    path = Path(path)
    try:
        connection = sqlite3.connect(path, isolation_level=None)
    except sqlite3.Error as e:
        log.error(f"Unable to open database at {path}: {e}")
        raise DatabaseConnectionError(f"Unable to open database at {path}", str(e)) from e

    log.info(f"Opened database connection at {path}")
    return TutorialDatabase(path, connection)


def destroy_database(path: Union[str, Path]) -> bool:
    """
    Delete the database file so the tutorial starts from a clean slate.

    Returns:
        True if a file was removed, False if there was nothing to remove
    """
    path = Path(path)
    if not path.exists():
        return False

    log.warning(f"Removing existing database file: {path}")
    path.unlink()
    return True


__all__ = [
    "TutorialDatabase",
    "open_database",
    "destroy_database",
]
