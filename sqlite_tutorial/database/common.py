"""
Common database constants, configuration and logging setup

File: database/common.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DB_PATH = DATA_DIR / "SQLiteTutorial" / "part1.sqlite"
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

# SQL used by the tutorial steps
CREATE_TABLE_SQL = """
CREATE TABLE Contact(
    Id INTEGER PRIMARY KEY NOT NULL,
    Name TEXT
)
"""
INSERT_CONTACT_SQL = "INSERT INTO Contact (Id, Name) VALUES (?, ?)"
SELECT_CONTACTS_SQL = "SELECT * FROM Contact"

DEFAULT_CONTACTS: List[Tuple[int, str]] = [
    (1, "Ray"),
    (2, "Emma"),
    (3, "Andrew"),
    (4, "Chris"),
]


@dataclass
class TutorialConfig:
    """Where the tutorial keeps its database and logs, and what it inserts."""

    db_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    log_dir: Path = field(default_factory=lambda: DEFAULT_LOG_DIR)
    contacts: List[Tuple[int, str]] = field(default_factory=lambda: list(DEFAULT_CONTACTS))

    def __post_init__(self):
        # Ensure paths are Path objects
        if isinstance(self.db_path, str):
            self.db_path = Path(self.db_path)
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)


def load_config() -> TutorialConfig:
    """
    Build the tutorial configuration from the environment.

    Reads SQLITE_TUTORIAL_DB_PATH and SQLITE_TUTORIAL_LOG_DIR (a .env file is
    honoured); anything unset falls back to the repo-relative defaults.
    """
    db_path = os.getenv("SQLITE_TUTORIAL_DB_PATH")
    log_dir = os.getenv("SQLITE_TUTORIAL_LOG_DIR")

    return TutorialConfig(
        db_path=Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH,
        log_dir=Path(log_dir).expanduser() if log_dir else DEFAULT_LOG_DIR,
    )


def setup_logging(log_dir: Path = DEFAULT_LOG_DIR, level: int = logging.INFO) -> None:
    """
    Configure the root logger with a dated log file and a console stream.

    Safe to call more than once; handlers are only attached the first time.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if root_logger.handlers:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.FileHandler(
        log_dir / f"sqlite_tutorial_{datetime.now().strftime('%Y-%m-%d')}.log"
    )
    file_handler.setFormatter(formatter)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(stream_handler)


__all__ = [
    "DATA_DIR",
    "DEFAULT_DB_PATH",
    "DEFAULT_LOG_DIR",
    "CREATE_TABLE_SQL",
    "INSERT_CONTACT_SQL",
    "SELECT_CONTACTS_SQL",
    "DEFAULT_CONTACTS",
    "TutorialConfig",
    "load_config",
    "setup_logging",
]
