"""
Errors raised by the tutorial's database steps.

File: database/errors.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

from typing import Optional


class TutorialDatabaseError(Exception):
    """Base class for tutorial database failures, carrying the engine's message."""

    def __init__(
        self,
        message: str,
        engine_message: Optional[str] = None,
        during_prepare: bool = False,
    ):
        self.engine_message = engine_message
        self.during_prepare = during_prepare  # failed while compiling, before any step
        if engine_message:
            message = f"{message} ({engine_message})"
        super().__init__(message)


class DatabaseConnectionError(TutorialDatabaseError):
    """The database file could not be opened or created. Fatal."""


class SchemaError(TutorialDatabaseError):
    """CREATE TABLE could not be compiled or did not complete."""


class StatementError(TutorialDatabaseError):
    """An INSERT or SELECT statement could not be compiled."""


class RowError(TutorialDatabaseError):
    """A single row failed to insert; the remaining rows are unaffected."""


__all__ = [
    "TutorialDatabaseError",
    "DatabaseConnectionError",
    "SchemaError",
    "StatementError",
    "RowError",
]
