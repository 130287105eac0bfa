"""
Prepared statements with scoped compile/finalize.

A statement moves through UNCOMPILED -> COMPILED -> EXECUTING -> DONE and
ends RELEASED once finalized. Finalizing happens on every exit path, so
using a statement as a context manager is the normal way to hold one.

File: database/statement.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

import itertools
import logging
import re
import sqlite3
from contextlib import closing
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator, Optional, Sequence, Type

from .errors import StatementError, TutorialDatabaseError

if TYPE_CHECKING:
    from .connection import TutorialDatabase

log = logging.getLogger(__name__)

# String literals, quoted identifiers and comments are skipped; group 1 is a
# positional parameter and group 2 its optional explicit index.
_SQL_TOKEN = re.compile(
    r"'(?:[^']|'')*'"
    r'|"(?:[^"]|"")*"'
    r"|`[^`]*`"
    r"|\[[^\]]*\]"
    r"|--[^\n]*"
    r"|/\*.*?(?:\*/|\Z)"
    r"|(\?)(\d*)",
    re.DOTALL,
)

# Makes every compile check a distinct SQL text, so sqlite3 never hands back a
# cached EXPLAIN compiled against an older schema
_compile_ids = itertools.count(1)


def count_parameters(sql: str) -> int:
    """
    Number of positional parameters in `sql`, numbered the way SQLite does:
    a bare ? takes the next index after the largest seen, ?NNN takes NNN.
    """
    highest = 0
    for match in _SQL_TOKEN.finditer(sql):
        if not match.group(1):
            continue
        if match.group(2):
            highest = max(highest, int(match.group(2)))
        else:
            highest += 1
    return highest


class StatementState(str, Enum):
    UNCOMPILED = "uncompiled"
    COMPILED = "compiled"
    EXECUTING = "executing"
    DONE = "done"
    RELEASED = "released"


class PreparedStatement:
    """
    One SQL statement compiled against a TutorialDatabase and owned by a
    single cursor.

    sqlite3 keeps compiled statements in a per-connection cache keyed by the
    SQL text, so executing the same statement repeatedly does not recompile it.
    """

    def __init__(
        self,
        db: "TutorialDatabase",
        sql: str,
        error_cls: Type[TutorialDatabaseError] = StatementError,
    ):
        self.sql = sql
        self.state = StatementState.UNCOMPILED
        self._db = db
        self._error_cls = error_cls
        self._cursor: Optional[sqlite3.Cursor] = None

    @property
    def summary(self) -> str:
        """First line of the SQL, for log messages."""
        return " ".join(self.sql.split())[:60]

    @property
    def parameter_count(self) -> int:
        return count_parameters(self.sql)

    def compile(self) -> "PreparedStatement":
        """
        Ask the engine to compile the statement without running it.

        EXPLAIN goes through the same parse and schema checks as the statement
        itself, so a missing table, an existing table on CREATE, or a syntax
        error is reported here rather than on the first row.

        Raises:
            The statement's error class (StatementError by default)
        """
        if self.state is not StatementState.UNCOMPILED:
            raise RuntimeError(f"Statement already {self.state.value}: {self.summary}")

        check_sql = f"EXPLAIN /* compile check {next(_compile_ids)} */ {self.sql}"
        try:
            with closing(self._db.connection.cursor()) as check:
                check.execute(check_sql, (None,) * self.parameter_count)
            cursor = self._db.connection.cursor()
        except sqlite3.Error as e:
            self.state = StatementState.RELEASED
            log.warning(f"Could not prepare statement '{self.summary}': {e}")
            raise self._error_cls(
                f"Could not prepare statement '{self.summary}'",
                str(e),
                during_prepare=True,
            ) from e

        self._cursor = cursor
        self.state = StatementState.COMPILED
        self._db._track_statement(self)
        log.debug(f"Prepared statement '{self.summary}'")
        return self

    def _require_cursor(self) -> sqlite3.Cursor:
        if self._cursor is None or self.state is StatementState.RELEASED:
            raise RuntimeError(f"Statement is not compiled: {self.summary}")
        return self._cursor

    def execute(self, params: Sequence[Any] = ()) -> int:
        """
        Bind parameters by position, step the statement to completion, then
        reset it for the next set of parameters.

        Args:
            params: Values for the ? placeholders, first placeholder first

        Returns:
            Number of rows changed

        Raises:
            sqlite3.Error: If the engine rejects this execution (e.g. a
                constraint violation); the statement stays usable
            OverflowError, UnicodeEncodeError: If a value cannot be bound
        """
        cursor = self._require_cursor()
        self.state = StatementState.EXECUTING
        try:
            cursor.execute(self.sql, tuple(params))
            self.state = StatementState.DONE
            return cursor.rowcount
        finally:
            self.reset()

    def rows(self, params: Sequence[Any] = ()) -> Iterator[tuple]:
        """
        Step the statement, yielding one result row per step until done.

        Raises:
            The statement's error class if the engine fails a step
        """
        cursor = self._require_cursor()
        self.state = StatementState.EXECUTING
        try:
            cursor.execute(self.sql, tuple(params))
        except sqlite3.Error as e:
            raise self._step_error(e) from e

        while True:
            try:
                row = cursor.fetchone()
            except sqlite3.Error as e:
                raise self._step_error(e) from e
            if row is None:
                break
            yield row

        self.state = StatementState.DONE

    def _step_error(self, error: sqlite3.Error) -> TutorialDatabaseError:
        log.warning(f"Statement '{self.summary}' failed: {error}")
        return self._error_cls(f"Statement '{self.summary}' failed", str(error))

    def reset(self) -> None:
        """Clear bound state so the compiled statement can be run again."""
        # sqlite3 resets the underlying statement before each execute
        if self.state is not StatementState.RELEASED:
            self.state = StatementState.COMPILED

    def finalize(self) -> None:
        """Release the statement. Safe to call more than once."""
        if self.state is StatementState.RELEASED:
            return

        if self._cursor is not None:
            if self._db.is_open:
                self._cursor.close()
            self._cursor = None
            self._db._untrack_statement(self)

        self.state = StatementState.RELEASED
        log.debug(f"Finalized statement '{self.summary}'")

    def __enter__(self) -> "PreparedStatement":
        if self.state is StatementState.UNCOMPILED:
            self.compile()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize()


__all__ = [
    "count_parameters",
    "PreparedStatement",
    "StatementState",
]
