"""Unit tests for prepared statement compile, execute and finalize."""

import sqlite3

import pytest

from sqlite_tutorial.database import SchemaError, StatementError, StatementState
from sqlite_tutorial.database.statement import count_parameters
from sqlite_tutorial.database.common import CREATE_TABLE_SQL, INSERT_CONTACT_SQL, SELECT_CONTACTS_SQL


def _table_exists(db, name):
    row = db.connection.execute(
        "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = ?", (name,)
    ).fetchone()
    return row[0] == 1


@pytest.mark.unit
class TestPreparedStatement:
    """Test the prepared statement lifecycle."""

    def test_new_statement_is_uncompiled(self, db):
        """Preparing only describes the statement; nothing is compiled yet."""
        statement = db.prepare("SELECT 1")
        assert statement.state is StatementState.UNCOMPILED
        assert db.open_statement_count == 0

    def test_compile_does_not_execute(self, db):
        """Compiling CREATE TABLE checks it without creating the table."""
        statement = db.prepare(CREATE_TABLE_SQL, error_cls=SchemaError).compile()
        try:
            assert statement.state is StatementState.COMPILED
            assert not _table_exists(db, "Contact")
        finally:
            statement.finalize()

    def test_context_manager_finalizes(self, db):
        """Leaving the with-block releases the statement."""
        with db.prepare("SELECT 1") as statement:
            assert statement.state is StatementState.COMPILED
            assert db.open_statement_count == 1

        assert statement.state is StatementState.RELEASED
        assert db.open_statement_count == 0

    def test_context_manager_finalizes_on_error(self, db):
        """The statement is released even when the block raises."""
        with pytest.raises(ValueError):
            with db.prepare("SELECT 1") as statement:
                raise ValueError("boom")

        assert statement.state is StatementState.RELEASED
        assert db.open_statement_count == 0

    def test_compile_failure_releases(self, db):
        """A statement against a missing table fails to compile and holds nothing."""
        statement = db.prepare(INSERT_CONTACT_SQL)

        with pytest.raises(StatementError) as exc_info:
            statement.compile()

        assert exc_info.value.during_prepare
        assert "no such table" in exc_info.value.engine_message
        assert statement.state is StatementState.RELEASED
        assert db.open_statement_count == 0

        # Finalizing after a failed compile is a no-op
        statement.finalize()
        assert statement.state is StatementState.RELEASED

    def test_compile_failure_uses_error_class(self, db):
        """The error raised on compile failure is the one the statement was given."""
        with pytest.raises(SchemaError):
            db.prepare("CREATE TABLE (", error_cls=SchemaError).compile()

    def test_compile_twice_rejected(self, db):
        """A statement is compiled once."""
        statement = db.prepare("SELECT 1").compile()
        try:
            with pytest.raises(RuntimeError):
                statement.compile()
        finally:
            statement.finalize()

    def test_execute_requires_compile(self, db):
        """Executing an uncompiled statement is a programming error."""
        with pytest.raises(RuntimeError):
            db.prepare("SELECT 1").execute()

    def test_execute_resets_for_reuse(self, contact_db):
        """One compiled INSERT runs for several parameter sets."""
        with contact_db.prepare(INSERT_CONTACT_SQL) as statement:
            assert statement.execute((1, "Ray")) == 1
            assert statement.state is StatementState.COMPILED
            assert statement.execute((2, "Emma")) == 1
            assert statement.state is StatementState.COMPILED

        rows = contact_db.connection.execute("SELECT Id, Name FROM Contact").fetchall()
        assert rows == [(1, "Ray"), (2, "Emma")]

    def test_failed_execute_keeps_statement_usable(self, contact_db):
        """A constraint violation fails one execution; the statement still works."""
        with contact_db.prepare(INSERT_CONTACT_SQL) as statement:
            statement.execute((1, "Ray"))
            with pytest.raises(sqlite3.IntegrityError):
                statement.execute((1, "Ray again"))
            assert statement.state is StatementState.COMPILED
            statement.execute((2, "Emma"))

        count = contact_db.connection.execute("SELECT COUNT(*) FROM Contact").fetchone()[0]
        assert count == 2

    def test_rows_steps_until_done(self, db):
        """rows() yields each result row and finishes DONE."""
        with db.prepare("SELECT ? UNION ALL SELECT ?") as statement:
            rows = statement.rows(("a", "b"))
            assert next(rows) == ("a",)
            assert statement.state is StatementState.EXECUTING
            assert list(rows) == [("b",)]
            assert statement.state is StatementState.DONE

    def test_finalize_is_idempotent(self, db):
        """Finalizing twice leaves the statement released."""
        statement = db.prepare("SELECT 1").compile()
        statement.finalize()
        statement.finalize()
        assert statement.state is StatementState.RELEASED
        assert db.open_statement_count == 0

    def test_summary_collapses_whitespace(self, db):
        """The summary used in logs is a single line."""
        statement = db.prepare(CREATE_TABLE_SQL)
        assert "\n" not in statement.summary
        assert statement.summary.startswith("CREATE TABLE Contact(")

    def test_compile_sees_schema_changes(self, contact_db):
        """A compile check after the table is dropped fails, even though it passed before."""
        contact_db.prepare(SELECT_CONTACTS_SQL).compile().finalize()
        contact_db.connection.execute("DROP TABLE Contact")

        with pytest.raises(StatementError) as exc_info:
            contact_db.prepare(SELECT_CONTACTS_SQL).compile()

        assert exc_info.value.during_prepare
        assert contact_db.open_statement_count == 0

    def test_compile_create_twice_fails_at_prepare(self, db):
        """The second CREATE TABLE check sees the table the first one created."""
        with db.prepare(CREATE_TABLE_SQL, error_cls=SchemaError) as statement:
            statement.execute()

        with pytest.raises(SchemaError) as exc_info:
            db.prepare(CREATE_TABLE_SQL, error_cls=SchemaError).compile()

        assert exc_info.value.during_prepare
        assert "already exists" in exc_info.value.engine_message

    def test_rows_step_failure_uses_error_class(self, contact_db):
        """An engine error while stepping is raised as the statement's error class."""
        statement = contact_db.prepare(SELECT_CONTACTS_SQL).compile()
        contact_db.connection.execute("DROP TABLE Contact")

        try:
            with pytest.raises(StatementError) as exc_info:
                list(statement.rows())
        finally:
            statement.finalize()

        assert not exc_info.value.during_prepare
        assert "no such table" in exc_info.value.engine_message

    def test_compile_ignores_question_marks_in_literals(self, db):
        """A ? inside a string literal or comment is not bound."""
        with db.prepare("SELECT '?', ? -- why?") as statement:
            assert list(statement.rows(("x",))) == [("?", "x")]


@pytest.mark.unit
class TestCountParameters:
    """Test counting positional parameters the way SQLite numbers them."""

    def test_bare_placeholders(self):
        """Each bare ? is one parameter."""
        assert count_parameters(INSERT_CONTACT_SQL) == 2

    def test_no_placeholders(self):
        """Statements without placeholders take no parameters."""
        assert count_parameters(CREATE_TABLE_SQL) == 0

    def test_literals_identifiers_and_comments_skipped(self):
        """Question marks in strings, quoted names and comments do not count."""
        sql = """SELECT 'a?b', "c?", [d?], `e?`, 'it''s?' /* f? */ FROM t WHERE x = ? -- g?"""
        assert count_parameters(sql) == 1

    def test_numbered_placeholders(self):
        """?NNN sets the index and a later bare ? continues after the largest."""
        assert count_parameters("SELECT ?2, ?") == 3
        assert count_parameters("SELECT ?1, ?1") == 1
