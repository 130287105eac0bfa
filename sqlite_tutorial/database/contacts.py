"""
Tutorial steps for the Contact table: create, insert and query.

File: database/contacts.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

import logging
import sqlite3
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import ValidationError

from .common import CREATE_TABLE_SQL, INSERT_CONTACT_SQL, SELECT_CONTACTS_SQL
from .connection import TutorialDatabase
from .errors import RowError, SchemaError
from .statement import PreparedStatement
from ..models import Contact, InsertResult

log = logging.getLogger(__name__)

ContactLike = Union[Contact, Tuple[int, Optional[str]]]

# Failures sqlite3 raises while binding a single row's values
BIND_ERRORS = (sqlite3.Error, OverflowError, UnicodeEncodeError)


def _as_contact(record: ContactLike) -> Contact:
    """Build a Contact from a record, raising RowError if it is malformed"""
    if isinstance(record, Contact):
        return record
    try:
        contact_id, name = record
        return Contact(id=contact_id, name=name)
    except ValidationError as e:
        raise RowError(f"Invalid contact record {record!r}", e.errors()[0]["msg"]) from e
    except (TypeError, ValueError) as e:
        raise RowError(f"Invalid contact record {record!r}", str(e)) from e


def create_contact_table(db: TutorialDatabase) -> None:
    """
    Create the Contact table.

    Args:
        db: Open tutorial database

    Raises:
        SchemaError: If the CREATE TABLE statement cannot be prepared (e.g. the
            table already exists) or does not run to completion
    """
    with db.prepare(CREATE_TABLE_SQL, error_cls=SchemaError) as statement:
        try:
            statement.execute()
        except sqlite3.Error as e:
            log.error(f"Contact table could not be created: {e}")
            raise SchemaError("Contact table could not be created", str(e)) from e

    log.info("Contact table created")


def _insert_row(statement: PreparedStatement, contact: Contact) -> None:
    """Bind one contact to the prepared INSERT and run it, raising RowError on failure."""
    try:
        statement.execute(contact.to_params())
    except BIND_ERRORS as e:
        raise RowError(f"Could not insert contact {contact.id}", str(e)) from e


def insert_contact(db: TutorialDatabase, contact: ContactLike) -> InsertResult:
    """
    Insert a single contact with its own prepared statement.

    Args:
        db: Open tutorial database
        contact: Contact (or (id, name) pair) to insert

    Returns:
        InsertResult describing whether the row was written

    Raises:
        StatementError: If the INSERT statement cannot be prepared
    """
    results = insert_contacts(db, [contact])
    return results[0]


def insert_contacts(db: TutorialDatabase, contacts: Iterable[ContactLike]) -> List[InsertResult]:
    """
    Insert contacts one row at a time through a single prepared INSERT.

    The statement is compiled once and reused for every row. A row that
    fails (malformed record, duplicate id, unbindable value) is recorded
    and the loop moves on.

    Args:
        db: Open tutorial database
        contacts: Contacts (or (id, name) pairs) in the order to insert them

    Returns:
        One InsertResult per contact, in input order

    Raises:
        StatementError: If the INSERT statement cannot be prepared; no rows
            are attempted in that case
    """
    results = []

    with db.prepare(INSERT_CONTACT_SQL) as statement:
        for record in contacts:
            contact = None
            try:
                contact = _as_contact(record)
                _insert_row(statement, contact)
            except RowError as e:
                log.warning(str(e))
                results.append(InsertResult(contact=contact, inserted=False, error=e.engine_message))
                continue

            log.debug(f"Inserted contact {contact.id}")
            results.append(InsertResult(contact=contact, inserted=True))

    inserted = sum(1 for result in results if result.inserted)
    log.info(f"Inserted {inserted}/{len(results)} contacts")
    return results


def query_contacts(db: TutorialDatabase) -> Iterator[Contact]:
    """
    Yield every row of the Contact table as a Contact.

    The generator owns its SELECT statement: it is prepared on the first
    next() and finalized when iteration finishes or the generator is closed.
    Query again by calling this function again.

    Raises:
        StatementError: If the SELECT statement cannot be prepared or a step
            fails
    """
    with db.prepare(SELECT_CONTACTS_SQL) as statement:
        for row in statement.rows():
            yield Contact.from_row(row)


__all__ = [
    "create_contact_table",
    "insert_contact",
    "insert_contacts",
    "query_contacts",
]
