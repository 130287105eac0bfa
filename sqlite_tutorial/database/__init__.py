"""
File: database/__init__.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

from .common import (
    DEFAULT_CONTACTS,
    TutorialConfig,
    load_config,
    setup_logging,
)
from .connection import (
    TutorialDatabase,
    open_database,
    destroy_database,
)
from .contacts import (
    create_contact_table,
    insert_contact,
    insert_contacts,
    query_contacts,
)
from .errors import (
    TutorialDatabaseError,
    DatabaseConnectionError,
    SchemaError,
    StatementError,
    RowError,
)
from .statement import PreparedStatement, StatementState

__all__ = [
    "DEFAULT_CONTACTS",
    "TutorialConfig",
    "load_config",
    "setup_logging",
    "TutorialDatabase",
    "open_database",
    "destroy_database",
    "create_contact_table",
    "insert_contact",
    "insert_contacts",
    "query_contacts",
    "TutorialDatabaseError",
    "DatabaseConnectionError",
    "SchemaError",
    "StatementError",
    "RowError",
    "PreparedStatement",
    "StatementState",
]
