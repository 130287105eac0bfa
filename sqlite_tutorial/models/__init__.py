"""
Data models for the SQLite contact tutorial.
"""

from .contact import Contact
from .insert_result import InsertResult

__all__ = [
    "Contact",
    "InsertResult",
]
