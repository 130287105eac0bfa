"""
File: models/contact.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

from typing import Any, Optional, Sequence, Tuple

from pydantic import BaseModel, Field


class Contact(BaseModel):
    """One row of the Contact table."""

    id: int = Field(..., description="Caller-assigned identifier, the table's primary key")
    name: Optional[str] = Field(..., description="Display name; NULL in the table is None")

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Contact":
        """Create a Contact from an (Id, Name) result row"""
        contact_id, name = row[0], row[1]
        # Name arrives as raw bytes when the connection's text_factory is bytes
        if isinstance(name, (bytes, bytearray)):
            name = bytes(name).decode("utf-8")
        return cls(id=contact_id, name=name)

    def to_params(self) -> Tuple[int, Optional[str]]:
        """Positional parameters for INSERT INTO Contact (Id, Name) VALUES (?, ?)"""
        return (self.id, self.name)

    def format_row(self) -> str:
        return f"{self.id} | {self.name if self.name is not None else ''}"
