"""
Outcome of inserting a single contact.

File: models/insert_result.py
Created: 2026-10-19
Last Modified: 2026-10-19
"""

from typing import Optional

from pydantic import BaseModel, Field

from .contact import Contact


class InsertResult(BaseModel):
    """Whether one contact made it into the table, and why not if it didn't"""

    contact: Optional[Contact] = Field(
        None, description="The contact that was bound to the INSERT; None if the record was malformed"
    )
    inserted: bool = Field(..., description="True if the row was written")
    error: Optional[str] = Field(None, description="Engine message when the row failed")
