"""
Pydantic schemas for listing table operations.

Field names use the camelCase keys sent by the dashboard.
"""

from pydantic import BaseModel
from typing import Any, Optional


class DeleteListingsRequest(BaseModel):
    """
    Bulk delete request.

    Either recordsToDelete (key values) or selectedDate (YYYY-MM-DD) selects
    the rows; recordsToDelete wins when both are sent. recordsToDelete is
    left untyped so a non-list value is rejected with "Invalid input".
    """
    tableName: Optional[str] = None
    recordsToDelete: Optional[Any] = None
    selectedDate: Optional[str] = None
    userName: Optional[str] = None


class DeleteListingsResponse(BaseModel):
    message: str
    deleted: int
