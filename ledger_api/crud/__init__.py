"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from ledger_api.crud import listings, script_status, user

__all__ = ["listings", "script_status", "user"]
