"""
Admin-only bulk deletion of listing rows.
"""

import logging
from typing import Any, Optional
from sqlalchemy.orm import Session

from ledger_api.core.config import settings
from ledger_api.core.exceptions import MissingParameter, Unauthorized, ValidationError
from ledger_api.crud import listings

logger = logging.getLogger(__name__)

# recordsToDelete values the dashboard sends when no keys were selected
EMPTY_RECORDS = ("", 0, False)


def _records_missing(records: Any) -> bool:
    return records is None or (not isinstance(records, (list, dict)) and records in EMPTY_RECORDS)


def _is_key_value(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def delete_listings(
    db: Session,
    table_name: Optional[str],
    records: Optional[Any],
    selected_date: Optional[str],
    user_name: Optional[str],
) -> int:
    """
    Delete listing rows by key values or by scrape date in one transaction.

    Either every delete is committed or, on any failure, none is.

    Returns:
        Total number of rows deleted

    Raises:
        Unauthorized: If user_name is not the configured admin
        MissingParameter: If the table or both selectors are missing
        UnknownTable: If table_name is not a configured listing table
        ValidationError: If records is not a non-empty list of key values
    """
    if user_name != settings.ADMIN_USERNAME:
        raise Unauthorized("Unauthorized: Only admin can perform deletions")

    if not table_name:
        raise MissingParameter("Table name is required")

    if _records_missing(records):
        records = None

    if records is None and not selected_date:
        raise MissingParameter("Either recordsToDelete or selectedDate is required")

    table = listings.get_listing_table(db, table_name)

    if records is not None and (
        not isinstance(records, list)
        or len(records) == 0
        or not all(_is_key_value(record) for record in records)
    ):
        raise ValidationError("Invalid input")

    deleted = 0
    try:
        if records is not None:
            for record in records:
                deleted += listings.delete_by_key(db, table, record)
        else:
            deleted = listings.delete_by_date(db, table, selected_date)
        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Delete batch on {table_name} failed, rolled back")
        raise

    selector = f"{len(records)} keys" if records is not None else f"date {selected_date}"
    logger.info(f"Admin {user_name} deleted {deleted} rows from {table_name} ({selector})")
    return deleted

