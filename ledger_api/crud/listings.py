"""
Read and delete access to the listing tables filled by the scrapers.

These tables are owned by the scrapers, so their columns are reflected at
request time. Only table names from the configured allow-list are ever
turned into SQL identifiers.
"""

from typing import Any, Dict, List
from sqlalchemy import MetaData, Table, delete, literal, select
from sqlalchemy.exc import NoSuchTableError
from sqlalchemy.orm import Session

from ledger_api.core.config import settings
from ledger_api.core.exceptions import NotFound, UnknownTable

SCRIPT_STATUS_TABLE = "scripts_status"

# Key column used by recordsToDelete; unlisted listing tables use DEFAULT_KEY_COLUMN
DELETE_KEY_COLUMNS = {
    "tnledger_courts": "id",
    "tn_public_notice_probate_notice": "id",
    "tn_courts": "url",
}
DEFAULT_KEY_COLUMN = "tdn_no"

DATE_COLUMN = "date_ran"
# Tables whose date_ran holds a plain date rather than a midnight UTC timestamp
PLAIN_DATE_TABLES = {"tn_public_notice_probate_notice"}
MIDNIGHT_UTC_SUFFIX = "T00:00:00.000Z"


def listing_tables() -> List[str]:
    return list(settings.LISTING_TABLES)


def readable_tables() -> List[str]:
    """Tables exposed by GET /api/data; users is deliberately absent."""
    return listing_tables() + [SCRIPT_STATUS_TABLE]


def delete_key_column(table_name: str) -> str:
    return DELETE_KEY_COLUMNS.get(table_name, DEFAULT_KEY_COLUMN)


def format_run_date(table_name: str, selected_date: str) -> str:
    """Render a YYYY-MM-DD date the way the table stores date_ran."""
    if table_name in PLAIN_DATE_TABLES:
        return selected_date
    return selected_date + MIDNIGHT_UTC_SUFFIX


def reflect_table(db: Session, table_name: str) -> Table:
    """
    Load the table definition through the session's own connection.

    Raises:
        NotFound: If the table does not exist in the database
    """
    try:
        return Table(table_name, MetaData(), autoload_with=db.connection())
    except NoSuchTableError:
        raise NotFound(f"Table {table_name} not found")


def fetch_all(db: Session, table_name: str) -> List[Dict[str, Any]]:
    """
    Return every row of a readable table as a list of dicts.

    Raises:
        NotFound: If the table is not readable or does not exist
    """
    if table_name not in readable_tables():
        raise NotFound(f"Table {table_name} not found")

    table = reflect_table(db, table_name)
    result = db.execute(select(table))
    return [dict(row._mapping) for row in result]


def get_listing_table(db: Session, table_name: str) -> Table:
    """
    Reflect a table that bulk deletes may target.

    Raises:
        UnknownTable: If the table is not a configured listing table
    """
    if table_name not in listing_tables():
        raise UnknownTable(table_name)
    return reflect_table(db, table_name)


def delete_by_key(db: Session, table: Table, value: Any) -> int:
    """Delete the rows whose key column equals value. Does not commit."""
    column = table.c[delete_key_column(table.name)]
    result = db.execute(delete(table).where(column == value))
    return result.rowcount


def delete_by_date(db: Session, table: Table, selected_date: str) -> int:
    """Delete the rows scraped on selected_date. Does not commit."""
    run_date = format_run_date(table.name, selected_date)
    result = db.execute(delete(table).where(table.c[DATE_COLUMN] == literal(run_date)))
    return result.rowcount
