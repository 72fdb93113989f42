"""
Listing table endpoints used by the dashboard.

- GET /api/data/{table_name}: all rows of a listing table (or scripts_status)
- POST /api/delete-listings: admin-only bulk delete
"""

import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ledger_api.core.database import get_db
from ledger_api.core.deps import require_token
from ledger_api.core.exceptions import APIError, InternalError
from ledger_api.crud import listings
from ledger_api.schemas.listing import DeleteListingsRequest, DeleteListingsResponse
from ledger_api.services import listing_service

router = APIRouter(prefix="/api", tags=["Listings"], dependencies=[Depends(require_token)])
logger = logging.getLogger(__name__)


@router.get("/data/{table_name}")
def get_table_data(table_name: str, db: Session = Depends(get_db)) -> List[Dict[str, Any]]:
    """Return every row of the table as a list of objects."""
    try:
        return listings.fetch_all(db, table_name)
    except APIError:
        raise
    except Exception as e:
        logger.exception(f"Error fetching data from {table_name}: {e}")
        raise InternalError()


@router.post("/delete-listings", response_model=DeleteListingsResponse)
def delete_listings(request: DeleteListingsRequest, db: Session = Depends(get_db)):
    """
    Delete listing rows by key (recordsToDelete) or by scrape date (selectedDate).

    Only the configured admin user may call this. The whole batch runs in one
    transaction and is rolled back on any failure.
    """
    try:
        deleted = listing_service.delete_listings(
            db,
            table_name=request.tableName,
            records=request.recordsToDelete,
            selected_date=request.selectedDate,
            user_name=request.userName,
        )
    except APIError:
        raise
    except Exception as e:
        logger.exception(f"Error deleting records: {e}")
        raise InternalError()

    return {"message": "Records deleted successfully", "deleted": deleted}
