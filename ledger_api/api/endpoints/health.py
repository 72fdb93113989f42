"""
Root and health check endpoints.
"""

import logging
from typing import Any, Dict
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from ledger_api.core.database import get_db
from ledger_api.core.deps import get_broadcaster
from ledger_api.services.status_broadcaster import StatusBroadcaster

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/")
async def root():
    return {"message": "Hello, World!"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    """
    return {"status": "healthy", "timestamp": _timestamp()}


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
async def detailed_health_check(
    db: Session = Depends(get_db),
    broadcaster: StatusBroadcaster = Depends(get_broadcaster),
) -> Dict[str, Any]:
    """
    Health check with database connectivity and SSE subscriber count.
    """
    health_status = {
        "status": "healthy",
        "timestamp": _timestamp(),
        "checks": {},
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": "Database connection failed",
        }

    health_status["checks"]["status_stream"] = {
        "status": "healthy",
        "subscribers": broadcaster.subscriber_count,
    }

    return health_status
