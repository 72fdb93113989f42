"""
Script status endpoints.

- GET /status-updates: Server-Sent Events stream of status events
- POST /webhook: receives a status event from a scraper and publishes it
- PUT /api/status/{script_name}: marks a script as running
"""

import asyncio
import json
import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ledger_api.core.config import settings
from ledger_api.core.database import get_db
from ledger_api.core.deps import get_broadcaster, require_token
from ledger_api.core.exceptions import InternalError, NotFound
from ledger_api.crud import script_status as script_status_crud
from ledger_api.schemas.status import StatusEvent
from ledger_api.schemas.user import MessageResponse
from ledger_api.services.status_broadcaster import StatusBroadcaster

router = APIRouter(tags=["Status"])
logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_sse(event: Dict[str, Any]) -> str:
    return f"data: {json.dumps(event, default=str)}\n\n"


async def status_event_stream(
    request: Request,
    broadcaster: StatusBroadcaster,
    heartbeat_seconds: float,
) -> AsyncGenerator[str, None]:
    """
    Yield SSE chunks for every event published while the client is connected.

    A comment line is sent whenever the stream has been idle for
    heartbeat_seconds, and the client is checked for disconnect at the same
    time. The subscription is removed however the stream ends.
    """
    async with broadcaster.subscribe() as subscription:
        yield ": connected\n\n"
        while True:
            try:
                event = await asyncio.wait_for(subscription.get(), timeout=heartbeat_seconds)
            except asyncio.TimeoutError:
                if await request.is_disconnected():
                    break
                yield ": keep-alive\n\n"
                continue

            if event is None:
                # Broadcaster shut down
                break
            yield format_sse(event)


@router.get("/status-updates")
async def status_updates(
    request: Request,
    broadcaster: StatusBroadcaster = Depends(get_broadcaster),
):
    """Stream script status events as text/event-stream."""
    return StreamingResponse(
        status_event_stream(request, broadcaster, settings.SSE_HEARTBEAT_SECONDS),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/webhook", response_model=MessageResponse)
async def status_webhook(
    event: StatusEvent,
    db: Session = Depends(get_db),
    broadcaster: StatusBroadcaster = Depends(get_broadcaster),
):
    """
    Receive a status event from a scraper.

    The status is stored on the script's row and the full payload, extra
    fields included, is pushed to every connected /status-updates client.
    """
    payload = event.model_dump()
    logger.info(f"Received status webhook: {payload}")

    delivered = broadcaster.publish(db, payload)
    logger.debug(f"Status for {event.script} delivered to {delivered} subscribers")

    return {"message": "Data received successfully"}


@router.put(
    "/api/status/{script_name}",
    response_model=MessageResponse,
    dependencies=[Depends(require_token)],
)
def mark_script_running(script_name: str, db: Session = Depends(get_db)):
    """Set a script's status to "running"; 404 if the script has no status row."""
    try:
        updated = script_status_crud.set_status(db, script_name, "running")
    except Exception as e:
        logger.exception(f"Error updating status for {script_name}: {e}")
        raise InternalError()

    if updated == 0:
        raise NotFound(f"Variable {script_name} not found")

    logger.info(f"Script {script_name} marked as running")
    return {"message": "status altered!"}
