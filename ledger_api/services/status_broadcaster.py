"""
In-process fan-out of script status events to Server-Sent Events clients.

Every connected client owns a Subscription with its own bounded queue.
Publishing stores the new status, then places the event on every queue that
exists at that moment, so clients only see events published after they
subscribed. A client whose queue is full misses that event; nobody else is
affected.

All methods must be called from the event loop thread.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_api.crud import script_status as script_status_crud

logger = logging.getLogger(__name__)

# Queue marker that ends a subscription
_CLOSED = object()


class Subscription:
    """
    A single consumer of status events.

    Iterate with ``async for`` to receive events until the subscription is
    closed. Used as an async context manager it unsubscribes on exit.
    """

    def __init__(self, broadcaster: "StatusBroadcaster", max_queue_size: int):
        self._broadcaster = broadcaster
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_queue_size)
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, event: Dict[str, Any]) -> bool:
        """Queue an event without waiting. Returns False if it was dropped."""
        if self._closed:
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        return True

    async def get(self) -> Optional[Dict[str, Any]]:
        """Wait for the next event; None once the subscription is closed."""
        if self._closed and self._queue.empty():
            return None
        event = await self._queue.get()
        if event is _CLOSED:
            return None
        return event

    def close(self) -> None:
        """Stop the subscription and remove it from the broadcaster."""
        if self._closed:
            return
        self._closed = True
        self._broadcaster.unsubscribe(self)
        if self._queue.full():
            # Make room for the end marker; the oldest undelivered event is lost
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self):
        return self

    async def __anext__(self) -> Dict[str, Any]:
        event = await self.get()
        if event is None:
            raise StopAsyncIteration
        return event

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


class StatusBroadcaster:
    """Publish/subscribe hub for script status events."""

    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscriptions: List[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self) -> Subscription:
        """Register a consumer; it receives events published from now on."""
        subscription = Subscription(self, self.max_queue_size)
        self._subscriptions.append(subscription)
        logger.info(f"Status subscriber connected ({self.subscriber_count} active)")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription not in self._subscriptions:
            return
        self._subscriptions.remove(subscription)
        logger.info(f"Status subscriber disconnected ({self.subscriber_count} active)")

    def broadcast(self, event: Dict[str, Any]) -> int:
        """
        Deliver an event to every current subscriber.

        Returns:
            Number of subscribers that received the event
        """
        delivered = 0
        for subscription in list(self._subscriptions):
            if subscription.deliver(event):
                delivered += 1
            else:
                logger.warning(
                    f"Status queue full, dropping event for script {event.get('script')}"
                )
        return delivered

    def publish(self, db: Session, event: Dict[str, Any]) -> int:
        """
        Store the reported status, then fan the event out.

        A missing scripts_status row or a database error is logged and does
        not stop delivery.

        Returns:
            Number of subscribers that received the event
        """
        script = event.get("script")
        try:
            updated = script_status_crud.set_status(db, script, event.get("status"))
            if updated == 0:
                logger.warning(f"No scripts_status row for script {script}, status not stored")
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to store status for script {script}")

        return self.broadcast(event)

    def close(self) -> None:
        """End every open subscription (application shutdown)."""
        for subscription in list(self._subscriptions):
            subscription.close()
