"""Event bus — ordered delivery of checkout events.

Listeners are synchronous callbacks run inside :meth:`EventBus.notify`, in
registration order, before any queue subscriber receives the event. State
owners such as the ledger register as listeners, so an observer reading from
its queue always sees state that already reflects the event.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from tinypay_checkout.notifications.events import RawEvent

logger = logging.getLogger(__name__)

_SUBSCRIBER_BUFFER = 100


class EventBus:
    """Asyncio fan-out of events to listeners and subscriber queues.

    Usage::

        bus = EventBus()
        bus.add_listener(ledger.handle_event)
        q = bus.add_subscriber("ui")
        await bus.notify(PaymentPending(hash="abc"))
        event = await q.get()
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[[RawEvent], None]] = []
        self._subscribers: dict[str, asyncio.Queue[RawEvent]] = {}

    @property
    def subscriber_count(self) -> int:
        """Number of registered queue subscribers."""
        return len(self._subscribers)

    def add_listener(self, callback: Callable[[RawEvent], None]) -> None:
        """Register a synchronous callback run for every event."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[RawEvent], None]) -> None:
        """Unregister a callback (no-op if absent)."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def add_subscriber(
        self, key: str, *, buffer: int = _SUBSCRIBER_BUFFER
    ) -> asyncio.Queue[RawEvent]:
        """Register a subscriber and return its output queue."""
        q: asyncio.Queue[RawEvent] = asyncio.Queue(maxsize=buffer)
        self._subscribers[key] = q
        return q

    def remove_subscriber(self, key: str) -> None:
        """Unregister a subscriber."""
        self._subscribers.pop(key, None)

    async def notify(self, event: RawEvent) -> None:  # noqa: ASYNC910
        """Deliver *event* to all listeners, then to all subscriber queues."""
        for callback in list(self._listeners):
            try:
                callback(event)
            except Exception:
                logger.exception("Listener %r failed on %s event", callback, event.type)
        for key, q in list(self._subscribers.items()):
            try:
                q.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Subscriber %s queue full, dropping %s event", key, event.type)
