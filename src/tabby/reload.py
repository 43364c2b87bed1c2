"""Reload broadcaster — tells live-reload clients that the site changed.

The watch session calls :meth:`ReloadBroadcaster.notify` after every
successful rebuild.  Each subscriber gets a :class:`ReloadEvent` on its own
bounded queue; how the event reaches a browser (SSE, websocket, polling)
is up to whoever consumes the queue.

Notification is fire-and-forget: a full subscriber queue drops the event
rather than blocking the rebuild loop.
"""

from __future__ import annotations

import asyncio
import threading
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tabby.rebuild.dispatcher import RebuildResult


@dataclass(frozen=True, slots=True)
class ReloadEvent:
    """A completed rebuild, as seen by reload clients.

    Attributes:
        scope: Name of the rebuilt scope (``assets``, ``content_page``, ...).
        page_count: Number of pages regenerated.
        elapsed_ms: Rebuild duration.

    """

    scope: str
    page_count: int
    elapsed_ms: float


@dataclass(frozen=True, slots=True)
class Subscription:
    """A connected reload client.

    Attributes:
        client_id: Unique identifier for this client.
        queue: Events waiting to be delivered to the client.

    """

    client_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    queue: asyncio.Queue[ReloadEvent] = field(
        default_factory=lambda: asyncio.Queue(maxsize=16), compare=False, hash=False
    )


class ReloadBroadcaster:
    """Fans reload notifications out to every subscribed client.

    Thread-safe: subscriber set protected by a lock.

    """

    def __init__(self) -> None:
        self._subscribers: set[Subscription] = set()
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self) -> Subscription:
        """Register a new client and return its subscription."""
        subscription = Subscription()
        with self._lock:
            self._subscribers.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscribers.discard(subscription)

    def notify(self, result: RebuildResult) -> int:
        """Queue a reload event for every subscriber.

        Returns:
            Number of clients notified.

        """
        event = ReloadEvent(
            scope=result.scope_name,
            page_count=result.page_count,
            elapsed_ms=result.elapsed_ms,
        )
        with self._lock:
            subscribers = frozenset(self._subscribers)

        count = 0
        for subscription in subscribers:
            try:
                subscription.queue.put_nowait(event)
                count += 1
            except asyncio.QueueFull:
                pass  # Slow client; it will catch up on the next rebuild
        return count

    async def events(self, subscription: Subscription) -> AsyncIterator[ReloadEvent]:
        """Yield reload events for *subscription* until cancelled."""
        try:
            while True:
                yield await subscription.queue.get()
        except (asyncio.CancelledError, GeneratorExit):
            return
        finally:
            self.unsubscribe(subscription)
