"""Event log — the recent history of a watch session.

Keeps the newest changes and rebuild outcomes in a fixed-size ring buffer
so a long-running ``tabby watch`` never grows without bound.  Queries can
narrow by event class, timestamp, and path.

Thread Safety:
    Guarded by a ``threading.Lock``; the watcher thread and the event loop
    may both append.

"""

import threading
from collections import Counter, deque
from typing import Any

from tabby.observability.events import RebuildFinished, StackEvent


def _event_path(event: StackEvent) -> str:
    if isinstance(event, RebuildFinished):
        return event.trigger_path
    return event.path


class EventLog:
    """Fixed-size store of session events; the oldest fall off first.

    Args:
        max_events: Capacity of the ring buffer.

    """

    __slots__ = ("_buffer", "_capacity", "_lock")

    def __init__(self, max_events: int = 5_000) -> None:
        self._capacity = max_events
        self._buffer: deque[StackEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        path: str | None = None,
        limit: int = 100,
    ) -> list[StackEvent]:
        """Matching events, newest first, at most *limit* of them.

        *path* matches as a substring of a change's path or of the path that
        triggered a rebuild.

        """
        matches: list[StackEvent] = []
        for event in reversed(self._snapshot()):
            if len(matches) == limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if event.timestamp_ns < since_ns:
                continue
            if path is not None and path not in _event_path(event):
                continue
            matches.append(event)
        return matches

    def recent(self, n: int = 20) -> list[StackEvent]:
        """The last *n* events in the order they happened."""
        return self._snapshot()[-n:]

    def clear(self) -> int:
        """Forget every event; returns how many there were."""
        with self._lock:
            dropped = len(self._buffer)
            self._buffer.clear()
        return dropped

    def stats(self) -> dict[str, Any]:
        """Totals per event class and per rebuild outcome."""
        events = self._snapshot()
        return {
            "total": len(events),
            "max_events": self._capacity,
            "by_type": dict(Counter(type(event).__name__ for event in events)),
            "by_outcome": dict(Counter(
                event.outcome for event in events if isinstance(event, RebuildFinished)
            )),
        }

    def _snapshot(self) -> list[StackEvent]:
        with self._lock:
            return list(self._buffer)

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
