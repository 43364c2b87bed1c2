"""Event model for rebuild observability.

Defines the events recorded while a watch session runs: every classified
change and every finished rebuild cycle.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class ChangeObserved:
    """A filesystem change was classified and handed to the coalescer.

    Attributes:
        path: Absolute path of the changed file.
        category: ``asset``, ``content`` or ``component``.
        kind: ``added``, ``modified`` or ``deleted``.
        force_full: Whether the change itself asked for a full rebuild.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    category: Literal["asset", "content", "component"]
    kind: Literal["added", "modified", "deleted"]
    force_full: bool
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RebuildFinished:
    """A rebuild cycle completed (successfully or not).

    Attributes:
        scope: Name of the selected scope (``assets``, ``content_page``,
            ``component_dependents``, ``full``, ``no_dependents``).
        outcome: ``built``, ``no_dependents`` or ``failed``.
        trigger_path: The change that triggered the rebuild.
        page_count: Number of pages rendered.
        duration_ms: Time from dispatch to completion.
        error: Rendered error message for failed rebuilds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    scope: str
    outcome: Literal["built", "no_dependents", "failed"]
    trigger_path: str
    page_count: int
    duration_ms: float
    error: str
    timestamp_ns: int


type StackEvent = ChangeObserved | RebuildFinished


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
