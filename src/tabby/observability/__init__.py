"""Rebuild observability — a queryable record of changes and rebuilds.

Quick Start:
    >>> from tabby.observability import BuildCollector, EventLog
    >>> log = EventLog()
    >>> collector = BuildCollector(log)
    >>> # Pass collector to WatchSession; query log afterwards

"""

from tabby.observability.collector import BuildCollector
from tabby.observability.events import (
    ChangeObserved,
    RebuildFinished,
    StackEvent,
    now_ns,
)
from tabby.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "ChangeObserved",
    "EventLog",
    "RebuildFinished",
    "StackEvent",
    "now_ns",
]
