"""Build collector — records watch-session activity into the event log.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabby.observability.events import ChangeObserved, RebuildFinished, now_ns
from tabby.observability.log import EventLog

if TYPE_CHECKING:
    from tabby.rebuild.dispatcher import RebuildResult
    from tabby.watch.classifier import ChangePath


class BuildCollector:
    """Event collector for one or more watch sessions.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_change(self, change: ChangePath, *, force_full: bool = False) -> None:
        self._log.append(
            ChangeObserved(
                path=str(change.path),
                category=change.category,
                kind=change.kind,
                force_full=force_full,
                timestamp_ns=now_ns(),
            )
        )

    def record_rebuild(self, result: RebuildResult) -> None:
        self._log.append(
            RebuildFinished(
                scope=result.scope_name,
                outcome=result.outcome,
                trigger_path=str(result.trigger.path) if result.trigger is not None else "",
                page_count=result.page_count,
                duration_ms=result.elapsed_ms,
                error=str(result.error) if result.error is not None else "",
                timestamp_ns=now_ns(),
            )
        )
