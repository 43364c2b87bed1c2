"""Debounce coalescer — folds bursts of change events into one rebuild.

Editors rarely produce a single clean event per save.  Every observed
change re-arms one countdown; when the quiet window passes without a new
event, a single :class:`PendingRebuild` is emitted.

Only the last path and the OR of every ``force_full`` request survive a
window.  A burst mixing a component edit and a content edit therefore
rebuilds for whichever came last, unless something in the window asked
for a full rebuild.

Double-save detection:
    Two modifications closer together than the quiet window are treated as
    an atomic delete+recreate by the editor and escalate to a full rebuild.
    The gap is measured between modifications, across window boundaries;
    additions and deletions neither trigger nor reset it.  The heuristic
    over-builds rather than under-builds.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tabby import status

if TYPE_CHECKING:
    from collections.abc import Callable

    from tabby.watch.classifier import ChangePath

DEFAULT_QUIET_WINDOW = 0.4


@dataclass(slots=True)
class PendingRebuild:
    """The coalesced unit of work for one quiet window.

    Attributes:
        last_path: The most recent change observed in the window.
        force_full: Sticky: once set in a window it stays set until dispatch.
        pending: True until a dispatcher consumes the rebuild.

    """

    last_path: ChangePath
    force_full: bool = False
    pending: bool = True


class DebounceCoalescer:
    """Debounces change observations into :class:`PendingRebuild` emissions.

    Runs on a single asyncio event loop.  Re-arming cancels the timer in
    flight before scheduling the next one, so no two timers can fire for
    the same window.

    Args:
        emit: Called with the coalesced rebuild once the window elapses.
        quiet_window: Seconds without events before emitting.
        double_save: Escalate to a full rebuild on rapid consecutive changes.
        clock: Monotonic clock used for double-save detection.

    """

    def __init__(
        self,
        emit: Callable[[PendingRebuild], None],
        *,
        quiet_window: float = DEFAULT_QUIET_WINDOW,
        double_save: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._emit = emit
        self._quiet_window = quiet_window
        self._double_save = double_save
        self._clock = clock
        self._pending: PendingRebuild | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._last_change: float | None = None

    @property
    def quiet_window(self) -> float:
        return self._quiet_window

    @property
    def pending(self) -> PendingRebuild | None:
        """The rebuild being accumulated in the current window, if any."""
        return self._pending

    @property
    def armed(self) -> bool:
        """Whether a countdown is currently scheduled."""
        return self._timer is not None

    def observe(self, change: ChangePath, force_full: bool = False) -> None:
        """Fold *change* into the pending rebuild and re-arm the countdown.

        Must be called from within the running event loop.

        """
        if change.kind == "modified":
            force_full = self._check_double_save() or force_full

        previous = self._pending
        sticky = previous.force_full if previous is not None else False
        self._pending = PendingRebuild(last_path=change, force_full=sticky or force_full)

        self._rearm()

    def flush(self) -> PendingRebuild | None:
        """Emit the pending rebuild immediately, skipping the rest of the window."""
        self._cancel_timer()
        return self._fire()

    def cancel(self) -> None:
        """Drop the pending rebuild and stop the countdown."""
        self._cancel_timer()
        self._pending = None

    def _check_double_save(self) -> bool:
        """Stamp this modification; True if it follows the previous one too closely."""
        now = self._clock()
        previous, self._last_change = self._last_change, now
        if previous is None:
            return False
        if self._double_save and now - previous < self._quiet_window:
            status.info(f"{status.bold('Double save detected')}; regenerating all files")
            return True
        status.verbose(f"Time since last change: {status.yellow(f'{(now - previous) * 1000:.0f}ms')}")
        return False

    def _rearm(self) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._quiet_window, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        self._fire()

    def _fire(self) -> PendingRebuild | None:
        pending = self._pending
        self._pending = None
        if pending is None:
            return None
        self._emit(pending)
        return pending
