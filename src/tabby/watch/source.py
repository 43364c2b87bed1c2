"""File watcher — the filesystem event source for a watch session.

Monitors the content, components, and assets folders.  Files that already
exist when watching starts are not reported; only changes made afterwards
produce events.

A folder that does not exist yet is watched through its nearest existing
ancestor inside the site root, so creating it later is still picked up.
Events from anywhere else under that ancestor (the output folder, for
one) are filtered out.

The watcher runs watchfiles in a background thread and bridges events to
an asyncio queue owned by the session's event loop.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change, DefaultFilter, watch

from tabby._errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from tabby._types import ChangeKind


@dataclass(frozen=True, slots=True)
class WatchEvent:
    """A raw filesystem change.

    Attributes:
        kind: Type of filesystem change.
        path: Absolute path to the changed file.

    """

    kind: ChangeKind
    path: Path


# Mapping from watchfiles Change enum to our kind literals.
_CHANGE_KIND_MAP: dict[Change, ChangeKind] = {
    Change.added: "added",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


class FolderFilter(DefaultFilter):
    """watchfiles filter keeping only paths inside the given folders.

    Builds on :class:`watchfiles.DefaultFilter`, so editor swap files and
    VCS directories stay ignored as well.

    """

    def __init__(self, folders: Sequence[Path]) -> None:
        self.folders = tuple(folders)
        super().__init__()

    def __call__(self, change: Change, path: str) -> bool:
        if not super().__call__(change, path):
            return False
        changed = Path(path)
        return any(changed.is_relative_to(folder) for folder in self.folders)


def watch_targets(root: Path, folders: Sequence[Path]) -> tuple[Path, ...]:
    """Directories to hand to watchfiles so every folder in *folders* is covered.

    Each folder maps to itself if it exists, otherwise to its nearest
    existing ancestor that is still inside *root*.  Targets nested in
    another target are dropped.

    """
    found: set[Path] = set()
    for folder in folders:
        candidate = folder
        while not candidate.is_dir() and candidate != root and root in candidate.parents:
            candidate = candidate.parent
        if candidate.is_dir():
            found.add(candidate)
    return tuple(
        target for target in sorted(found)
        if not any(other in target.parents for other in found)
    )


class FileWatcher:
    """Watches a set of folders and yields :class:`WatchEvent` objects.

    Restartable: ``stop()`` followed by ``start()`` resumes watching with a
    fresh background thread.

    Args:
        root: Site root; missing folders are watched through their nearest
            existing ancestor up to here.
        paths: Folders to report changes for.
        debounce: watchfiles' own grouping window in milliseconds.  Kept
            short; the session's coalescer does the real debouncing.
        step: watchfiles polling step in milliseconds.

    """

    def __init__(
        self,
        root: Path,
        paths: Sequence[Path],
        *,
        debounce: int = 50,
        step: int = 50,
    ) -> None:
        self._root = root
        self._paths = tuple(paths)
        self._debounce = debounce
        self._step = step
        self._queue: asyncio.Queue[WatchEvent] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def paths(self) -> tuple[Path, ...]:
        return self._paths

    @property
    def is_running(self) -> bool:
        """Whether the watcher background thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching in a background thread.

        Must be called from the event loop that will consume ``events()``.

        Raises:
            ConfigError: If none of the folders can be watched, which only
                happens when the site root itself is missing.

        """
        if self.is_running:
            return

        targets = watch_targets(self._root, self._paths)
        if not targets:
            msg = f"Nothing to watch: {self._root} is not a directory"
            raise ConfigError(msg)

        self._loop = asyncio.get_running_loop()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            args=(targets,),
            name="tabby-watcher",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the watcher to stop and wait for the thread to finish.

        Blocks for up to a few seconds; async callers should run it in a
        worker thread.

        """
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    async def events(self) -> AsyncIterator[WatchEvent]:
        """Async iterator over changes, ending once the watcher stops."""
        while self.is_running or not self._queue.empty():
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout=0.5)
            except TimeoutError:
                continue
            yield event

    def _watch_loop(self, targets: tuple[Path, ...]) -> None:
        """Background thread: run watchfiles and push events to the loop."""
        loop = self._loop
        assert loop is not None

        for raw_changes in watch(
            *targets,
            watch_filter=FolderFilter(self._paths),
            stop_event=self._stop_event,
            debounce=self._debounce,
            step=self._step,
        ):
            for change_type, path_str in sorted(raw_changes, key=lambda c: c[1]):
                event = WatchEvent(
                    kind=_CHANGE_KIND_MAP.get(change_type, "modified"),
                    path=Path(path_str),
                )
                loop.call_soon_threadsafe(self._queue.put_nowait, event)
