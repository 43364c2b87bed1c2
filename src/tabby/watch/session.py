"""Watch session — the lifecycle of one incremental-rebuild run.

Owns every piece of mutable rebuild state for its lifetime: the file
watcher subscription, the debounce coalescer, the dependency index, and
the dispatcher.  Nothing is module-global, so independent sessions (and
tests) never share state.

Flow:
    start()      -> initial full build, then subscribe to filesystem events
    file change  -> classify -> coalescer.observe()
    quiet window -> PendingRebuild -> dispatcher.dispatch() -> notifier
    stop()       -> cancel the timer, stop the watcher, drain the consumer
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from tabby import status
from tabby._errors import FatalBuildError
from tabby.rebuild.coalescer import DebounceCoalescer
from tabby.rebuild.dispatcher import RebuildDispatcher
from tabby.rebuild.index import DependencyIndex
from tabby.watch.classifier import classify_change
from tabby.watch.source import FileWatcher

if TYPE_CHECKING:
    from collections.abc import Callable

    from tabby.config import TabbyConfig
    from tabby.observability.collector import BuildCollector
    from tabby.rebuild.coalescer import PendingRebuild
    from tabby.rebuild.dispatcher import RebuildResult
    from tabby.rebuild.protocols import ModuleCache, ReloadNotifier, Renderer
    from tabby.watch.source import WatchEvent


class WatchSession:
    """Watches a site and rebuilds the minimal scope for each change burst.

    Args:
        config: Resolved site configuration.
        renderer: Rendering collaborator.
        notifier: Told about every successful rebuild.
        module_cache: Layout component cache evicted before component rebuilds.
        watcher: Filesystem event source.  Defaults to a :class:`FileWatcher`
            over the content, components, and assets folders.
        collector: Optional observability collector.
        clock: Clock for double-save detection (tests inject a fake).

    """

    def __init__(
        self,
        config: TabbyConfig,
        renderer: Renderer,
        *,
        notifier: ReloadNotifier | None = None,
        module_cache: ModuleCache | None = None,
        watcher: FileWatcher | None = None,
        collector: BuildCollector | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config
        self._notifier = notifier
        self._collector = collector
        self._watcher = watcher or FileWatcher(
            config.root,
            (config.content_path, config.components_path, config.assets_path),
        )
        self.index = DependencyIndex()
        self.dispatcher = RebuildDispatcher(
            config,
            renderer,
            self.index,
            module_cache=module_cache,
            terminate=self._on_fatal,
            collector=collector,
        )
        coalescer_kwargs = {"clock": clock} if clock is not None else {}
        self.coalescer = DebounceCoalescer(
            self._schedule,
            quiet_window=config.quiet_window,
            double_save=config.double_save,
            **coalescer_kwargs,
        )
        self._consumer: asyncio.Task[None] | None = None
        self._builds: set[asyncio.Task[RebuildResult]] = set()
        self._stopped = asyncio.Event()
        self._fatal: BaseException | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def fatal_error(self) -> BaseException | None:
        """The error that ended the session, if the initial build failed."""
        return self._fatal

    async def start(self) -> None:
        """Pre-render the site (if configured) and start watching.

        Raises:
            FatalBuildError: If the initial full build fails.

        """
        if self._running:
            return
        self._stopped.clear()

        if self._config.prerender:
            result = await self.dispatcher.prerender()
            if self._fatal is not None:
                raise FatalBuildError(str(self._fatal)) from self._fatal
            self._notify(result)

        self._watcher.start()
        self._consumer = asyncio.create_task(self._consume_events(), name="tabby-session")
        self._running = True
        status.info("Watching for changes")

    async def stop(self) -> None:
        """Cancel pending work, stop the watcher, and wait for in-flight builds."""
        if not self._running and self._consumer is None:
            self._stopped.set()
            return
        self._running = False
        self.coalescer.cancel()
        await asyncio.to_thread(self._watcher.stop)
        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
            self._consumer = None
        if self._builds:
            await asyncio.gather(*self._builds, return_exceptions=True)
        self._stopped.set()

    async def run(self) -> None:
        """Start, then block until :meth:`stop` is called or a fatal error occurs.

        Raises:
            FatalBuildError: If the initial full build failed.

        """
        await self.start()
        try:
            await self._stopped.wait()
        finally:
            await self.stop()
        if self._fatal is not None:
            raise FatalBuildError(str(self._fatal)) from self._fatal

    def handle_event(self, event: WatchEvent) -> None:
        """Classify a raw filesystem event and fold it into the pending rebuild.

        Additions and deletions always ask for a full rebuild, since page
        discovery and the layout table may have changed.

        """
        change = classify_change(event.path, self._config.roots, event.kind)
        force_full = event.kind != "modified"
        verb = {"added": "added", "modified": "changed", "deleted": "deleted"}[event.kind]
        status.info(f"File has been {verb} {status.yellow(self._config.relative(event.path))}")
        if self._collector is not None:
            self._collector.record_change(change, force_full=force_full)
        self.coalescer.observe(change, force_full)

    async def _consume_events(self) -> None:
        async for event in self._watcher.events():
            try:
                self.handle_event(event)
            except Exception as exc:
                status.error(f"Could not handle change to {event.path}: {exc}")

    def _schedule(self, pending: PendingRebuild) -> None:
        """Coalescer callback: queue the rebuild on the dispatcher."""
        task = asyncio.create_task(self._build(pending))
        self._builds.add(task)
        task.add_done_callback(self._builds.discard)

    async def _build(self, pending: PendingRebuild) -> RebuildResult:
        result = await self.dispatcher.dispatch(pending)
        self._notify(result)
        return result

    def _notify(self, result: RebuildResult) -> None:
        if self._notifier is None or not result.succeeded:
            return
        try:
            self._notifier.notify(result)
        except Exception as exc:
            status.verbose(f"Reload notification failed: {exc}")

    def _on_fatal(self, exc: BaseException) -> None:
        """Dispatcher terminate hook: end the session without raising into the loop."""
        self._fatal = exc
        self._stopped.set()
