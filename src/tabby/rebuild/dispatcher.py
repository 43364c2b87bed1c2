"""Rebuild dispatcher — turns a coalesced change into exactly one render call.

Orchestrates one rebuild cycle:
    1. Select the scope for the pending rebuild (``select_scope``)
    2. Evict stale layout components from the module cache
    3. Call the renderer for that scope
    4. Record page -> component dependencies from successful renders
    5. Report the outcome as a status line and a ``RebuildResult``

State machine::

    IDLE -> SCOPING -> BUILDING -> IDLE
                                -> FAILED   (initial full build failed)

Render failures are caught here and never escape into the watch loop.  A
scope that cannot be selected (an unreadable page folder, say) becomes a
full rebuild, whose own failure is then handled like any other.  The
one exception to recovering is a failed full build before any full build
has succeeded: there is no good site to keep serving, so the dispatcher
enters ``FAILED`` and calls its ``terminate`` callback.

Dispatches are serialized with an ``asyncio.Lock``: a rebuild requested
while another is running waits for it instead of racing on the output
directory.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tabby import status
from tabby._errors import FatalBuildError
from tabby.rebuild.scope import (
    Assets,
    ComponentDependents,
    ContentPage,
    Full,
    NoDependents,
    RebuildScope,
    select_scope,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from tabby._types import Outcome
    from tabby.config import TabbyConfig
    from tabby.observability.collector import BuildCollector
    from tabby.rebuild.coalescer import PendingRebuild
    from tabby.rebuild.index import DependencyIndex
    from tabby.rebuild.protocols import ModuleCache, PageResult, Renderer
    from tabby.watch.classifier import ChangePath


class DispatchState(Enum):
    IDLE = "idle"
    SCOPING = "scoping"
    BUILDING = "building"
    FAILED = "failed"


_SCOPE_NAMES: dict[type, str] = {
    Assets: "assets",
    ContentPage: "content_page",
    ComponentDependents: "component_dependents",
    Full: "full",
    NoDependents: "no_dependents",
}


@dataclass(frozen=True, slots=True)
class RebuildResult:
    """Outcome of a single dispatch.

    Attributes:
        scope: The scope that was selected.
        outcome: ``built``, ``no_dependents`` or ``failed``.
        trigger: The change that caused the rebuild (None for the pre-render).
        page_count: Number of pages rendered.
        elapsed_ms: Wall time from dispatch to completion.
        error: The render error for failed rebuilds.
        message: The status line reported for this outcome.

    """

    scope: RebuildScope | NoDependents
    outcome: Outcome
    trigger: ChangePath | None = None
    page_count: int = 0
    elapsed_ms: float = 0.0
    error: BaseException | None = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.outcome == "built"

    @property
    def scope_name(self) -> str:
        return _SCOPE_NAMES[type(self.scope)]


def _raise_fatal(exc: BaseException) -> None:
    msg = f"Initial build failed: {exc}"
    raise FatalBuildError(msg) from exc


class RebuildDispatcher:
    """Selects the rebuild scope for a change and drives the renderer.

    Args:
        config: Resolved site configuration.
        renderer: Rendering collaborator.
        index: Dependency index grown by successful page renders.
        module_cache: Cache of loaded layout components, evicted before
            component-triggered and full rebuilds.
        terminate: Called with the error when the initial full build fails.
            Defaults to raising :class:`~tabby._errors.FatalBuildError`.
        collector: Optional observability collector.

    """

    def __init__(
        self,
        config: TabbyConfig,
        renderer: Renderer,
        index: DependencyIndex,
        *,
        module_cache: ModuleCache | None = None,
        terminate: Callable[[BaseException], None] = _raise_fatal,
        collector: BuildCollector | None = None,
    ) -> None:
        self._config = config
        self._renderer = renderer
        self._index = index
        self._module_cache = module_cache
        self._terminate = terminate
        self._collector = collector
        self._state = DispatchState.IDLE
        self._lock = asyncio.Lock()
        self._has_built_full = False

    @property
    def state(self) -> DispatchState:
        return self._state

    @property
    def has_built_full(self) -> bool:
        """Whether a full build has succeeded in this session."""
        return self._has_built_full

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def prerender(self) -> RebuildResult:
        """Run the initial full build that seeds the dependency index."""
        async with self._lock:
            return await self._run(Full(reason="initial build"), None)

    async def dispatch(self, pending: PendingRebuild) -> RebuildResult:
        """Consume *pending* and run the rebuild it calls for."""
        async with self._lock:
            pending.pending = False
            if self._state is DispatchState.FAILED:
                return RebuildResult(
                    scope=Full(), outcome="failed", trigger=pending.last_path,
                    message="Session has failed; ignoring change",
                )
            self._state = DispatchState.SCOPING
            scope = await self._select_scope(pending)
            return await self._run(scope, pending.last_path)

    async def _select_scope(self, pending: PendingRebuild) -> RebuildScope | NoDependents:
        """Pick the scope off the loop; fall back to a full rebuild if that fails."""
        try:
            return await asyncio.to_thread(select_scope, pending, self._config, self._index)
        except Exception as exc:
            status.error(f"Could not work out what to rebuild: {type(exc).__name__}: {exc}")
            return Full(reason="scope selection failed")

    async def _run(
        self, scope: RebuildScope | NoDependents, trigger: ChangePath | None
    ) -> RebuildResult:
        t0 = time.perf_counter()

        if isinstance(scope, Full) or (trigger is not None and trigger.category == "component"):
            self._evict_components()

        if isinstance(scope, NoDependents):
            result = self._report_no_dependents(scope, trigger)
            self._state = DispatchState.IDLE
            return self._finish(result)

        self._state = DispatchState.BUILDING
        try:
            pages = await self._render(scope)
        except Exception as exc:
            elapsed_ms = (time.perf_counter() - t0) * 1000
            failure = self._finish(self._report_failure(scope, trigger, exc, elapsed_ms))
        else:
            failure = None

        if failure is not None:
            if self._state is DispatchState.FAILED:
                self._terminate(failure.error)  # type: ignore[arg-type]
            return failure

        if isinstance(scope, (Full, ComponentDependents)):
            for page in pages:
                for component in page.components:
                    self._index.record(page.page_id, component)
        if isinstance(scope, Full):
            self._has_built_full = True

        elapsed_ms = (time.perf_counter() - t0) * 1000
        message = self._success_message(scope, pages, elapsed_ms)
        status.done(message)
        self._state = DispatchState.IDLE
        return self._finish(RebuildResult(
            scope=scope,
            outcome="built",
            trigger=trigger,
            page_count=len(pages),
            elapsed_ms=elapsed_ms,
            message=message,
        ))

    async def _render(self, scope: RebuildScope) -> list[PageResult]:
        """Make exactly the render call *scope* maps to."""
        renderer = self._renderer
        match scope:
            case Assets():
                status.verbose("Only doing assets changes")
                await renderer.render_assets(
                    self._config.assets_path,
                    self._config.site_path / self._config.assets_dir,
                )
                return []
            case ContentPage(page_id=page):
                status.verbose("Only doing content changes")
                result = await renderer.render_content_page(page)
                return [result] if result is not None else []
            case ComponentDependents(component=component, page_ids=page_ids):
                status.verbose(f"Changes effected {status.yellow(', '.join(page_ids))} via {component}")
                layouts = await asyncio.to_thread(renderer.layouts)
                return list(await renderer.render_pages(page_ids, layouts))
            case Full():
                content = await renderer.prepare()
                return list(await renderer.render_pages(content.pages, content.layouts))
        msg = f"Unknown rebuild scope: {scope!r}"
        raise TypeError(msg)

    def _evict_components(self) -> None:
        """Drop cached layout components so edits take effect."""
        if self._module_cache is None:
            return
        try:
            evicted = self._module_cache.invalidate(self._config.components_path)
        except Exception as exc:
            status.verbose(f"Could not evict cached components: {exc}")
            return
        if evicted:
            status.verbose(f"Evicted {status.plural(evicted, 'cached component')}")

    def _report_no_dependents(
        self, scope: NoDependents, trigger: ChangePath | None
    ) -> RebuildResult:
        where = self._config.relative(trigger.path) if trigger is not None else scope.component
        message = f"No pages were found to be attached to {status.yellow(where)}."
        status.info(message)
        status.info("Consider a double-save to render all pages.")
        return RebuildResult(scope=scope, outcome="no_dependents", trigger=trigger, message=message)

    def _report_failure(
        self,
        scope: RebuildScope,
        trigger: ChangePath | None,
        exc: Exception,
        elapsed_ms: float,
    ) -> RebuildResult:
        fatal = isinstance(scope, Full) and not self._has_built_full
        match scope:
            case Assets():
                message = "An error occurred while trying to copy the assets folder"
            case ContentPage(page_id=page):
                message = f"An error occurred while trying to generate {status.yellow(page)}"
            case ComponentDependents():
                message = "An error occurred while trying to generate the dependent pages"
            case _:
                message = (
                    "Trying to initialize the pages failed." if fatal else "Generating pages failed :("
                )
        status.error(message)
        status.error(f"{type(exc).__name__}: {exc}")

        self._state = DispatchState.FAILED if fatal else DispatchState.IDLE
        return RebuildResult(
            scope=scope,
            outcome="failed",
            trigger=trigger,
            elapsed_ms=elapsed_ms,
            error=exc,
            message=message,
        )

    def _success_message(
        self, scope: RebuildScope, pages: list[PageResult], elapsed_ms: float
    ) -> str:
        site = status.yellow(self._config.relative(self._config.site_path))
        took = f"in {status.yellow(status.seconds(elapsed_ms))}"
        match scope:
            case Assets():
                return f"Successfully built {status.yellow('assets')} folder to {site} {took}"
            case ContentPage(page_id=page):
                return f"Successfully built {status.yellow(page)} {took}"
            case _ if pages:
                return f"Successfully built {status.yellow(status.plural(len(pages), 'page'))} to {site} {took}"
            case _:
                return f"No pages have been built to {site} {took}"

    def _finish(self, result: RebuildResult) -> RebuildResult:
        if self._collector is not None:
            self._collector.record_rebuild(result)
        return result
