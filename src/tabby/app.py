"""Tabby application entry points — build once, or watch and rebuild.

``build`` renders the whole site a single time.  ``dev`` renders it,
then keeps a :class:`~tabby.watch.session.WatchSession` running so that
each edit regenerates only the pages it affects.
"""

import asyncio
from pathlib import Path

from tabby import status
from tabby.config import TabbyConfig
from tabby.config_loader import load_config
from tabby.observability import BuildCollector, EventLog
from tabby.rebuild.dispatcher import RebuildDispatcher, RebuildResult
from tabby.rebuild.index import DependencyIndex
from tabby.rebuild.protocols import ReloadNotifier
from tabby.render import ModuleRegistry, SiteRenderer
from tabby.watch.session import WatchSession


async def _copy_assets(config: TabbyConfig, renderer: SiteRenderer) -> None:
    await renderer.render_assets(config.assets_path, config.site_path / config.assets_dir)


def build(root: str | Path = ".", **kwargs: object) -> RebuildResult:
    """Render every page and copy the assets folder.

    Args:
        root: Path to the site root directory.
        **kwargs: Override TabbyConfig fields.

    Raises:
        FatalBuildError: If the build fails.

    """
    config = load_config(Path(root), **kwargs)
    status.print_banner(config, "build")

    renderer = SiteRenderer(config)
    dispatcher = RebuildDispatcher(
        config, renderer, DependencyIndex(), module_cache=renderer.modules
    )

    async def _build() -> RebuildResult:
        result = await dispatcher.prerender()
        await _copy_assets(config, renderer)
        return result

    return asyncio.run(_build())


def dev(
    root: str | Path = ".",
    *,
    notifier: ReloadNotifier | None = None,
    **kwargs: object,
) -> None:
    """Build the site, then rebuild incrementally on every change.

    Runs until interrupted.  The initial build is fatal on failure; later
    failures are reported and watching continues.

    Args:
        root: Path to the site root directory.
        notifier: Told about every successful rebuild, for example a
            :class:`~tabby.reload.ReloadBroadcaster` feeding a live-reload
            server.
        **kwargs: Override TabbyConfig fields.

    Raises:
        FatalBuildError: If the initial build fails.

    """
    config = load_config(Path(root), **kwargs)
    status.print_banner(config, "watch")

    modules = ModuleRegistry()
    renderer = SiteRenderer(config, modules)
    session = WatchSession(
        config,
        renderer,
        notifier=notifier,
        module_cache=modules,
        collector=BuildCollector(EventLog()),
    )

    async def _dev() -> None:
        await _copy_assets(config, renderer)
        await session.run()

    try:
        asyncio.run(_dev())
    except KeyboardInterrupt:
        status.info("Stopped watching")
