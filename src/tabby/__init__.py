"""Tabby — a static-site builder that rebuilds only what changed.

Edit a page, and only that page is regenerated.  Edit a layout component,
and only the pages rendered with it are regenerated.  Add or delete a file,
or save twice in quick succession, and the whole site is rebuilt.

Quick start::

    import tabby

    tabby.build("my-site/")       # Render everything once
    tabby.dev("my-site/")         # Render, then rebuild incrementally

    reloads = tabby.ReloadBroadcaster()  # Live-reload clients subscribe here
    tabby.dev("my-site/", notifier=reloads)

"""

__version__ = "0.1.0-dev"
__all__ = [
    "ReloadBroadcaster",
    "TabbyConfig",
    "WatchSession",
    "__version__",
    "build",
    "dev",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tabby`` fast; watchfiles and the renderer are only
    imported when a build or watch is actually requested.
    """
    if name == "TabbyConfig":
        from tabby.config import TabbyConfig

        return TabbyConfig

    if name == "ReloadBroadcaster":
        from tabby.reload import ReloadBroadcaster

        return ReloadBroadcaster

    if name == "WatchSession":
        from tabby.watch.session import WatchSession

        return WatchSession

    if name == "build":
        from tabby.app import build

        return build

    if name == "dev":
        from tabby.app import dev

        return dev

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
