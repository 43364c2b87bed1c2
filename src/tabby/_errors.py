"""Tabby error hierarchy.

All tabby-specific errors inherit from TabbyError for easy catching.
"""


class TabbyError(Exception):
    """Base error for all tabby operations."""


class ConfigError(TabbyError):
    """Invalid or missing configuration."""


class RenderError(TabbyError):
    """A page, layout component, or asset could not be rendered."""


class FatalBuildError(TabbyError):
    """The initial full build of a session failed.

    There is no previously generated site to keep serving, so the watch
    session cannot continue.
    """
