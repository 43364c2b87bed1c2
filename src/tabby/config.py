"""Tabby configuration.

TabbyConfig is the central configuration object, frozen after creation.
It is the already-merged, read-only view of the site folders that the
rebuild orchestrator consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from tabby.watch.classifier import Roots


@dataclass(frozen=True, slots=True)
class TabbyConfig:
    """Configuration for a tabby site.

    Attributes:
        root: Path to the site root directory (the working directory the
              folders below are resolved against). Always resolved to an
              absolute path on construction.
        content_dir: Directory containing page folders (``index.yml`` + partials).
        components_dir: Directory containing layout components.
        assets_dir: Directory copied verbatim into the generated site.
        site_dir: Output directory for the generated site.
        index_name: Stem of the page index descriptor (``index`` -> ``index.yml``).
        homepage: Page identifier used for the content root itself.
        quiet_window_ms: Debounce window for coalescing change bursts.
        double_save: Escalate to a full rebuild when two changes land
            inside the quiet window.
        prerender: Run a full build when a watch session starts.

    """

    root: Path = field(default_factory=Path.cwd)
    content_dir: str = "content"
    components_dir: str = "src"
    assets_dir: str = "assets"
    site_dir: str = "site"
    index_name: str = "index"
    homepage: str = "index"
    quiet_window_ms: int = 400
    double_save: bool = True
    prerender: bool = True

    def __post_init__(self) -> None:
        # watchfiles reports absolute paths; keep every root comparable
        # with Path.is_relative_to().
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())

    @property
    def cwd(self) -> Path:
        """The directory all folders are relative to."""
        return self.root

    @property
    def content_path(self) -> Path:
        """Absolute path to content directory."""
        return self.root / self.content_dir

    @property
    def components_path(self) -> Path:
        """Absolute path to layout components directory."""
        return self.root / self.components_dir

    @property
    def assets_path(self) -> Path:
        """Absolute path to assets directory."""
        return self.root / self.assets_dir

    @property
    def site_path(self) -> Path:
        """Absolute path to the generated site."""
        return self.root / self.site_dir

    @property
    def index_file_name(self) -> str:
        """File name of the page index descriptor."""
        return f"{self.index_name}.yml"

    @property
    def roots(self) -> Roots:
        """The classifier roots for this site."""
        return Roots(
            assets_root=self.assets_path,
            content_root=self.content_path,
            components_root=self.components_path,
        )

    @property
    def quiet_window(self) -> float:
        """Debounce window in seconds."""
        return self.quiet_window_ms / 1000

    def relative(self, path: Path) -> str:
        """Render *path* relative to the site root for status output."""
        try:
            return str(path.relative_to(self.root))
        except ValueError:
            return str(path)
