"""Collaborator interfaces consumed by the rebuild orchestrator.

The orchestrator never parses or renders anything itself.  It talks to a
renderer, a reload notifier, and a module cache through these protocols;
``tabby.render`` and ``tabby.reload`` ship reference implementations.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tabby._types import ComponentID, PageID
    from tabby.rebuild.dispatcher import RebuildResult


@dataclass(frozen=True, slots=True)
class PageResult:
    """One rendered page.

    Attributes:
        page_id: The page that was rendered.
        output_path: Where the generated HTML was written.
        components: Layout components used while rendering the page.

    """

    page_id: PageID
    output_path: Path
    components: frozenset[ComponentID] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class SiteContent:
    """Everything a full build needs: every page and the layout table."""

    pages: tuple[PageID, ...]
    layouts: Mapping[ComponentID, Path]


class Renderer(Protocol):
    """Turns content pages into HTML.  Any method may raise on failure."""

    async def render_assets(self, source: Path, dest: Path) -> None: ...

    async def render_content_page(self, page_id: PageID) -> PageResult | None: ...

    async def render_pages(
        self,
        page_ids: Sequence[PageID],
        layouts: Mapping[ComponentID, Path],
    ) -> list[PageResult]: ...

    async def prepare(self) -> SiteContent: ...

    def layouts(self) -> Mapping[ComponentID, Path]: ...


class ReloadNotifier(Protocol):
    """Fire-and-forget notification after a rebuild cycle."""

    def notify(self, result: RebuildResult) -> None: ...


class ModuleCache(Protocol):
    """Process-wide cache of loaded layout components."""

    def invalidate(self, path: Path) -> int: ...
