"""Rebuild scopes — the minimal unit of work for a coalesced change.

A scope is derived from a :class:`~tabby.rebuild.coalescer.PendingRebuild`
and the dependency index, never built by hand.  Selection in priority order:

1. ``force_full`` set                         -> :class:`Full`
2. asset changed                              -> :class:`Assets`
3. content changed, page index present        -> :class:`ContentPage`
   content changed, no page index             -> :class:`Full`
4. component changed, known dependents        -> :class:`ComponentDependents`
   component changed, no known dependents     -> :class:`NoDependents`
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from tabby.watch.classifier import component_id, page_id

if TYPE_CHECKING:
    from tabby._types import ComponentID, PageID
    from tabby.config import TabbyConfig
    from tabby.rebuild.coalescer import PendingRebuild
    from tabby.rebuild.index import DependencyIndex


@dataclass(frozen=True, slots=True)
class Assets:
    """Copy the assets folder again; no pages are rendered."""


@dataclass(frozen=True, slots=True)
class ContentPage:
    """Re-render the single page that owns the changed content."""

    page_id: PageID


@dataclass(frozen=True, slots=True)
class ComponentDependents:
    """Re-render every page known to use the changed component."""

    component: ComponentID
    page_ids: tuple[PageID, ...]


@dataclass(frozen=True, slots=True)
class Full:
    """Rebuild every page of the site."""

    reason: str = field(default="", compare=False)


type RebuildScope = Assets | ContentPage | ComponentDependents | Full


@dataclass(frozen=True, slots=True)
class NoDependents:
    """A component changed but no rendered page is known to use it."""

    component: ComponentID


def page_directory(page: PageID, content_root: Path, homepage: str) -> Path:
    """Directory holding *page*'s index descriptor."""
    if page == homepage:
        return content_root
    return content_root / page


def has_page_index(page: PageID, config: TabbyConfig) -> bool:
    """Whether *page* still has a recognizable index descriptor on disk."""
    directory = page_directory(page, config.content_path, config.homepage)
    return (directory / config.index_file_name).is_file()


def select_scope(
    pending: PendingRebuild,
    config: TabbyConfig,
    index: DependencyIndex,
) -> RebuildScope | NoDependents:
    """Choose the rebuild scope for *pending*.

    Deterministic given the pending rebuild, the index, and whether the
    owning page's index descriptor exists.

    """
    change = pending.last_path

    if pending.force_full:
        return Full(reason="full rebuild requested")

    if change.category == "asset":
        return Assets()

    if change.category == "content":
        page = page_id(change.path, config.content_path, config.homepage)
        if page is None or not has_page_index(page, config):
            # The directory structure itself changed; a narrow rebuild is unsafe.
            return Full(reason="no page index for changed content")
        return ContentPage(page_id=page)

    component = component_id(change.path, config.components_path)
    dependents = index.get(component)
    if not dependents:
        return NoDependents(component=component)
    return ComponentDependents(component=component, page_ids=tuple(sorted(dependents)))
