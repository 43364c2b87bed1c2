"""Dependency index — which pages were rendered with which layout component.

Answers "component X changed, which pages need re-rendering?".  The index
is filled as a side effect of successful renders and lives for the whole
watch session; nothing is persisted across runs.

Entries are never removed.  A page that was deleted stays listed under its
component until the next full rebuild, so renderers must skip requests for
pages that no longer exist.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from tabby import status

if TYPE_CHECKING:
    from tabby._types import ComponentID, PageID


class DependencyIndex:
    """Reverse mapping from layout component to the pages that use it.

    Owned by a single watch session and only mutated from its event loop.

    """

    __slots__ = ("_pages",)

    def __init__(self) -> None:
        self._pages: defaultdict[ComponentID, set[PageID]] = defaultdict(set)

    def get(self, component: ComponentID) -> frozenset[PageID]:
        """Pages rendered with *component*; empty if none are known."""
        pages = self._pages.get(component)
        if pages is None:
            return frozenset()
        return frozenset(pages)

    def record(self, page: PageID, component: ComponentID) -> None:
        """Remember that *page* was rendered with *component*.

        Idempotent: recording an existing pair is a no-op.

        """
        pages = self._pages[component]
        if page in pages:
            return
        status.verbose(f"Keeping track of the page {status.yellow(page)} for layout {status.yellow(component)}")
        pages.add(page)

    def components(self) -> frozenset[ComponentID]:
        """All components with at least one known dependent."""
        return frozenset(name for name, pages in self._pages.items() if pages)

    def snapshot(self) -> dict[ComponentID, tuple[PageID, ...]]:
        """A sorted, immutable copy of the index for diagnostics."""
        return {
            name: tuple(sorted(pages))
            for name, pages in sorted(self._pages.items())
            if pages
        }

    def __contains__(self, component: object) -> bool:
        return bool(self._pages.get(component))  # type: ignore[call-overload]

    def __len__(self) -> int:
        return sum(1 for pages in self._pages.values() if pages)
