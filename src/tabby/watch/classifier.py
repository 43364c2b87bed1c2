"""Change classifier — maps a changed path to its rebuild category.

The category decides which rebuild path a change takes:

- Asset changed -> copy the assets folder again
- Content changed -> re-render the owning page (or everything)
- Component changed -> re-render the pages that used it
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabby._types import Category, ChangeKind, ComponentID, PageID


@dataclass(frozen=True, slots=True)
class Roots:
    """Absolute, normalized source roots used for classification."""

    assets_root: Path
    content_root: Path
    components_root: Path


@dataclass(frozen=True, slots=True)
class ChangePath:
    """A changed path together with its detected category.

    Attributes:
        path: Absolute path to the changed file (may no longer exist).
        category: Which source tree the file belongs to.
        kind: The raw filesystem change that produced it.

    """

    path: Path
    category: Category
    kind: ChangeKind = "modified"


def classify(path: Path, roots: Roots) -> Category:
    """Determine the category of a changed file based on its location.

    Never fails: a path outside the asset and component roots is content.
    No existence check is made, so deleted files classify the same way.

    """
    if path.is_relative_to(roots.assets_root):
        return "asset"
    if path.is_relative_to(roots.components_root):
        return "component"
    return "content"


def classify_change(path: Path, roots: Roots, kind: ChangeKind = "modified") -> ChangePath:
    """Classify *path* and wrap it in a :class:`ChangePath`."""
    return ChangePath(path=path, category=classify(path, roots), kind=kind)


def component_id(path: Path, components_root: Path) -> ComponentID:
    """Return the layout component identifier for a component file.

    Components are identified by file stem, which is the value a page's
    index descriptor names under ``layout:``.  ``src/layout/page.py`` and
    ``src/page.py`` both identify the ``page`` component.

    """
    if path.is_relative_to(components_root):
        path = path.relative_to(components_root)
    return path.stem


def page_id(path: Path, content_root: Path, homepage: str) -> PageID | None:
    """Return the page a content file belongs to.

    The page is the file's directory relative to the content root, in
    POSIX form (``content/blog/post1/index.yml`` -> ``blog/post1``).  Files
    directly inside the content root belong to the homepage.  Returns
    ``None`` for paths outside the content root.

    """
    directory = path.parent
    if not directory.is_relative_to(content_root):
        return None
    relative = directory.relative_to(content_root)
    if not relative.parts:
        return homepage
    return relative.as_posix()
