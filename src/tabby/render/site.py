"""Site renderer — the file-system renderer used by ``tabby build`` and ``tabby watch``.

A page is a directory under the content folder holding an index descriptor
(``index.yml``).  The descriptor is YAML; its ``layout`` key names the
layout component that renders the page (``page`` when omitted).  Markdown
files beside the descriptor are rendered with Patitas and handed to the
layout as ``partials``::

    content/blog/post1/index.yml    ->  site/blog/post1/index.html
    content/blog/post1/body.md          (partial)
    content/index.yml               ->  site/index.html  (homepage)

Rendering itself runs in a worker thread so the watch loop stays free to
receive change events.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from patitas import Markdown

from tabby import status
from tabby._errors import RenderError
from tabby.rebuild.protocols import PageResult, SiteContent
from tabby.rebuild.scope import page_directory
from tabby.render.assets import copy_assets
from tabby.render.components import ModuleRegistry
from tabby.watch.classifier import page_id as page_id_for

if TYPE_CHECKING:
    from tabby._types import ComponentID, PageID
    from tabby.config import TabbyConfig

DEFAULT_LAYOUT = "page"
DOCTYPE = "<!DOCTYPE html>"


def _strip_frontmatter(source: str) -> str:
    """Strip YAML frontmatter from markdown source, returning the body."""
    if not source.startswith("---"):
        return source
    end = source.find("\n---", 3)
    if end == -1:
        return source
    return source[end + 4:].lstrip("\n")


class SiteRenderer:
    """Renders content pages through Python layout components.

    Args:
        config: Resolved site configuration.
        modules: Component registry.  Share it with the watch session so
            that cache busting and loading see the same modules.

    """

    def __init__(self, config: TabbyConfig, modules: ModuleRegistry | None = None) -> None:
        self._config = config
        self._modules = modules if modules is not None else ModuleRegistry()
        # Must match for every page so partials render consistently.
        self._markdown = Markdown(plugins=["table"])

    @property
    def modules(self) -> ModuleRegistry:
        return self._modules

    # ----- Renderer protocol -----

    async def render_assets(self, source: Path, dest: Path) -> None:
        copied = await asyncio.to_thread(copy_assets, source, dest)
        status.verbose(f"Copied {status.plural(len(copied), 'asset')}")

    async def render_content_page(self, page_id: PageID) -> PageResult | None:
        return await asyncio.to_thread(self._render_page, page_id, self.layouts())

    async def render_pages(
        self,
        page_ids: Sequence[PageID],
        layouts: Mapping[ComponentID, Path],
    ) -> list[PageResult]:
        return await asyncio.to_thread(self._render_many, tuple(page_ids), layouts)

    async def prepare(self) -> SiteContent:
        """Discover every page and the layout table for a full build."""
        return await asyncio.to_thread(
            lambda: SiteContent(pages=self.discover_pages(), layouts=self.layouts())
        )

    def layouts(self) -> dict[ComponentID, Path]:
        """Map each layout component name to its file."""
        root = self._config.components_path
        if not root.is_dir():
            return {}

        table: dict[ComponentID, Path] = {}
        for py_file in sorted(root.rglob("*.py")):
            if py_file.name.startswith("_") or "__pycache__" in py_file.parts:
                continue
            if py_file.stem in table:
                status.verbose(
                    f"Layout {status.yellow(py_file.stem)} is defined twice; "
                    f"using {table[py_file.stem]}"
                )
                continue
            table[py_file.stem] = py_file
        return table

    # ----- Discovery -----

    def discover_pages(self) -> tuple[PageID, ...]:
        """Every page under the content folder, in sorted order."""
        content = self._config.content_path
        if not content.is_dir():
            return ()
        pages = {
            page_id_for(descriptor, content, self._config.homepage)
            for descriptor in content.rglob(self._config.index_file_name)
        }
        return tuple(sorted(page for page in pages if page is not None))

    def output_path(self, page: PageID) -> Path:
        if page == self._config.homepage:
            return self._config.site_path / "index.html"
        return self._config.site_path / page / "index.html"

    # ----- Rendering -----

    def _render_many(
        self, page_ids: tuple[PageID, ...], layouts: Mapping[ComponentID, Path]
    ) -> list[PageResult]:
        results: list[PageResult] = []
        for page in page_ids:
            result = self._render_page(page, layouts)
            if result is not None:
                results.append(result)
        return results

    def _render_page(
        self, page: PageID, layouts: Mapping[ComponentID, Path]
    ) -> PageResult | None:
        """Render one page, or skip it when it no longer exists.

        Raises:
            RenderError: On an invalid descriptor, unknown layout, or a
                layout component that fails.

        """
        directory = page_directory(page, self._config.content_path, self._config.homepage)
        descriptor = directory / self._config.index_file_name
        if not descriptor.is_file():
            status.verbose(f"Skipping missing page {status.yellow(page)}")
            return None

        data = self._read_descriptor(descriptor)
        layout = str(data.get("layout", DEFAULT_LAYOUT))
        layout_file = layouts.get(layout)
        if layout_file is None:
            msg = f"Layout {layout!r} used by {page!r} was not found in {self._config.components_path}"
            raise RenderError(msg)

        module = self._modules.load(layout_file, self._config.components_path)
        render = getattr(module, "render", None)
        if not callable(render):
            msg = f"Layout component {layout_file} must define render(page)"
            raise RenderError(msg)

        context = self._build_context(page, directory, data)
        try:
            html = render(context)
        except Exception as exc:
            msg = f"Layout {layout!r} failed while rendering {page!r}: {exc}"
            raise RenderError(msg) from exc
        if not isinstance(html, str):
            msg = f"Layout {layout!r} returned {type(html).__name__}, expected str"
            raise RenderError(msg)

        if not html.lstrip().upper().startswith("<!DOCTYPE"):
            html = f"{DOCTYPE}\n{html}"

        output = self.output_path(page)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(html, encoding="utf-8")
        return PageResult(page_id=page, output_path=output, components=frozenset({layout}))

    def _read_descriptor(self, descriptor: Path) -> dict[str, Any]:
        try:
            data = yaml.safe_load(descriptor.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            msg = f"Cannot read page index {descriptor}: {exc}"
            raise RenderError(msg) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            msg = f"Page index {descriptor} must be a mapping, got {type(data).__name__}"
            raise RenderError(msg)
        return data

    def _build_context(
        self, page: PageID, directory: Path, data: dict[str, Any]
    ) -> dict[str, Any]:
        """The mapping a layout component's ``render(page)`` receives."""
        partials = [
            self._markdown(_strip_frontmatter(md.read_text(encoding="utf-8")))
            for md in sorted(directory.glob("*.md"))
        ]
        url = "/" if page == self._config.homepage else f"/{page}/"
        return {
            **data,
            "id": page,
            "url": url,
            "partials": "\n".join(partials),
        }
