"""Shared test fixtures for tabby."""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from tabby.config import TabbyConfig
from tabby.rebuild.protocols import PageResult, SiteContent


class FakeRenderer:
    """In-memory renderer that records every call.

    Pages render with the layout named in ``page_layouts`` (``page`` by
    default).  Set ``failures[method] = exc`` to make a method raise.
    """

    def __init__(
        self,
        pages: Sequence[str] = (),
        *,
        layouts: Mapping[str, Path] | None = None,
        page_layouts: Mapping[str, str] | None = None,
    ) -> None:
        self.pages = tuple(pages)
        self.layout_table = dict(layouts or {"page": Path("/s/page.py")})
        self.page_layouts = dict(page_layouts or {})
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[object, ...]] = []

    @property
    def call_names(self) -> list[str]:
        return [str(call[0]) for call in self.calls]

    async def render_assets(self, source: Path, dest: Path) -> None:
        self._call("render_assets", source, dest)

    async def render_content_page(self, page_id: str) -> PageResult | None:
        self._call("render_content_page", page_id)
        return self._result(page_id)

    async def render_pages(
        self, page_ids: Sequence[str], layouts: Mapping[str, Path]
    ) -> list[PageResult]:
        self._call("render_pages", tuple(page_ids))
        return [self._result(page) for page in page_ids]

    async def prepare(self) -> SiteContent:
        self._call("prepare")
        return SiteContent(pages=self.pages, layouts=dict(self.layout_table))

    def layouts(self) -> dict[str, Path]:
        return dict(self.layout_table)

    def _call(self, name: str, *args: object) -> None:
        self.calls.append((name, *args))
        failure = self.failures.get(name)
        if failure is not None:
            raise failure

    def _result(self, page_id: str) -> PageResult:
        layout = self.page_layouts.get(page_id, "page")
        return PageResult(
            page_id=page_id,
            output_path=Path("/site") / page_id / "index.html",
            components=frozenset({layout}),
        )


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """Create a minimal site structure for testing.

    Returns the site root with content/, src/, and assets/ folders::

        content/index.yml               (homepage, layout: homepage)
        content/blog/post1/index.yml    (layout: page)
        content/blog/post1/body.md
        content/blog/post2/index.yml    (layout: page)
        src/layout/page.py
        src/layout/homepage.py
        assets/css/site.css

    """
    content = tmp_path / "content"
    (content / "blog" / "post1").mkdir(parents=True)
    (content / "blog" / "post2").mkdir(parents=True)
    (content / "index.yml").write_text("layout: homepage\ntitle: Home\n")
    (content / "blog" / "post1" / "index.yml").write_text("layout: page\ntitle: Post 1\n")
    (content / "blog" / "post1" / "body.md").write_text("# Hello\n\nFirst post.\n")
    (content / "blog" / "post2" / "index.yml").write_text("title: Post 2\n")

    layout = tmp_path / "src" / "layout"
    layout.mkdir(parents=True)
    (layout / "page.py").write_text(
        'def render(page):\n'
        '    return f"<html><h1>{page[\'title\']}</h1>{page[\'partials\']}</html>"\n'
    )
    (layout / "homepage.py").write_text(
        'def render(page):\n'
        '    return f"<html><h1>Welcome to {page[\'title\']}</h1></html>"\n'
    )

    css = tmp_path / "assets" / "css"
    css.mkdir(parents=True)
    (css / "site.css").write_text("body { margin: 0; }\n")

    return tmp_path


@pytest.fixture
def site_config(tmp_site: Path) -> TabbyConfig:
    """TabbyConfig for ``tmp_site``."""
    return TabbyConfig(root=tmp_site)


@pytest.fixture
def short_roots(tmp_path: Path) -> TabbyConfig:
    """A site laid out as content=c/, components=s/, assets=a/ with one page.

    ``c/blog/post1/index.yml`` exists; ``c/blog/draft/`` has no index.
    """
    (tmp_path / "c" / "blog" / "post1").mkdir(parents=True)
    (tmp_path / "c" / "blog" / "post1" / "index.yml").write_text("title: Post 1\n")
    (tmp_path / "c" / "blog" / "draft").mkdir(parents=True)
    (tmp_path / "s" / "layout").mkdir(parents=True)
    (tmp_path / "a" / "css").mkdir(parents=True)
    return TabbyConfig(
        root=tmp_path,
        content_dir="c",
        components_dir="s",
        assets_dir="a",
    )


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer(pages=("blog/post1", "blog/post2"))


@pytest.fixture
def make_renderer() -> type[FakeRenderer]:
    """The FakeRenderer class, for tests that need a custom page set."""
    return FakeRenderer


@pytest.fixture(autouse=True)
def _evict_layout_components():
    """Drop layout components loaded during a test from sys.modules."""
    yield
    for name in [n for n in sys.modules if n.startswith("tabby_components.")]:
        del sys.modules[name]
