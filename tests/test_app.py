"""Tests for tabby.app — the build and dev entry points."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from tabby._errors import ConfigError, FatalBuildError
from tabby.app import build, dev
from tabby.rebuild.scope import Full
from tabby.reload import ReloadBroadcaster


class TestBuild:
    """build() — one full render plus an asset copy."""

    def test_renders_every_page(self, tmp_site: Path) -> None:
        result = build(tmp_site)

        assert result.succeeded
        assert isinstance(result.scope, Full)
        assert result.page_count == 3
        site = tmp_site / "site"
        assert (site / "index.html").is_file()
        assert (site / "blog" / "post1" / "index.html").is_file()
        assert (site / "blog" / "post2" / "index.html").is_file()
        assert (site / "assets" / "css" / "site.css").is_file()

    def test_site_dir_override(self, tmp_site: Path) -> None:
        build(tmp_site, site_dir="public")
        assert (tmp_site / "public" / "index.html").is_file()

    def test_reads_config_file(self, tmp_site: Path) -> None:
        (tmp_site / "tabby.yaml").write_text("folder:\n  site: out\n")
        build(tmp_site)
        assert (tmp_site / "out" / "index.html").is_file()

    def test_broken_layout_is_fatal(self, tmp_site: Path) -> None:
        (tmp_site / "src" / "layout" / "page.py").write_text("def render(page):\n    return None\n")

        with pytest.raises(FatalBuildError, match="expected str"):
            build(tmp_site)

    def test_unknown_override(self, tmp_site: Path) -> None:
        with pytest.raises(ConfigError):
            build(tmp_site, port=3000)


class TestDev:
    """dev() — session wiring and failures before watching starts."""

    def test_broken_initial_build_is_fatal(self, tmp_site: Path) -> None:
        (tmp_site / "content" / "blog" / "post1" / "index.yml").write_text("layout: nowhere\n")

        with pytest.raises(FatalBuildError, match="nowhere"):
            dev(tmp_site)

    def test_assets_copied_before_initial_build(self, tmp_site: Path) -> None:
        (tmp_site / "content" / "index.yml").write_text("layout: nowhere\n")

        with pytest.raises(FatalBuildError):
            dev(tmp_site)

        assert (tmp_site / "site" / "assets" / "css" / "site.css").is_file()

    def test_notifier_reaches_session(
        self, tmp_site: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        session_class = MagicMock()
        session_class.return_value.run = AsyncMock()
        monkeypatch.setattr("tabby.app.WatchSession", session_class)
        broadcaster = ReloadBroadcaster()

        dev(tmp_site, notifier=broadcaster)

        assert session_class.call_args.kwargs["notifier"] is broadcaster
        session_class.return_value.run.assert_awaited_once()

    def test_no_notifier_by_default(
        self, tmp_site: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        session_class = MagicMock()
        session_class.return_value.run = AsyncMock()
        monkeypatch.setattr("tabby.app.WatchSession", session_class)

        dev(tmp_site)

        assert session_class.call_args.kwargs["notifier"] is None
