"""Tests for tabby._cli — argument parsing and command dispatch."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tabby import status
from tabby._cli import _build_parser, main
from tabby._errors import ConfigError


class TestBuildParser:
    """_build_parser — CLI argument parsing."""

    def test_build_default_args(self) -> None:
        args = _build_parser().parse_args(["build"])
        assert args.command == "build"
        assert args.root == "."
        assert args.site_dir is None

    def test_build_with_root_and_site(self) -> None:
        args = _build_parser().parse_args(["build", "my-site/", "--site", "public"])
        assert args.root == "my-site/"
        assert args.site_dir == "public"

    def test_watch_default_args(self) -> None:
        args = _build_parser().parse_args(["watch"])
        assert args.command == "watch"
        assert args.root == "."
        assert args.quiet_window_ms is None
        assert args.prerender is None
        assert args.double_save is None

    def test_watch_all_flags(self) -> None:
        args = _build_parser().parse_args([
            "watch", "my-site/",
            "--quiet-window", "250",
            "--no-prerender",
            "--no-double-save",
        ])
        assert args.root == "my-site/"
        assert args.quiet_window_ms == 250
        assert args.prerender is False
        assert args.double_save is False

    def test_verbose_flag(self) -> None:
        args = _build_parser().parse_args(["-v", "build"])
        assert args.verbose is True

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "tabby" in capsys.readouterr().out


class TestMain:
    """main() — dispatch to tabby.app."""

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "usage" in capsys.readouterr().out

    def test_build_dispatch(self, monkeypatch: pytest.MonkeyPatch) -> None:
        build = MagicMock()
        monkeypatch.setattr("tabby.app.build", build)

        main(["build", "my-site/", "--site", "public"])

        build.assert_called_once_with(root="my-site/", site_dir="public")

    def test_watch_dispatch(self, monkeypatch: pytest.MonkeyPatch) -> None:
        dev = MagicMock()
        monkeypatch.setattr("tabby.app.dev", dev)

        main(["watch", "--quiet-window", "100", "--no-double-save"])

        dev.assert_called_once_with(
            root=".",
            site_dir=None,
            quiet_window_ms=100,
            prerender=None,
            double_save=False,
        )

    def test_tabby_error_exits_1(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("tabby.app.build", MagicMock(side_effect=ConfigError("bad config")))

        with pytest.raises(SystemExit) as exc_info:
            main(["build"])

        assert exc_info.value.code == 1
        assert "bad config" in capsys.readouterr().err

    def test_verbose_enables_status(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("tabby.app.build", MagicMock())
        monkeypatch.setattr(status, "_verbose", False)

        main(["--verbose", "build"])

        assert status.is_verbose()

    def test_build_end_to_end(self, tmp_site: Path) -> None:
        main(["build", str(tmp_site)])
        assert (tmp_site / "site" / "index.html").is_file()
        assert (tmp_site / "site" / "assets" / "css" / "site.css").is_file()
