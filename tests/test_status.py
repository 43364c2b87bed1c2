"""Tests for tabby.status — status line formatting."""

from __future__ import annotations

import pytest

from tabby import status
from tabby.config import TabbyConfig


@pytest.fixture
def quiet(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force verbose output off for the test."""
    monkeypatch.setattr(status, "_verbose", False)


class TestFormatting:
    """Helpers used to build status lines."""

    @pytest.mark.parametrize(
        ("elapsed_ms", "expected"),
        [(0.0, "0.000s"), (123.4, "0.123s"), (1500.0, "1.500s")],
    )
    def test_seconds(self, elapsed_ms: float, expected: str) -> None:
        assert status.seconds(elapsed_ms) == expected

    def test_plural(self) -> None:
        assert status.plural(1, "page") == "1 page"
        assert status.plural(0, "page") == "0 pages"
        assert status.plural(3, "page") == "3 pages"

    def test_highlight_keeps_text(self) -> None:
        assert "blog/post1" in status.yellow("blog/post1")
        assert "Double save" in status.bold("Double save")


class TestStatusLines:
    """Lines go to stderr; verbose lines only when enabled."""

    def test_info_done_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        status.info("Watching for changes")
        status.done("Successfully built 2 pages")
        status.error("Generating pages failed :(")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Watching for changes" in captured.err
        assert "Successfully built 2 pages" in captured.err
        assert "Generating pages failed :(" in captured.err

    @pytest.mark.usefixtures("quiet")
    def test_verbose_hidden_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        status.verbose("Only doing content changes")
        assert capsys.readouterr().err == ""

    @pytest.mark.usefixtures("quiet")
    def test_set_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        status.set_verbose(True)
        assert status.is_verbose()
        status.verbose("Only doing content changes")
        assert "Only doing content changes" in capsys.readouterr().err

    def test_banner(self, tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
        status.print_banner(TabbyConfig(root=tmp_path), "watch")
        err = capsys.readouterr().err
        assert "Tabby" in err
        assert "[watch]" in err
        assert str(tmp_path / "content") in err
