"""Tests for tabby._errors."""

from tabby._errors import ConfigError, FatalBuildError, RenderError, TabbyError


class TestErrorHierarchy:
    """All tabby errors inherit from TabbyError."""

    def test_tabby_error_is_exception(self) -> None:
        assert issubclass(TabbyError, Exception)

    def test_config_error_inherits(self) -> None:
        assert issubclass(ConfigError, TabbyError)

    def test_render_error_inherits(self) -> None:
        assert issubclass(RenderError, TabbyError)

    def test_fatal_build_error_inherits(self) -> None:
        assert issubclass(FatalBuildError, TabbyError)

    def test_catch_all_tabby_errors(self) -> None:
        """All specific errors are catchable via TabbyError."""
        for error_cls in (ConfigError, RenderError, FatalBuildError):
            try:
                raise error_cls("test")
            except TabbyError as exc:
                assert str(exc) == "test"
