"""Status output — human-readable, coloured status lines on stderr.

Every rebuild outcome is reported as one line here: success with elapsed
time, "no dependents", or the failure.  Detects ``NO_COLOR`` / ``TERM`` for
safe fallback.  Verbose lines are shown when ``TABBY_VERBOSE`` is set or
:func:`set_verbose` was called (``tabby watch --verbose``).
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabby.config import TabbyConfig


# ---------------------------------------------------------------------------
# ANSI helpers, respecting NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_ORANGE = "\033[38;5;214m" if _COLOR else ""

_verbose = bool(os.environ.get("TABBY_VERBOSE"))


def set_verbose(enabled: bool) -> None:
    """Toggle verbose status lines for the rest of the process."""
    global _verbose  # noqa: PLW0603
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def yellow(text: object) -> str:
    return f"{_YELLOW}{text}{_RESET}"


def bold(text: object) -> str:
    return f"{_BOLD}{text}{_RESET}"


def seconds(elapsed_ms: float) -> str:
    """Format a duration the way status lines show it (``0.123s``)."""
    return f"{elapsed_ms / 1000:.3f}s"


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


# ---------------------------------------------------------------------------
# Status lines
# ---------------------------------------------------------------------------

def info(message: str) -> None:
    print(f"  {_DIM}│{_RESET} {message}", file=sys.stderr)


def done(message: str) -> None:
    print(f"  {_GREEN}✔{_RESET} {message}", file=sys.stderr)


def error(message: str) -> None:
    print(f"  {_RED}✘ {message}{_RESET}", file=sys.stderr)


def verbose(message: str) -> None:
    if _verbose:
        print(f"  {_DIM}… {message}{_RESET}", file=sys.stderr)


def print_banner(config: TabbyConfig, mode: str) -> None:
    """Print the startup banner for ``build`` or ``watch``."""
    from tabby import __version__

    cat = "\u14DA\u1618\u14E2"  # ᓚᘏᗢ
    lines = [
        "",
        f"  {_ORANGE}{_BOLD}{cat}{_RESET}  Tabby {_DIM}v{__version__}{_RESET}  {_YELLOW}[{mode}]{_RESET}",
        f"  {_DIM}{'─' * 43}{_RESET}",
        f"  {_DIM}├─{_RESET} content:    {_DIM}{config.content_path}{_RESET}",
        f"  {_DIM}├─{_RESET} components: {_DIM}{config.components_path}{_RESET}",
        f"  {_DIM}├─{_RESET} assets:     {_DIM}{config.assets_path}{_RESET}",
        f"  {_DIM}└─{_RESET} output:     {_DIM}{config.site_path}{_RESET}",
        "",
    ]
    print("\n".join(lines), file=sys.stderr)
