"""Tabby CLI — tabby build / tabby watch.

Entry point for the ``tabby`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the tabby CLI."""
    parser = argparse.ArgumentParser(
        prog="tabby",
        description="Static-site builder with incremental rebuilds.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show verbose status lines",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # tabby build
    build_parser = subparsers.add_parser(
        "build",
        help="Render every page once",
    )
    build_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    build_parser.add_argument("--site", dest="site_dir", default=None, help="Output directory")

    # tabby watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Build, then rebuild incrementally on every change",
    )
    watch_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    watch_parser.add_argument("--site", dest="site_dir", default=None, help="Output directory")
    watch_parser.add_argument(
        "--quiet-window",
        dest="quiet_window_ms",
        type=int,
        default=None,
        help="Milliseconds without changes before rebuilding (default 400)",
    )
    watch_parser.add_argument(
        "--no-prerender",
        dest="prerender",
        action="store_false",
        default=None,
        help="Skip the initial full build",
    )
    watch_parser.add_argument(
        "--no-double-save",
        dest="double_save",
        action="store_false",
        default=None,
        help="Don't escalate rapid consecutive saves to a full rebuild",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from tabby import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from tabby import status
    from tabby._errors import TabbyError
    from tabby.app import build, dev

    if args.verbose:
        status.set_verbose(True)

    try:
        if args.command == "build":
            build(root=args.root, site_dir=args.site_dir)
        elif args.command == "watch":
            dev(
                root=args.root,
                site_dir=args.site_dir,
                quiet_window_ms=args.quiet_window_ms,
                prerender=args.prerender,
                double_save=args.double_save,
            )
    except TabbyError as exc:
        status.error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
