"""Asset handling — copy the assets folder into the generated site."""

from __future__ import annotations

import shutil
from pathlib import Path

# Files/directories skipped during asset copying
_HIDDEN_PREFIXES = (".", "_")


def copy_assets(source: Path, dest: Path) -> tuple[Path, ...]:
    """Recursively copy *source* into *dest*, preserving directory structure.

    Skips hidden files (names starting with ``.`` or ``_``) and anything
    inside ``__pycache__``.  A missing *source* copies nothing.

    Returns:
        The destination path of every copied file.

    """
    if not source.is_dir():
        return ()

    copied: list[Path] = []
    for src_file in sorted(source.rglob("*")):
        if not src_file.is_file():
            continue
        if "__pycache__" in src_file.parts:
            continue
        if src_file.name.startswith(_HIDDEN_PREFIXES):
            continue

        dest_file = dest / src_file.relative_to(source)
        dest_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_file, dest_file)
        copied.append(dest_file)

    return tuple(copied)
