"""Load TabbyConfig from tabby.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from tabby._errors import ConfigError
from tabby.config import TabbyConfig

_CONFIG_KEYS: frozenset[str] = frozenset({
    "content_dir",
    "components_dir",
    "assets_dir",
    "site_dir",
    "index_name",
    "homepage",
    "quiet_window_ms",
    "double_save",
    "prerender",
})

CONFIG_FILE_NAMES: tuple[str, ...] = ("tabby.yaml", "tabby.yml", "tabby.toml")


def load_config(root: Path, **overrides: object) -> TabbyConfig:
    """Load TabbyConfig from root, optionally merging tabby.yaml.

    Looks for tabby.yaml, tabby.yml, or tabby.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    are ignored so unset CLI flags don't clobber file values.

    Raises:
        ConfigError: If the config file is malformed or names unknown keys.

    """
    file_config = _read_tabby_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}

    unknown = set(merged) - _CONFIG_KEYS
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)

    return TabbyConfig(root=root, **merged)  # type: ignore[arg-type]


def _read_tabby_config(root: Path) -> dict[str, object]:
    """Read tabby config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("tabby.yaml", "tabby.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "tabby.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _extract_section(data, path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _extract_section(data, path)


def _extract_section(data: object, path: Path) -> dict[str, object]:
    """Flatten the ``folder`` and ``watch`` sections into config keys.

    Both a flat layout and the sectioned one are accepted::

        folder:
          content: pages
          components: layouts
        watch:
          quiet_window_ms: 250

    """
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)

    result: dict[str, object] = {}
    folder = data.get("folder")
    if isinstance(folder, dict):
        for key in ("content", "components", "assets", "site"):
            if key in folder:
                result[f"{key}_dir"] = folder[key]
        for key in ("index_name", "homepage"):
            if key in folder:
                result[key] = folder[key]
    watch = data.get("watch")
    if isinstance(watch, dict):
        result.update(watch)
    for k, v in data.items():
        if k not in ("folder", "watch"):
            result[k] = v
    return result
