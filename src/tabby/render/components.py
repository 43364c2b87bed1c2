"""Component registry — load layout components and evict them on change.

Layout components are plain Python files under the components folder that
export a ``render(page) -> str`` function::

    components/page.py          -> component "page"
    components/layout/home.py   -> component "home"

Loaded modules are cached in ``sys.modules`` so a full build imports each
component once.  Because of that cache an edited component keeps its old
code until it is evicted: :meth:`ModuleRegistry.invalidate` drops every
cached module whose file lives under a given path.
"""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from tabby._errors import RenderError

_PACKAGE = "tabby_components"


class ModuleRegistry:
    """Loads component modules by file path and evicts them by path."""

    def module_name(self, py_file: Path, components_root: Path) -> str:
        """Dotted module name for a component: layout/home.py -> tabby_components.layout.home"""
        if py_file.is_relative_to(components_root):
            parts = py_file.relative_to(components_root).with_suffix("").parts
        else:
            parts = py_file.with_suffix("").parts[-1:]
        return ".".join((_PACKAGE, *parts))

    def load(self, py_file: Path, components_root: Path) -> ModuleType:
        """Import *py_file*, reusing the cached module when one exists.

        Raises:
            RenderError: If the module cannot be imported.

        """
        name = self.module_name(py_file, components_root)
        cached = sys.modules.get(name)
        if cached is not None and getattr(cached, "__file__", None) == str(py_file):
            return cached

        spec = importlib.util.spec_from_file_location(name, py_file)
        if spec is None or spec.loader is None:
            msg = f"Cannot load layout component {py_file}"
            raise RenderError(msg)

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(name, None)
            msg = f"Failed to load layout component {py_file}: {exc}"
            raise RenderError(msg) from exc
        return module

    def invalidate(self, path: Path) -> int:
        """Evict every cached component loaded from *path* or from beneath it.

        Only modules this registry loaded are considered, so tabby's own
        modules survive even when the components folder contains them.

        Returns:
            Number of modules evicted.

        """
        target = path.resolve()
        stale = [
            name
            for name, module in list(sys.modules.items())
            if name.startswith(f"{_PACKAGE}.") and _loaded_from(module, target)
        ]
        for name in stale:
            sys.modules.pop(name, None)
        importlib.invalidate_caches()
        return len(stale)


def _loaded_from(module: ModuleType | None, target: Path) -> bool:
    file = getattr(module, "__file__", None)
    if not file:
        return False
    return Path(file).resolve().is_relative_to(target)
