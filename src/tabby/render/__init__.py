"""Reference rendering collaborators.

The rebuild orchestrator only depends on the protocols in
``tabby.rebuild.protocols``; these are the implementations ``tabby build``
and ``tabby watch`` use out of the box.
"""

from tabby.render.assets import copy_assets
from tabby.render.components import ModuleRegistry
from tabby.render.site import SiteRenderer

__all__ = [
    "ModuleRegistry",
    "SiteRenderer",
    "copy_assets",
]
