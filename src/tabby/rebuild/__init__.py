"""Rebuild layer — from coalesced change to minimal render.

Connects debounced change bursts to the renderer through scope selection
and the page -> component dependency index.
"""

from tabby.rebuild.coalescer import DebounceCoalescer, PendingRebuild
from tabby.rebuild.dispatcher import DispatchState, RebuildDispatcher, RebuildResult
from tabby.rebuild.index import DependencyIndex
from tabby.rebuild.protocols import (
    ModuleCache,
    PageResult,
    ReloadNotifier,
    Renderer,
    SiteContent,
)
from tabby.rebuild.scope import (
    Assets,
    ComponentDependents,
    ContentPage,
    Full,
    NoDependents,
    RebuildScope,
    select_scope,
)

__all__ = [
    "Assets",
    "ComponentDependents",
    "ContentPage",
    "DebounceCoalescer",
    "DependencyIndex",
    "DispatchState",
    "Full",
    "ModuleCache",
    "NoDependents",
    "PageResult",
    "RebuildDispatcher",
    "RebuildResult",
    "RebuildScope",
    "ReloadNotifier",
    "Renderer",
    "SiteContent",
    "select_scope",
]
