"""Shared type definitions for tabby."""

from typing import Literal

# What kind of source file changed (determines rebuild scope)
type Category = Literal["asset", "content", "component"]

# Raw filesystem change reported by the watcher
type ChangeKind = Literal["added", "modified", "deleted"]

# Page identifier: the page directory relative to the content root
# (e.g. "blog/post1"), or the configured homepage name for the root.
type PageID = str

# Layout component identifier (e.g. "page", "homepage")
type ComponentID = str

# Result of a single dispatch
type Outcome = Literal["built", "no_dependents", "failed"]
