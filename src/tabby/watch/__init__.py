"""Watch layer — filesystem events in, classified changes out.

Handles change classification and file watching.  The session that ties
them to the rebuild layer lives in ``tabby.watch.session``.
"""

from tabby.watch.classifier import ChangePath, Roots, classify, classify_change
from tabby.watch.source import FileWatcher, WatchEvent

__all__ = [
    "ChangePath",
    "FileWatcher",
    "Roots",
    "WatchEvent",
    "classify",
    "classify_change",
]
