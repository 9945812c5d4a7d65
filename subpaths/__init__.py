# subpaths/__init__.py
"""List the filtered subpaths of a directory, optionally following symlinks."""

__version__ = "0.1.0"

from subpaths.core.discovery import (
    EntryDetails,
    EntryType,
    TraversalOptions,
    list_subpaths,
    list_subpaths_sync,
)

__all__ = [
    "__version__",
    "EntryDetails",
    "EntryType",
    "TraversalOptions",
    "list_subpaths",
    "list_subpaths_sync",
]
