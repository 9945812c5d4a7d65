# subpaths/core/discovery/__init__.py
"""
Subpath discovery for subpaths.

This package walks a directory tree, applies type, visibility, depth,
symlink and include/exclude rules per entry, and returns the matching paths.
"""
from .types import (
    DEFAULT_OPTIONS,
    EntryDecision,
    EntryDetails,
    EntryType,
    TraversalContext,
    TraversalOptions,
    fill_options,
)
from .pattern_matching import compile_glob_patterns_to_spec, matches
from .walker import decide_entry, list_absolute_subpaths
from .path_resolution import list_subpaths, list_subpaths_sync, relativize_paths

__all__ = [
    "DEFAULT_OPTIONS",
    "EntryDecision",
    "EntryDetails",
    "EntryType",
    "TraversalContext",
    "TraversalOptions",
    "compile_glob_patterns_to_spec",
    "decide_entry",
    "fill_options",
    "list_absolute_subpaths",
    "list_subpaths",
    "list_subpaths_sync",
    "matches",
    "relativize_paths",
]
