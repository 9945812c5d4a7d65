# subpaths/core/discovery/path_resolution.py
import asyncio
import os
from typing import Any, Iterable, List, Optional, Union

import structlog

from subpaths.core.discovery.types import TraversalContext, TraversalOptions, fill_options
from subpaths.core.discovery.walker import list_absolute_subpaths

log = structlog.get_logger(__name__)

StartPath = Union[str, "os.PathLike[str]"]

def relativize_paths(subpaths: Iterable[str], start_path: str) -> List[str]:
    # rewrites absolute results relative to the start directory.
    return [os.path.relpath(subpath, start_path) for subpath in subpaths]

async def list_subpaths(
    path: StartPath,
    options: Optional[TraversalOptions] = None,
    **overrides: Any,
) -> List[str]:
    """
    Lists every entry below `path` that passes the traversal options.

    `options` and keyword overrides are merged over the defaults once, here.
    Results are absolute unless `return_relative` is set. Order follows the
    directory listings and is not sorted.
    """
    effective_options = fill_options(options, **overrides)
    start_path = os.path.abspath(os.fspath(path))
    log.info(
        "subpath_listing_started",
        path=start_path,
        max_depth=effective_options.max_depth,
        follow_symlinks=effective_options.follow_symlinks,
    )

    subpaths = await list_absolute_subpaths(
        start_path, effective_options, TraversalContext(root_path=start_path)
    )
    log.info("subpath_listing_complete", path=start_path, count=len(subpaths))

    if effective_options.return_relative:
        return relativize_paths(subpaths, start_path)
    return subpaths

def list_subpaths_sync(
    path: StartPath,
    options: Optional[TraversalOptions] = None,
    **overrides: Any,
) -> List[str]:
    # blocking wrapper for callers without a running event loop.
    return asyncio.run(list_subpaths(path, options, **overrides))
