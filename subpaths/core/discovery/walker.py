# subpaths/core/discovery/walker.py
"""
Recursive, asynchronous subpath enumeration.

Every child of a directory is visited as its own task and the per-child
results are joined in listing order. Filesystem failures never abort the
walk: an unreadable or vanished branch simply contributes nothing.
"""
import asyncio
import inspect
import os
import stat
from typing import List

import structlog

from subpaths.core.discovery.pattern_matching import matches
from subpaths.core.discovery.types import (
    EntryDecision,
    EntryDetails,
    EntryType,
    TraversalContext,
    TraversalOptions,
)
from subpaths.exceptions import TraversalContractError

log = structlog.get_logger(__name__)


def classify_entry(entry_stat: os.stat_result) -> EntryType:
    # entry_stat must come from lstat, otherwise links look like their targets.
    if stat.S_ISLNK(entry_stat.st_mode):
        return EntryType.SYMLINK
    if stat.S_ISDIR(entry_stat.st_mode):
        return EntryType.DIRECTORY
    return EntryType.FILE


def decide_entry(entry_type: EntryType, hidden: bool, options: TraversalOptions) -> EntryDecision:
    """
    Applies the type and visibility gates.

    These only ever take an entry out of the output. Directories, and symlinks
    that are being followed, are still walked into when they fail them.
    A symlink rejected by `symlinks=False` is never dereferenced at all.
    """
    if entry_type is EntryType.DIRECTORY:
        emit, descend = options.directories, True
    elif entry_type is EntryType.SYMLINK:
        if not options.symlinks:
            return EntryDecision(emit=False, descend=False)
        emit, descend = True, options.follow_symlinks
    elif entry_type is EntryType.FILE:
        emit, descend = options.files, False
    else:
        raise TraversalContractError(f"entry classified with unexpected type: {entry_type!r}")

    if hidden and not options.hidden:
        emit = False
    return EntryDecision(emit=emit, descend=descend)


async def _apply_filter(path_for_filters: str, details: EntryDetails, options: TraversalOptions) -> bool:
    # user filter errors are deliberately not caught here.
    accepted = options.filter(path_for_filters, details)
    if inspect.isawaitable(accepted):
        accepted = await accepted
    return bool(accepted)


async def _visit_child(
    parent_path: str,
    child_name: str,
    options: TraversalOptions,
    context: TraversalContext,
) -> List[str]:
    child_abs_path = os.path.join(parent_path, child_name)
    try:
        child_stat = await asyncio.to_thread(os.lstat, child_abs_path)
    except OSError as e:
        log.debug("child_stat_failed_skipped", path=child_abs_path, error=str(e))
        return []

    entry_type = classify_entry(child_stat)
    is_hidden = child_name.startswith(".")
    decision = decide_entry(entry_type, is_hidden, options)
    if decision.pruned:
        return []

    real_path = child_abs_path
    if entry_type is EntryType.SYMLINK:
        try:
            real_path = await asyncio.to_thread(os.path.realpath, child_abs_path, strict=True)
        except OSError as e:
            log.debug("symlink_unresolvable_skipped", path=child_abs_path, error=str(e))
            return []

    path_for_filters = (
        os.path.relpath(child_abs_path, context.root_path) if options.return_relative else child_abs_path
    )
    if matches(path_for_filters, options.exclude) and not matches(path_for_filters, options.include):
        log.debug("entry_excluded_by_pattern", path=path_for_filters)
        return []

    if decision.emit:
        details = EntryDetails(type=entry_type, hidden=is_hidden, real_path=real_path)
        if not await _apply_filter(path_for_filters, details, options):
            decision = EntryDecision(emit=False, descend=decision.descend)

    # a followed symlink is listed and walked under its resolved identity.
    followed = entry_type is EntryType.SYMLINK and options.follow_symlinks
    listed_path = real_path if followed else child_abs_path

    subpaths: List[str] = [listed_path] if decision.emit else []
    if decision.descend:
        cached_stat = child_stat if entry_type is EntryType.DIRECTORY else None
        subpaths.extend(await list_absolute_subpaths(listed_path, options, context.descend(cached_stat)))
    return subpaths


async def list_absolute_subpaths(
    path: str,
    options: TraversalOptions,
    context: TraversalContext,
) -> List[str]:
    """
    Lists the absolute paths below `path` that pass `options`.

    `options` must already be filled (see `fill_options`) and `context.root_path`
    must be the path the traversal started from. Returns an empty list when
    `path` is not a readable directory or lies beyond `options.max_depth`.
    """
    if options.max_depth is not None and context.depth > options.max_depth:
        return []

    try:
        path_stat = context.cached_stat or await asyncio.to_thread(os.lstat, path)
    except OSError as e:
        log.debug("directory_stat_failed_skipped", path=path, error=str(e))
        return []
    if not stat.S_ISDIR(path_stat.st_mode):
        return []

    # with a depth ceiling a symlink cycle terminates on its own and is walked as far as allowed.
    if options.max_depth is None:
        dir_key = (path_stat.st_dev, path_stat.st_ino)
        if dir_key in context.ancestors:
            log.debug("symlink_cycle_skipped", path=path, depth=context.depth)
            return []
        context = context.entered(path_stat)

    try:
        child_names = await asyncio.to_thread(os.listdir, path)
    except OSError as e:
        log.debug("directory_listing_failed_skipped", path=path, error=str(e))
        return []

    child_results = await asyncio.gather(
        *(_visit_child(path, child_name, options, context) for child_name in child_names)
    )
    subpaths = [subpath for child_subpaths in child_results for subpath in child_subpaths]

    if options.dedupe_symlink_contents:
        return list(dict.fromkeys(subpaths))
    return subpaths
