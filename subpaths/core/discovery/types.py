# subpaths/core/discovery/types.py
"""
Value types shared by the walker and the public facade.

`TraversalOptions` is filled once per top-level call; `TraversalContext` is
derived for every recursive descent and never leaves the walker.
"""
import math
import os
import re
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Awaitable, Callable, FrozenSet, Iterable, Optional, Tuple, Union

import pathspec

from subpaths.exceptions import ConfigError


class EntryType(Enum):
    # classification of a child obtained from lstat (symlinks are never files or directories).
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


@dataclass(frozen=True)
class EntryDetails:
    # what the user filter gets to see about an entry.
    type: EntryType
    hidden: bool
    real_path: str


MatchTarget = Union[str, re.Pattern[str], pathspec.PathSpec]
MatchTargets = Union[None, MatchTarget, Iterable[MatchTarget]]
EntryFilter = Callable[[str, EntryDetails], Union[bool, Awaitable[bool]]]


def accept_all(path: str, details: EntryDetails) -> bool:
    return True


@dataclass(frozen=True)
class TraversalOptions:
    """
    Options for one traversal.

    - `directories`, `files`, `symlinks`: include entries of that type in the output.
    - `hidden`: include entries whose name starts with a dot. Hidden directories
      are walked either way.
    - `follow_symlinks`: list a symlink under its resolved path and walk its target.
    - `dedupe_symlink_contents`: drop repeated paths from the result.
    - `max_depth`: deepest recursion level listed; 0 is the start directory's
      own children. `None` means unbounded; `math.inf` is accepted as a
      spelling of `None`.
    - `return_relative`: return paths relative to the start path. Patterns and
      the filter then see relative paths too.
    - `exclude`, `include`: match targets; an entry matching `exclude` and not
      `include` is dropped and never descended into.
    - `filter`: final say on output membership, sync or async. Never prunes.
    """

    directories: bool = True
    files: bool = True
    symlinks: bool = True
    hidden: bool = True
    follow_symlinks: bool = False
    dedupe_symlink_contents: bool = False
    max_depth: Optional[int] = None
    return_relative: bool = False
    exclude: MatchTargets = None
    include: MatchTargets = None
    filter: EntryFilter = accept_all


DEFAULT_OPTIONS = TraversalOptions()

_OPTION_NAMES = frozenset(f.name for f in fields(TraversalOptions))


def fill_options(options: Optional[TraversalOptions] = None, **overrides: Any) -> TraversalOptions:
    # merges user overrides over the defaults (or over `options`) and validates the result.
    unknown = set(overrides) - _OPTION_NAMES
    if unknown:
        raise ConfigError(f"unknown traversal option(s): {', '.join(sorted(unknown))}")
    base = options if options is not None else DEFAULT_OPTIONS
    filled = replace(base, **overrides) if overrides else base

    if isinstance(filled.max_depth, float) and filled.max_depth == math.inf:
        filled = replace(filled, max_depth=None)
    if filled.max_depth is not None:
        if isinstance(filled.max_depth, bool) or not isinstance(filled.max_depth, int):
            raise ConfigError(f"max_depth must be an integer or None, got {filled.max_depth!r}")
        if filled.max_depth < 0:
            raise ConfigError(f"max_depth must be >= 0, got {filled.max_depth}")
    if filled.filter is None:
        filled = replace(filled, filter=accept_all)
    elif not callable(filled.filter):
        raise ConfigError(f"filter must be callable, got {type(filled.filter).__name__}")
    return filled


@dataclass(frozen=True)
class TraversalContext:
    # per-call walker state; root_path is fixed for the whole traversal.
    root_path: str
    depth: int = 0
    cached_stat: Optional[os.stat_result] = field(default=None, compare=False)
    # (st_dev, st_ino) of every directory on the way down from root_path.
    ancestors: FrozenSet[Tuple[int, int]] = frozenset()

    def entered(self, dir_stat: os.stat_result) -> "TraversalContext":
        return replace(self, ancestors=self.ancestors | {(dir_stat.st_dev, dir_stat.st_ino)})

    def descend(self, cached_stat: Optional[os.stat_result] = None) -> "TraversalContext":
        return replace(self, depth=self.depth + 1, cached_stat=cached_stat)


@dataclass(frozen=True)
class EntryDecision:
    # what to do with one child: list it, walk into it, both, or neither.
    emit: bool
    descend: bool

    @property
    def pruned(self) -> bool:
        return not self.emit and not self.descend
