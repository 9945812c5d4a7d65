# subpaths/core/discovery/pattern_matching.py
import re
from typing import Iterable, List, Optional

import pathspec
import structlog

from subpaths.core.discovery.types import MatchTarget, MatchTargets
from subpaths.exceptions import DiscoveryError

log = structlog.get_logger(__name__)

def compile_glob_patterns_to_spec(glob_patterns: List[str]) -> Optional[pathspec.PathSpec]:
    # compiles a list of glob patterns into a pathspec object for matching.
    if not glob_patterns:
        return None
    try:
        return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, glob_patterns)
    except Exception as e:
        raise DiscoveryError(f"error compiling glob patterns {glob_patterns}: {e}") from e

def _iter_targets(patterns: MatchTargets) -> Iterable[MatchTarget]:
    # a lone str/regex/spec is one target, anything else is a collection of them.
    if patterns is None:
        return ()
    if isinstance(patterns, (str, re.Pattern, pathspec.PathSpec)):
        return (patterns,)
    return patterns

def target_matches(candidate: str, target: MatchTarget) -> bool:
    if isinstance(target, str):
        return candidate == target
    if isinstance(target, re.Pattern):
        return target.search(candidate) is not None
    if isinstance(target, pathspec.PathSpec):
        return target.match_file(candidate)
    raise TypeError(f"unsupported match target type: {type(target).__name__}")

def matches(candidate: str, patterns: MatchTargets) -> bool:
    # true when at least one target matches; no targets means no match.
    return any(target_matches(candidate, target) for target in _iter_targets(patterns))
