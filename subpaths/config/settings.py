import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional
import structlog

from subpaths.core.discovery.pattern_matching import compile_glob_patterns_to_spec
from subpaths.core.discovery.types import MatchTarget, TraversalOptions, fill_options
from subpaths.exceptions import ConfigError

log = structlog.get_logger(__name__)

class SortMethod(Enum):
    # how the command line orders its results; the library itself never sorts.
    NONE = "none"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"

    @classmethod
    def from_string(cls, s: Optional[str]) -> Optional["SortMethod"]:
        if not s:
            return None
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_sort_method_string", input_string=s)
            return None

DEFAULT_SORT_METHOD = SortMethod.NAME_ASC

def _compile_regexes(expressions: List[str], option_name: str) -> List[MatchTarget]:
    compiled: List[MatchTarget] = []
    for expression in expressions:
        try:
            compiled.append(re.compile(expression))
        except re.error as e:
            raise ConfigError(f"invalid regular expression in {option_name}: {expression!r} ({e})") from e
    return compiled

@dataclass
class ListingConfig:
    # holds all configuration parameters for a single command-line run.
    input_path: Path = field(default_factory=lambda: Path("."))
    directories: bool = True
    files: bool = True
    symlinks: bool = True
    hidden: bool = True
    follow_symlinks: bool = False
    dedupe_symlink_contents: bool = False
    max_depth: Optional[int] = None
    return_relative: bool = False
    exclude_patterns: List[str] = field(default_factory=list)
    include_patterns: List[str] = field(default_factory=list)
    exclude_regex: List[str] = field(default_factory=list)
    include_regex: List[str] = field(default_factory=list)
    sort_method: SortMethod = DEFAULT_SORT_METHOD
    nul_separated: bool = False
    console_show_summary: bool = False
    save_profile_name: Optional[str] = None

    def to_traversal_options(self) -> TraversalOptions:
        # globs become one PathSpec; regexes are added alongside it as separate targets.
        exclude: List[MatchTarget] = _compile_regexes(self.exclude_regex, "exclude_regex")
        include: List[MatchTarget] = _compile_regexes(self.include_regex, "include_regex")
        exclude_spec = compile_glob_patterns_to_spec(self.exclude_patterns)
        include_spec = compile_glob_patterns_to_spec(self.include_patterns)
        if exclude_spec is not None:
            exclude.append(exclude_spec)
        if include_spec is not None:
            include.append(include_spec)

        return fill_options(
            directories=self.directories,
            files=self.files,
            symlinks=self.symlinks,
            hidden=self.hidden,
            follow_symlinks=self.follow_symlinks,
            dedupe_symlink_contents=self.dedupe_symlink_contents,
            max_depth=self.max_depth,
            return_relative=self.return_relative,
            exclude=exclude or None,
            include=include or None,
        )
