import re
import pytest
import pathspec

from subpaths.core.discovery.pattern_matching import compile_glob_patterns_to_spec, matches
from subpaths.exceptions import DiscoveryError

# --- Tests for matches ---

def test_no_patterns_never_match():
    assert not matches("a.txt", None)
    assert not matches("a.txt", [])
    assert not matches("", ())

def test_string_pattern_is_literal():
    assert matches("sub/c.txt", "sub/c.txt")
    assert not matches("sub/c.txt", "sub")
    assert not matches("sub/c.txt", "*.txt")

def test_regex_pattern_searches():
    assert matches("sub/c.txt", re.compile(r"\.txt$"))
    assert matches("sub/c.txt", re.compile("c"))
    assert not matches("sub/c.txt", re.compile(r"^c"))

def test_any_pattern_in_collection_matches():
    patterns = ["nope", re.compile(r"^sub/"), "also-nope"]
    assert matches("sub/c.txt", patterns)
    assert not matches("a.txt", patterns)

def test_pathspec_pattern_uses_gitignore_rules():
    spec = compile_glob_patterns_to_spec(["*.log", "build/"])
    assert matches("logs/app.log", spec)
    assert matches("build/", spec)
    assert not matches("src/app.py", spec)

def test_tuple_and_generator_collections():
    assert matches("x", ("y", "x"))
    assert matches("x", (p for p in ["x"]))

def test_unsupported_target_type_raises():
    with pytest.raises(TypeError):
        matches("x", [42])

# --- Tests for compile_glob_patterns_to_spec ---

def test_empty_glob_list_compiles_to_none():
    assert compile_glob_patterns_to_spec([]) is None

def test_glob_list_compiles_to_pathspec():
    assert isinstance(compile_glob_patterns_to_spec(["*.py"]), pathspec.PathSpec)

def test_uncompilable_glob_raises_discovery_error():
    with pytest.raises(DiscoveryError):
        compile_glob_patterns_to_spec([123])
