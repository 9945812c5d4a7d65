# tests/test_config.py
"""Tests for ListingConfig and the TOML config loader."""

import re
import pytest
import toml
from pathlib import Path

from subpaths.config import loader
from subpaths.config.loader import (
    config_values_to_attrs,
    load_and_merge_configs,
    save_config_to_profile,
)
from subpaths.config.settings import ListingConfig, SortMethod
from subpaths.core.discovery.pattern_matching import matches
from subpaths.exceptions import ConfigError


@pytest.fixture(autouse=True)
def no_user_config(tmp_path: Path, monkeypatch):
    """Keeps the developer's ~/.config/subpaths out of every test."""
    monkeypatch.setattr(loader, "USER_CONFIG_FILE", tmp_path / "no-user-config" / "config.toml")


class TestSortMethod:

    def test_from_string(self):
        assert SortMethod.from_string("NAME_DESC") is SortMethod.NAME_DESC
        assert SortMethod.from_string(None) is None
        assert SortMethod.from_string("sideways") is None


class TestListingConfig:

    def test_defaults_match_traversal_defaults(self):
        options = ListingConfig().to_traversal_options()
        assert options.directories and options.files and options.symlinks and options.hidden
        assert options.exclude is None and options.include is None
        assert options.max_depth is None

    def test_patterns_are_compiled(self):
        config = ListingConfig(
            exclude_patterns=["*.log"],
            exclude_regex=[r"^build"],
            include_patterns=["keep.log"],
        )
        options = config.to_traversal_options()
        assert matches("app.log", options.exclude)
        assert matches("build/out.o", options.exclude)
        assert not matches("src/app.py", options.exclude)
        assert matches("keep.log", options.include)

    def test_invalid_regex_raises_config_error(self):
        with pytest.raises(ConfigError, match="include_regex"):
            ListingConfig(include_regex=["("]).to_traversal_options()

    def test_negative_depth_raises_config_error(self):
        with pytest.raises(ConfigError):
            ListingConfig(max_depth=-1).to_traversal_options()

    def test_regexes_are_regex_objects(self):
        options = ListingConfig(exclude_regex=["x+"]).to_traversal_options()
        assert isinstance(options.exclude[0], re.Pattern)


class TestLoader:

    def test_no_files_gives_empty_config(self, tmp_path: Path):
        assert load_and_merge_configs(tmp_path) == {}

    def test_project_file_and_profiles(self, tmp_path: Path):
        (tmp_path / ".subpaths.toml").write_text(
            'hidden = false\nmax_depth = 2\n\n[profiles.py]\ninclude = ["*.py"]\nsort = "name_desc"\n'
        )
        data = load_and_merge_configs(tmp_path)
        assert data["hidden"] is False
        assert data["max_depth"] == 2
        assert data["profiles"]["py"]["include"] == ["*.py"]

    def test_pyproject_tool_table(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n\n[tool.subpaths]\nfollow_symlinks = true\n')
        assert load_and_merge_configs(tmp_path) == {"follow_symlinks": True}

    def test_dot_file_wins_over_pyproject(self, tmp_path: Path):
        (tmp_path / ".subpaths.toml").write_text("files = false\n")
        (tmp_path / "pyproject.toml").write_text("[tool.subpaths]\nfiles = true\n")
        assert load_and_merge_configs(tmp_path) == {"files": False}

    def test_no_profiles_key_without_profiles(self, tmp_path: Path):
        (tmp_path / ".subpaths.toml").write_text("hidden = false\n")
        assert "profiles" not in load_and_merge_configs(tmp_path)

    def test_user_and_project_profiles_merge(self, tmp_path: Path, monkeypatch):
        user_file = tmp_path / "user" / "config.toml"
        user_file.parent.mkdir()
        user_file.write_text('relative = true\n[profiles.mine]\nhidden = false\n')
        monkeypatch.setattr(loader, "USER_CONFIG_FILE", user_file)
        project = tmp_path / "project"
        project.mkdir()
        (project / "subpaths.toml").write_text('[profiles.theirs]\nfiles = false\n')

        data = load_and_merge_configs(project)
        assert data["relative"] is True
        assert set(data["profiles"]) == {"mine", "theirs"}

    def test_broken_toml_raises_config_error(self, tmp_path: Path):
        (tmp_path / ".subpaths.toml").write_text("hidden = = false\n")
        with pytest.raises(ConfigError):
            load_and_merge_configs(tmp_path)

    def test_config_values_to_attrs(self):
        attrs = config_values_to_attrs({"dedupe": True, "exclude": ["*.tmp"], "bogus": 1, "profiles": {}})
        assert attrs == {"dedupe_symlink_contents": True, "exclude_patterns": ["*.tmp"]}

    def test_save_named_profile(self, tmp_path: Path):
        config = ListingConfig(hidden=False, max_depth=3, sort_method=SortMethod.NONE, exclude_patterns=["*.pyc"])
        assert save_config_to_profile(config, "quick", tmp_path)
        saved = toml.load(tmp_path / ".subpaths.toml")
        assert saved["profiles"]["quick"] == {
            "hidden": False,
            "max_depth": 3,
            "sort": "none",
            "exclude": ["*.pyc"],
        }

    def test_save_default_profile_keeps_other_profiles(self, tmp_path: Path):
        (tmp_path / ".subpaths.toml").write_text('[profiles.keep]\nfiles = false\n')
        assert save_config_to_profile(ListingConfig(follow_symlinks=True), "default", tmp_path)
        saved = toml.load(tmp_path / ".subpaths.toml")
        assert saved["follow_symlinks"] is True
        assert saved["profiles"]["keep"] == {"files": False}

    def test_save_with_only_defaults_writes_nothing(self, tmp_path: Path):
        assert not save_config_to_profile(ListingConfig(), "empty", tmp_path)
        assert not (tmp_path / ".subpaths.toml").exists()
