# subpaths/config/loader.py
"""
Handles loading, merging, and saving of configurations from/to TOML files.
"""
import toml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import asdict, fields as dataclass_fields, MISSING
from enum import Enum
import structlog

from subpaths.exceptions import ConfigError

from .settings import ListingConfig

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".subpaths.toml", "subpaths.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "subpaths"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEY_TO_LISTINGCONFIG_ATTR_MAP: Dict[str, str] = {
    "directories": "directories",
    "files": "files",
    "symlinks": "symlinks",
    "hidden": "hidden",
    "follow_symlinks": "follow_symlinks",
    "dedupe": "dedupe_symlink_contents",
    "max_depth": "max_depth",
    "relative": "return_relative",
    "exclude": "exclude_patterns",
    "include": "include_patterns",
    "exclude_regex": "exclude_regex",
    "include_regex": "include_regex",
    "sort": "sort_method",
    "null": "nul_separated",
    "summary": "console_show_summary",
}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file {file_path}: {e}") from e
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get("subpaths", {})
    return data

def load_and_merge_configs(project_dir: Optional[Path] = None) -> Dict[str, Any]:
    # user config first, then the first project config found; profiles are merged by name.
    project_dir = project_dir or Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = project_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        project_profiles = project_settings.pop("profiles", None)
        if isinstance(project_profiles, dict) and project_profiles:
            user_profiles = merged_toml_data.get("profiles")
            if isinstance(user_profiles, dict):
                user_profiles.update(project_profiles)
            else:
                merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break

    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data

def config_values_to_attrs(toml_values: Dict[str, Any]) -> Dict[str, Any]:
    # maps TOML keys onto ListingConfig attribute names; unknown keys are ignored.
    attrs: Dict[str, Any] = {}
    for toml_key, value in toml_values.items():
        attr = CONFIG_KEY_TO_LISTINGCONFIG_ATTR_MAP.get(toml_key)
        if attr is None:
            if toml_key not in ("profiles", "description"):
                log.warning("unknown_config_key_ignored", key=toml_key)
            continue
        attrs[attr] = value
    return attrs

def save_config_to_profile(config_to_save: ListingConfig, profile_name: str, project_dir: Optional[Path] = None) -> bool:
    project_dir = project_dir or Path.cwd()
    target_toml_path = project_dir / ".subpaths.toml"
    if not target_toml_path.exists():
        alt_path = project_dir / "subpaths.toml"
        if alt_path.exists():
            target_toml_path = alt_path
    log.info("attempting_to_save_profile", profile=profile_name, path=str(target_toml_path))

    attrs_to_skip = {"input_path", "save_profile_name"}
    attr_to_toml_key = {v: k for k, v in CONFIG_KEY_TO_LISTINGCONFIG_ATTR_MAP.items()}
    defaults = {
        f.name: f.default_factory() if f.default_factory is not MISSING else f.default
        for f in dataclass_fields(ListingConfig)
    }
    profile_data: Dict[str, Any] = {}

    for attr, value in asdict(config_to_save).items():
        if attr in attrs_to_skip or attr not in attr_to_toml_key:
            continue
        if value == defaults[attr] or value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        profile_data[attr_to_toml_key[attr]] = value

    if not profile_data:
        log.info("no_options_to_save_for_profile", profile=profile_name)
        return False

    existing_data: Dict[str, Any] = {}
    if target_toml_path.exists():
        try:
            existing_data = toml.load(target_toml_path)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"could not read existing TOML {target_toml_path} to save profile: {e}") from e

    if profile_name.upper() == "DEFAULT":
        profiles_bak = existing_data.pop("profiles", None)
        existing_data.update(profile_data)
        if profiles_bak is not None:
            existing_data["profiles"] = profiles_bak
    else:
        existing_data.setdefault("profiles", {})[profile_name] = profile_data

    try:
        with target_toml_path.open("w", encoding="utf-8") as f:
            toml.dump(existing_data, f)
    except OSError as e:
        raise ConfigError(f"error writing profile '{profile_name}' to {target_toml_path}: {e}") from e
    log.info("profile_saved_successfully", profile=profile_name, path=str(target_toml_path))
    return True
