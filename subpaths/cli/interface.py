# subpaths/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict, List
from dataclasses import fields as dataclass_fields, MISSING

import click
from click_option_group import optgroup
import structlog

from subpaths import __version__ as app_version
from subpaths.config.settings import ListingConfig, SortMethod, DEFAULT_SORT_METHOD
from subpaths.config.loader import (
    load_and_merge_configs, save_config_to_profile, config_values_to_attrs,
)
from subpaths.cli.console_output import print_listing_summary
from subpaths.core.discovery.path_resolution import list_subpaths_sync
from subpaths.logging_setup import configure_logging
from subpaths.exceptions import SubpathsError

log = structlog.get_logger(__name__)

# click parameter name -> ListingConfig attribute, for values that only count when given on the command line.
CLI_PARAM_TO_LISTINGCONFIG_ATTR_MAP: Dict[str, str] = {
    "input_path": "input_path",
    "directories": "directories",
    "files": "files",
    "symlinks": "symlinks",
    "hidden": "hidden",
    "follow_symlinks": "follow_symlinks",
    "dedupe_symlink_contents": "dedupe_symlink_contents",
    "max_depth": "max_depth",
    "return_relative": "return_relative",
    "exclude_patterns": "exclude_patterns",
    "include_patterns": "include_patterns",
    "exclude_regex": "exclude_regex",
    "include_regex": "include_regex",
    "sort_method_str": "sort_method",
    "nul_separated": "nul_separated",
    "console_show_summary": "console_show_summary",
    "save_profile_name": "save_profile_name",
}

def _listing_config_defaults() -> Dict[str, Any]:
    return {
        f.name: f.default_factory() if f.default_factory is not MISSING else f.default
        for f in dataclass_fields(ListingConfig)
    }

def _coerce_option_values(options: Dict[str, Any]) -> Dict[str, Any]:
    # values coming from TOML are plain strings/lists; bring them to ListingConfig types.
    coerced = dict(options)
    sort_value = coerced.get("sort_method")
    if isinstance(sort_value, str):
        coerced["sort_method"] = SortMethod.from_string(sort_value) or DEFAULT_SORT_METHOD
    for list_attr in ("exclude_patterns", "include_patterns", "exclude_regex", "include_regex"):
        value = coerced.get(list_attr)
        if isinstance(value, str):
            coerced[list_attr] = [value]
        elif isinstance(value, (list, tuple)):
            coerced[list_attr] = [str(v) for v in value]
    if isinstance(coerced.get("input_path"), str):
        coerced["input_path"] = Path(coerced["input_path"])
    return coerced

def build_listing_config(ctx: click.Context, cli_params: Dict[str, Any]) -> ListingConfig:
    # precedence: dataclass defaults < config files < selected profile < command line.
    effective_options = _listing_config_defaults()
    raw_configs_from_toml_files = load_and_merge_configs()
    effective_options.update(config_values_to_attrs(raw_configs_from_toml_files))

    active_profile_name = cli_params.get("active_config_profile_name")
    if active_profile_name:
        profile_values_toml = raw_configs_from_toml_files.get("profiles", {}).get(active_profile_name, {})
        if profile_values_toml:
            log.info("applying_profile_settings", profile=active_profile_name)
            effective_options.update(config_values_to_attrs(profile_values_toml))
        else:
            log.warning("profile_not_found_in_config_files", profile_name=active_profile_name)

    for param_name, attr in CLI_PARAM_TO_LISTINGCONFIG_ATTR_MAP.items():
        if ctx.get_parameter_source(param_name) != click.core.ParameterSource.COMMANDLINE:
            continue
        value = cli_params[param_name]
        if param_name == "sort_method_str":
            value = SortMethod.from_string(value) or DEFAULT_SORT_METHOD
        elif isinstance(value, tuple):
            value = list(value)
        effective_options[attr] = value

    return ListingConfig(**_coerce_option_values(effective_options))

def _sorted_for_output(subpaths: List[str], sort_method: SortMethod) -> List[str]:
    if sort_method is SortMethod.NAME_ASC:
        return sorted(subpaths)
    if sort_method is SortMethod.NAME_DESC:
        return sorted(subpaths, reverse=True)
    return subpaths

def _run_listing_flow(config: ListingConfig) -> None:
    log.info("listing_orchestration_started", input_path=str(config.input_path))
    traversal_options = config.to_traversal_options()
    subpaths = _sorted_for_output(
        list_subpaths_sync(config.input_path, traversal_options), config.sort_method
    )

    if config.nul_separated:
        click.echo("".join(f"{subpath}\0" for subpath in subpaths), nl=False)
    else:
        for subpath in subpaths:
            click.echo(subpath)

    if config.console_show_summary:
        print_listing_summary(config, subpaths)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("input_path", required=False, default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@optgroup.group("Entry Type Options", help="Choose which kinds of entries are listed.")
@optgroup.option("--directories/--no-directories", "directories", default=None, help="List directories. Suppressed directories are still walked. Default: on.")
@optgroup.option("--files/--no-files", "files", default=None, help="List regular files. Default: on.")
@optgroup.option("--symlinks/--no-symlinks", "symlinks", default=None, help="List symbolic links. Default: on.")
@optgroup.option("--hidden/--no-hidden", "hidden", default=None, help="List dot-entries. Hidden directories are still walked. Default: on.")
@optgroup.group("Traversal Options", help="Control how deep and through what the walk goes.")
@optgroup.option("-L", "--follow-symlinks", "follow_symlinks", is_flag=True, default=False, help="List symlinks by their resolved path and walk their targets.")
@optgroup.option("--dedupe", "dedupe_symlink_contents", is_flag=True, default=False, help="Drop paths reached more than once through followed symlinks.")
@optgroup.option("-d", "--max-depth", "max_depth", type=click.IntRange(min=0), default=None, help="Deepest level to list; 0 lists only direct children. Default: unbounded.")
@optgroup.group("Matching Options", help="Include/exclude rules. Excluded directories are not walked.")
@optgroup.option("-e", "--exclude", "exclude_patterns", multiple=True, help="Gitignore-style glob of paths to exclude.")
@optgroup.option("-i", "--include", "include_patterns", multiple=True, help="Gitignore-style glob of paths to keep even when excluded.")
@optgroup.option("--exclude-regex", "exclude_regex", multiple=True, help="Regular expression of paths to exclude.")
@optgroup.option("--include-regex", "include_regex", multiple=True, help="Regular expression of paths to keep even when excluded.")
@optgroup.group("Output Options", help="Control how results are printed.")
@optgroup.option("--relative/--absolute", "return_relative", default=None, help="Print paths relative to INPUT_PATH (patterns then match relative paths). Default: absolute.")
@optgroup.option("--sort", "sort_method_str", type=click.Choice([s.value for s in SortMethod]), default=None, help=f"Sort results. Default: {DEFAULT_SORT_METHOD.value}.")
@optgroup.option("-0", "--null", "nul_separated", is_flag=True, default=False, help="Separate results with NUL instead of newline.")
@optgroup.option("--summary", "console_show_summary", is_flag=True, default=False, help="Print a count of listed entries per type on stderr.")
@optgroup.group("Application Behavior", help="Configuration profiles, saving, and logging.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
@optgroup.option("--save", "save_profile_name", type=str, metavar="PROFILE_NAME", default=None, help="Save options to a profile in the project's .subpaths.toml. Exits after saving.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="subpaths", prog_name="subpaths", help="Show version and exit.")
@click.pass_context
def main_cli(ctx: click.Context, **cli_params: Any):
    """subpaths: list the files, directories and symlinks below INPUT_PATH,
    filtered by type, visibility, depth and include/exclude rules."""

    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", params={k: v for k, v in cli_params.items() if v is not None})

    try:
        final_config = build_listing_config(ctx, cli_params)

        if final_config.save_profile_name:
            if save_config_to_profile(final_config, final_config.save_profile_name):
                click.echo(f"Info: Profile '{final_config.save_profile_name}' saved.", err=True)
            else:
                click.echo("Info: No non-default options to save.", err=True)
            ctx.exit(0)

        _run_listing_flow(final_config)

    except click.exceptions.Exit as e: raise e
    except SubpathsError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except click.ClickException as e:
        log.error("click_exception_in_cli", error_type=type(e).__name__, message=str(e))
        e.show(); sys.exit(e.exit_code)
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
        sys.exit(1)
