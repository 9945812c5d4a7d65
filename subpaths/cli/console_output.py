# subpaths/cli/console_output.py
"""
Prints summary information to the console (stderr) after a listing.
"""
import os
from collections import Counter
from typing import List

import structlog
from rich.console import Console as RichConsole
from rich.table import Table

from subpaths.config.settings import ListingConfig
from subpaths.core.discovery.types import EntryType

log = structlog.get_logger(__name__)

def _entry_type_of(path: str) -> EntryType:
    """
    Classifies a listed path the way the walker did, with lstat semantics.

    Under --follow-symlinks every symlink is listed by its resolved real path,
    so nothing in the listing is a link and the symlink count is always 0.
    """
    if os.path.islink(path):
        return EntryType.SYMLINK
    if os.path.isdir(path):
        return EntryType.DIRECTORY
    return EntryType.FILE

def print_listing_summary(config: ListingConfig, subpaths: List[str]) -> None:
    """
    Prints a per-type count of the listed entries to stderr.
    Relative results are resolved against `config.input_path` first.
    """
    log.debug("console_summary_output_requested", count=len(subpaths))
    base_dir = os.path.abspath(config.input_path)
    counts = Counter(_entry_type_of(os.path.join(base_dir, subpath)) for subpath in subpaths)

    table = Table(title=f"subpaths of {base_dir}", title_justify="left")
    table.add_column("type", style="cyan")
    table.add_column("count", justify="right", style="yellow")
    for entry_type in EntryType:
        table.add_row(entry_type.value, f"{counts.get(entry_type, 0):,}")
    table.add_row("total", f"{len(subpaths):,}", style="bold")

    RichConsole(stderr=True).print(table)
