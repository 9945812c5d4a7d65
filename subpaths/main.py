# subpaths/main.py
"""Main entry point for the subpaths CLI application."""

from subpaths.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="subpaths")

if __name__ == '__main__':
    entrypoint()
