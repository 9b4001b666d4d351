#!/usr/bin/env python3
"""
ProjectHub CLI.

Operator command-line tool for the ProjectHub data layer.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    python cli.py --help                                  # Show help

    # Configuration
    python cli.py config check                            # Validate STORE_URL / STORE_API_KEY
    python cli.py config show export                      # Show a config section

    # Database
    python cli.py db init                                 # Create tables

    # Export
    python cli.py export run PROJECT_ID --format pdf      # Export a project
    python cli.py export stats PROJECT_ID                 # Show project statistics

Options:
    --verbose, -v     Enable verbose output
    --debug           Enable debug mode (detailed logging)
    --help            Show help message
"""

import sys
from pathlib import Path

import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from projecthub.cli.commands import config_app, db_app, export_app

app = typer.Typer(
    name="cli",
    help="ProjectHub CLI - configuration checks, schema setup and project exports.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(config_app, name="config")
app.add_typer(db_app, name="db")
app.add_typer(export_app, name="export")


def _validate_project_root() -> None:
    """Validate that we're running from the project root."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    ProjectHub CLI.

    Configuration checks, schema setup and project exports.
    """
    _validate_project_root()

    from projecthub.backend.core.logging import setup_logging

    if debug:
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console", enable_file_logging=False)


if __name__ == "__main__":
    app()
