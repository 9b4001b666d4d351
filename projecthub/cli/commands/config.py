"""
Configuration Commands.

Commands for validating the environment and inspecting settings.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(help="Configuration commands")
console = Console()


@app.command()
def check() -> None:
    """
    Validate required environment variables.

    Exits with status 1 when STORE_URL or STORE_API_KEY is missing or malformed.

    Examples:
        cli.py config check
    """
    from projecthub.backend.core.startup_checks import validate_environment

    report = validate_environment()

    table = Table(title="Environment Checks", show_header=True)
    table.add_column("Level")
    table.add_column("Message")
    for error in report.errors:
        table.add_row("[red]error[/red]", error)
    for warning in report.warnings:
        table.add_row("[yellow]warning[/yellow]", warning)

    if report.errors or report.warnings:
        console.print(table)

    if not report.is_valid:
        console.print(f"\n[red]{len(report.errors)} check(s) failed[/red]")
        raise typer.Exit(1)

    console.print("[green]Environment OK[/green]")


@app.command()
def show(
    section: Optional[str] = typer.Argument(
        None, help="Config section to show (application, database, logging, security, export)"
    ),
) -> None:
    """
    Display configuration settings.

    Examples:
        cli.py config show
        cli.py config show export
    """
    from projecthub.backend.core.config import get_app_config

    app_config = get_app_config()
    sections = {
        "application": app_config.application,
        "database": app_config.database,
        "logging": app_config.logging,
        "security": app_config.security,
        "export": app_config.export,
    }

    if section and section not in sections:
        console.print(f"[red]Unknown section: {section}[/red]")
        console.print(f"[dim]Available: {', '.join(sections)}[/dim]")
        raise typer.Exit(1)

    for name, schema in sections.items():
        if section and name != section:
            continue
        console.print(Panel(schema.model_dump_json(indent=2), title=name))
