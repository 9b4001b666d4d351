"""
Database Commands.

Commands for preparing the store schema.
"""

import asyncio

import typer
from rich.console import Console

app = typer.Typer(help="Database commands")
console = Console()


@app.command()
def init() -> None:
    """
    Create the projects, tasks and notes tables if they are missing.

    Examples:
        cli.py db init
    """
    from projecthub.backend.core.startup_checks import StartupConfigError, run_startup_checks

    try:
        run_startup_checks()
    except StartupConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print("[bold]Creating store schema[/bold]")
    asyncio.run(_init())
    console.print("[green]Schema ready[/green]")


async def _init() -> None:
    from projecthub.backend.core.database import create_schema, dispose_engine

    try:
        await create_schema()
    finally:
        await dispose_engine()
