"""
Export Commands.

Commands for exporting a project to JSON or PDF and for showing export
statistics. The caller is identified by a session access token.
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from projecthub.backend.core.logging import get_logger, log_context, log_with_source
from projecthub.backend.schemas.export import ExportFormat

app = typer.Typer(help="Project export commands")
console = Console()
logger = get_logger(__name__)

TOKEN_OPTION = typer.Option(
    ...,
    "--token",
    "-t",
    envvar="PROJECTHUB_TOKEN",
    help="Session access token of the exporting user",
)


def _identity(token: str):
    from projecthub.backend.core.exceptions import AuthenticationError
    from projecthub.backend.core.security import decode_access_token

    try:
        return decode_access_token(token)
    except AuthenticationError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)


@app.command()
def run(
    project_id: str = typer.Argument(..., help="Project to export"),
    export_format: ExportFormat = typer.Option(
        ExportFormat.JSON, "--format", "-f", help="Output format"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file or directory (default: current directory)"
    ),
    token: str = TOKEN_OPTION,
) -> None:
    """
    Export a project with its tasks and notes.

    Examples:
        cli.py export run 3f1c... --format pdf
        cli.py export run 3f1c... -f json -o exports/
    """
    identity = _identity(token)
    with log_context(source="cli", project_id=project_id, format=export_format.value):
        result = asyncio.run(_run(identity, project_id, export_format))

    if not result.success:
        console.print(f"[red]Export failed: {result.error_message}[/red]")
        raise typer.Exit(1)

    artifact = result.data
    target = output or Path.cwd()
    if target.is_dir():
        target = target / artifact.filename
    try:
        target.write_bytes(artifact.to_bytes())
    except OSError as e:
        console.print(f"[red]Could not write export: {e.strerror or e}[/red]")
        raise typer.Exit(1)
    log_with_source(logger, "cli", "info", "Export written", project_id=project_id, path=str(target))
    console.print(f"[green]Exported to {target}[/green]")


async def _run(identity, project_id: str, export_format: ExportFormat):
    from projecthub.backend.core.database import dispose_engine, session_scope
    from projecthub.backend.services.export import ExportService

    try:
        async with session_scope() as session:
            return await ExportService(session).generate_export(identity, project_id, export_format)
    finally:
        await dispose_engine()


@app.command()
def stats(
    project_id: str = typer.Argument(..., help="Project to summarize"),
    token: str = TOKEN_OPTION,
) -> None:
    """
    Show task and note counts for a project.

    Examples:
        cli.py export stats 3f1c...
    """
    identity = _identity(token)
    with log_context(source="cli", project_id=project_id):
        result = asyncio.run(_stats(identity, project_id))

    if not result.success:
        console.print(f"[red]Error: {result.error_message}[/red]")
        raise typer.Exit(1)

    data = result.data
    table = Table(title=data.project_name, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Tasks", str(data.task_count))
    table.add_row("Completed", str(data.completed_task_count))
    table.add_row("Notes", str(data.total_note_count))
    table.add_row("Completion", f"{data.completion_percentage}%")
    console.print(table)


async def _stats(identity, project_id: str):
    from projecthub.backend.core.database import dispose_engine, session_scope
    from projecthub.backend.services.export import ExportService

    try:
        async with session_scope() as session:
            return await ExportService(session).get_export_stats(identity, project_id)
    finally:
        await dispose_engine()
