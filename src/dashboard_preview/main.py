"""CLI entrypoint for the Azure dashboard preview."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from dashboard_preview.adapters import FilePreviewHost
from dashboard_preview.bicep import BicepCliCompiler
from dashboard_preview.config import settings
from dashboard_preview.layout import extract_tiles
from dashboard_preview.loader import DefinitionLoader, UnsupportedSourceError
from dashboard_preview.models import LoadContext
from dashboard_preview.preview import PreviewSession
from dashboard_preview.telemetry import configure_logging

app = typer.Typer(help="Preview Azure Portal dashboard tile layouts from Bicep or ARM JSON")


@app.callback()
def _configure(log_level: Optional[str] = typer.Option(None, help="Override DASHBOARD_PREVIEW_LOG_LEVEL")) -> None:
    configure_logging(log_level or settings.log_level)


def _build_loader() -> DefinitionLoader:
    compiler = BicepCliCompiler(
        binary_path=settings.bicep_binary,
        timeout_seconds=settings.compile_timeout_seconds,
    )
    return DefinitionLoader(compiler)


def _build_session() -> PreviewSession:
    return PreviewSession(_build_loader(), columns=settings.grid_columns)


def _open_host(source: Path, output: Path | None) -> FilePreviewHost:
    try:
        return FilePreviewHost(source, output)
    except UnsupportedSourceError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=2)


@app.command()
def start() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "bicep_binary": settings.bicep_binary,
            "compile_timeout_seconds": settings.compile_timeout_seconds,
            "grid_columns": settings.grid_columns,
        }
    )


@app.command("render")
def render_command(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Bicep or ARM JSON file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write HTML here instead of stdout"),
) -> None:
    """Render one preview of SOURCE."""
    host = _open_host(source, output)
    session = _build_session()
    session.bind(host)
    asyncio.run(session.refresh_active())


@app.command()
def tiles(source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Bicep or ARM JSON file")) -> None:
    """List the tiles found in SOURCE."""
    host = _open_host(source, None)
    active = host.get_active_source()
    result = asyncio.run(_build_loader().load(active.text, active.kind, LoadContext(path=active.path)))
    if not result.ok:
        print({"error": result.error.message, "kind": result.error.kind.value})
        raise typer.Exit(code=1)

    table = Table(title=str(source))
    for column in ("title", "x", "y", "colSpan", "rowSpan"):
        table.add_column(column)
    for tile in extract_tiles(result.definition):
        pos = tile.position
        table.add_row(tile.title, str(pos.x), str(pos.y), str(pos.col_span), str(pos.row_span))
    Console().print(table)


@app.command()
def watch(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Bicep or ARM JSON file"),
    output: Path = typer.Option(..., "--output", "-o", help="HTML file refreshed on every change"),
    interval: Optional[float] = typer.Option(None, help="Polling interval in seconds"),
    once: bool = typer.Option(False, "--once", help="Render once and exit instead of watching"),
) -> None:
    """Re-render SOURCE into OUTPUT whenever the file changes."""
    host = _open_host(source, output)
    session = _build_session()
    session.bind(host)
    print({"watching": str(source), "output": str(output)})
    interval_seconds = interval or settings.watch_interval_seconds
    try:
        asyncio.run(host.poll(interval_seconds=interval_seconds, max_checks=1 if once else None))
    except KeyboardInterrupt:
        print({"watch": "stopped"})


if __name__ == "__main__":
    app()
