"""Command line interface for drafting-py.

Inspects drawing files, previews how a pointer position snaps against them,
and exports them to SVG, PNG or JSON.
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import rich_click as click
from rich.console import Console
from rich.table import Table

from drafting_py.config import DraftingConfig
from drafting_py.core.geometry import format_number
from drafting_py.core.logging import bound_session, configure_logging
from drafting_py.core.types import ExportFormat
from drafting_py.exceptions import DraftingError
from drafting_py.services.export import Drawing, ExportService
from drafting_py.session import DraftingSession

console = Console()


def _load_drawing(path: Path) -> Drawing:
    try:
        return ExportService().load_json(path.read_bytes())
    except DraftingError as e:
        msg = f"{path}: {e}"
        raise click.ClickException(msg) from e


def _fmt(x: float, y: float) -> str:
    return f"({format_number(x, 3)}, {format_number(y, 3)})"


@click.group(name="drafting", help="Inspect, snap and export 2D drawings.")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Output logs as JSON")
@click.pass_context
def cli(ctx: click.Context, debug: bool, json_logs: bool) -> None:
    """Inspect, snap and export 2D drawings."""
    config = DraftingConfig.from_env()
    config.debug = config.debug or debug
    config.json_logs = config.json_logs or json_logs
    configure_logging(debug=config.debug, json_logs=config.json_logs, stream=sys.stderr, cache_loggers=False)
    ctx.obj = config


@cli.command(name="inspect", help="List the shapes of a drawing.")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect_drawing(file: Path) -> None:
    """List the shapes of a drawing."""
    drawing = _load_drawing(file)

    table = Table(title=f"{drawing.name} ({len(drawing.shapes)} shapes)")
    table.add_column("ID", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Bounds", style="yellow")
    table.add_column("Snap points", style="magenta", justify="right")

    for shape in drawing.shapes:
        box = shape.bounding_box()
        table.add_row(
            shape.id,
            shape.shape_type.value,
            f"{_fmt(box.min_x, box.min_y)} - {_fmt(box.max_x, box.max_y)}",
            str(len(shape.snap_points())),
        )

    console.print(table)


@cli.command(name="snap", help="Resolve a pointer position against a drawing.")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.option("--grid", type=click.FloatRange(min=0, min_open=True), default=None, help="Grid size")
@click.option("--no-grid", is_flag=True, help="Disable grid snapping")
@click.option("--no-points", is_flag=True, help="Disable point snapping")
@click.option("--no-lines", is_flag=True, help="Disable line snapping")
@click.option("--zoom", type=click.FloatRange(min=0, min_open=True), default=None, help="Viewport zoom")
@click.pass_obj
def snap_point(
    config: DraftingConfig,
    file: Path,
    x: float,
    y: float,
    grid: float | None,
    no_grid: bool,
    no_points: bool,
    no_lines: bool,
    zoom: float | None,
) -> None:
    """Resolve a pointer position against a drawing."""
    drawing = _load_drawing(file)
    config = replace(
        config,
        grid_size=grid if grid is not None else config.grid_size,
        snap_to_grid=config.snap_to_grid and not no_grid,
        snap_to_points=config.snap_to_points and not no_points,
        snap_to_lines=config.snap_to_lines and not no_lines,
        zoom=zoom if zoom is not None else config.zoom,
    )
    session = DraftingSession(config)
    with bound_session(session.session_id, drawing=drawing.name):
        try:
            session.load(drawing)
        except DraftingError as e:
            raise click.ClickException(f"{file}: {e}") from e
        result = session.engine.resolve(x, y)

    source = "no snap"
    if result.candidate is not None:
        source = result.candidate.kind.value
        if result.candidate.source_shape_id:
            source += f" on {result.candidate.source_shape_id}"
    console.print(f"{_fmt(x, y)} -> {_fmt(result.point.x, result.point.y)} via {source}", markup=False)


@cli.command(name="export", help="Export a drawing to SVG, PNG or JSON.")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    "export_format",
    type=click.Choice([f.value for f in ExportFormat]),
    default=ExportFormat.SVG.value,
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), required=True, help="Output file")
@click.option("--scale", type=click.FloatRange(min=0, min_open=True), default=1.0, help="PNG scale factor")
def export_drawing(file: Path, export_format: str, output: Path, scale: float) -> None:
    """Export a drawing to SVG, PNG or JSON."""
    drawing = _load_drawing(file)
    service = ExportService()

    match ExportFormat(export_format):
        case ExportFormat.SVG:
            output.write_text(service.to_svg(drawing), encoding="utf-8")
        case ExportFormat.PNG:
            output.write_bytes(service.to_png(drawing, scale=scale))
        case ExportFormat.JSON:
            output.write_text(service.to_json(drawing), encoding="utf-8")

    console.print(f"[green]Exported[/green] {len(drawing.shapes)} shapes to {output}")


def main() -> None:
    """Entry point for the ``drafting`` console script."""
    cli()


if __name__ == "__main__":
    main()
