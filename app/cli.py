from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.filesystem.scene_repository import FileSystemSceneRepository
from app.config import load_settings
from app.scene_wiring import build_geometry_builder, build_scene_geometry
from domain.models import DEFAULT_CURVATURE, DEFAULT_PLUG_SIZE, PATH_STRAIGHT, Point
from domain.services.path_generator import generate_path, normalize_path_kind
from domain.services.plug_shapes import PLUG_SHAPE_BUILDERS, generate_plug_shape

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.command("geometry")
def geometry(
    scene_path: Path = typer.Argument(..., help="Scene JSON file with elements and connectors."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write connector geometry JSON to this file.",
    ),
    config: Optional[Path] = typer.Option(None, help="YAML settings file."),
) -> None:
    if not scene_path.exists():
        console.print(f"[red]File not found:[/] {scene_path}")
        raise typer.Exit(code=1)

    settings = load_settings(config)
    repository = FileSystemSceneRepository()
    try:
        scene = repository.load(scene_path)
    except ValueError as exc:
        console.print(f"[red]Invalid scene:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    results = build_scene_geometry(
        scene, build_geometry_builder(settings), settings.engine.default_options()
    )
    if output is not None:
        repository.save_geometry(results, output)
        console.print(f"[green]Wrote[/] {output}")
        return

    table = Table(title=str(scene_path))
    table.add_column("connector")
    table.add_column("sockets")
    table.add_column("path")
    table.add_column("bounding box")
    table.add_column("reliable")
    for connector_id, item in results.items():
        if item is None:
            table.add_row(connector_id, "-", "[yellow]not ready[/]", "-", "-")
            continue
        box = item.bounding_box
        table.add_row(
            connector_id,
            f"{item.start_socket} -> {item.end_socket}",
            item.path.to_svg(),
            f"{box.x:g}, {box.y:g}, {box.width:g} x {box.height:g}",
            "yes" if item.reliable else "[yellow]no[/]",
        )
    console.print(table)


@app.command("plug")
def plug(
    kind: str = typer.Argument(..., help="Plug kind, e.g. arrow1 or disc."),
    size: float = typer.Option(DEFAULT_PLUG_SIZE, help="Plug size in pixels."),
) -> None:
    name = kind.strip().lower()
    if name not in PLUG_SHAPE_BUILDERS:
        console.print(f"[red]Unknown plug kind:[/] {kind}")
        raise typer.Exit(code=1)
    shape = generate_plug_shape(name, size)
    if shape.is_empty:
        console.print(f"[yellow]No geometry for {name} at size {size:g}[/]")
        raise typer.Exit(code=1)
    console.print(shape.to_svg())


@app.command("path")
def path(
    start_x: float = typer.Argument(...),
    start_y: float = typer.Argument(...),
    end_x: float = typer.Argument(...),
    end_y: float = typer.Argument(...),
    kind: str = typer.Option(PATH_STRAIGHT, help="straight, arc, fluid, magnet or grid."),
    curvature: float = typer.Option(DEFAULT_CURVATURE, help="Bend of arc and fluid paths."),
) -> None:
    result = generate_path(
        Point(start_x, start_y),
        Point(end_x, end_y),
        normalize_path_kind(kind),
        curvature,
    )
    if result.is_empty:
        console.print("[red]Path endpoints must be finite[/]")
        raise typer.Exit(code=1)
    console.print(result.to_svg())


@app.command("validate")
def validate(
    scene_path: Path = typer.Argument(..., help="Scene JSON file to validate."),
) -> None:
    if not scene_path.exists():
        console.print(f"[red]File not found:[/] {scene_path}")
        raise typer.Exit(code=1)
    try:
        scene = FileSystemSceneRepository().load(scene_path)
    except ValueError as exc:
        console.print(f"[red]Validation failed:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    console.print(
        f"[green]Valid scene:[/] {scene_path} "
        f"({len(scene.elements)} elements, {len(scene.connectors)} connectors)"
    )


if __name__ == "__main__":
    app()
