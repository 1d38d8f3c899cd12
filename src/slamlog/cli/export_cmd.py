"""slamlog export — Write points and camera centers to a PLY file."""

from pathlib import Path

import typer
from rich.markup import escape

from ..core.config import get_color
from ..export.ply_io import dataset_to_vertices, read_binary_ply, write_binary_ply
from .common import CONFIG_OPTION, CONVENTION_OPTION, console, load_dataset, resolve_config


def export(
    log_file: Path = typer.Argument(
        ...,
        help="Trajectory log to parse",
    ),
    output: Path = typer.Option(
        None,
        "--output", "-o",
        help="Output PLY path (defaults to <log>.ply)",
    ),
    cameras: bool = typer.Option(
        True,
        "--cameras/--no-cameras",
        help="Include camera centers as vertices",
    ),
    config: Path = CONFIG_OPTION,
    convention: str = CONVENTION_OPTION,
) -> None:
    """Export parsed points (and camera centers) as a binary PLY."""
    cfg = resolve_config(config, convention)
    dataset = load_dataset(log_file, cfg)

    if output is None:
        output = log_file.with_suffix(".ply")

    try:
        point_color = get_color(cfg, "point_color")
        camera_color = get_color(cfg, "camera_color")
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    xyz, rgb = dataset_to_vertices(dataset, point_color, camera_color, include_cameras=cameras)
    count = write_binary_ply(output, xyz, rgb)

    # Read the file back so a short write is reported here, not by the viewer
    written = read_binary_ply(output)
    if len(written) != count:
        console.print(f"[red]PLY check failed:[/red] wrote {count} vertices, read back {len(written)}")
        raise typer.Exit(1)

    console.print(f"[green]Wrote {count} vertices[/green] to {escape(str(output))}")
    console.print(f"  Points:  {len(dataset.points)}")
    if cameras:
        console.print(f"  Cameras: {len(dataset.cameras)}")
