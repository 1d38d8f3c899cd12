"""slamlog summary — Show what a trajectory log contains."""

from pathlib import Path

import numpy as np
import typer
from rich.markup import escape
from rich.table import Table

from ..geometry.sightlines import camera_center
from .common import CONFIG_OPTION, CONVENTION_OPTION, console, load_dataset, resolve_config


def summary(
    log_file: Path = typer.Argument(
        ...,
        help="Trajectory log to parse",
    ),
    config: Path = CONFIG_OPTION,
    convention: str = CONVENTION_OPTION,
    max_cameras: int = typer.Option(
        20,
        "--max-cameras",
        help="Rows to show in the camera table (0 = all)",
    ),
) -> None:
    """Parse a trajectory log and print cameras, points and intrinsics."""
    cfg = resolve_config(config, convention)
    dataset = load_dataset(log_file, cfg)

    console.print(f"\n[bold]{escape(log_file.name)}[/bold]")
    console.print(f"Cameras:    {len(dataset.cameras)}")
    console.print(f"Points:     {len(dataset.points)}")
    console.print(f"Pixels:     {dataset.pixel_count}")
    k_source = "from log" if dataset.has_intrinsics else "[dim]identity (no MATRIX K block)[/dim]"
    console.print(f"Intrinsics: {k_source}")
    console.print()

    if dataset.cameras:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Label", style="cyan")
        table.add_column("Center (world)")
        table.add_column("Pixels", justify="right")

        shown = dataset.cameras if max_cameras <= 0 else dataset.cameras[:max_cameras]
        for i, cam in enumerate(shown):
            center = camera_center(cam)
            table.add_row(
                str(i),
                escape(cam.label) if cam.label is not None else "[dim]-[/dim]",
                _fmt_vec(center),
                str(len(cam.pixels)),
            )
        console.print(table)
        hidden = len(dataset.cameras) - len(shown)
        if hidden > 0:
            console.print(f"[dim]... {hidden} more cameras[/dim]")

    if dataset.has_intrinsics:
        console.print("\n[bold]K:[/bold]")
        for row in dataset.intrinsics:
            console.print(f"  {_fmt_vec(row)}")

    if dataset.points:
        pts = dataset.points_array()
        console.print(f"\n[bold]Point bounds:[/bold] min {_fmt_vec(pts.min(axis=0))}  "
                      f"max {_fmt_vec(pts.max(axis=0))}")


def _fmt_vec(v: np.ndarray) -> str:
    return "(" + ", ".join(f"{x:.3f}" for x in v) + ")"
