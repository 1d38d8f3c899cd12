"""slamlog rays — Back-project pixel observations into world-frame sightlines."""

from pathlib import Path

import typer
from rich.markup import escape

from ..core.config import get_fallback_k
from ..core.constants import DEFAULT_RAY_LENGTH
from ..export.rays_io import write_rays_json
from ..geometry.sightlines import dataset_sightlines
from .common import CONFIG_OPTION, CONVENTION_OPTION, console, load_dataset, resolve_config


def rays(
    log_file: Path = typer.Argument(
        ...,
        help="Trajectory log to parse",
    ),
    output: Path = typer.Option(
        None,
        "--output", "-o",
        help="Output JSON path (defaults to <log>.rays.json)",
    ),
    length: float = typer.Option(
        None,
        "--length",
        help="Sightline length in world units (defaults to viewer.ray_length)",
    ),
    config: Path = CONFIG_OPTION,
    convention: str = CONVENTION_OPTION,
) -> None:
    """Write camera poses and one sightline per observed pixel as JSON.

    Uses the log's MATRIX K block, or camera.fallback_k from config when the
    log has none.
    """
    cfg = resolve_config(config, convention)
    dataset = load_dataset(log_file, cfg)

    if output is None:
        output = log_file.with_suffix(".rays.json")
    if length is None:
        length = float(cfg.get("viewer", {}).get("ray_length", DEFAULT_RAY_LENGTH))

    try:
        k = None if dataset.has_intrinsics else get_fallback_k(cfg)
        lines = dataset_sightlines(dataset, intrinsics=k, length=length)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    write_rays_json(output, dataset, lines)

    k_source = "log" if dataset.has_intrinsics else "config fallback"
    console.print(f"[green]Wrote {len(lines)} sightlines[/green] to {escape(str(output))}")
    console.print(f"  Cameras: {len(dataset.cameras)}")
    console.print(f"  K:       {k_source}")
