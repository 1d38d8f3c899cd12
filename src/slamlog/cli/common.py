"""Shared option handling for slamlog commands."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from ..core.config import get_convention, load_config
from ..trajectory.dataset import Dataset
from ..trajectory.errors import TrajectoryError
from ..trajectory.parser import parse_file

console = Console()

CONFIG_OPTION = typer.Option(
    None,
    "--config", "-c",
    help="TOML config file merged over the defaults",
)

CONVENTION_OPTION = typer.Option(
    None,
    "--convention",
    help="Pose convention: world_to_camera or camera_to_world (overrides config)",
)


def resolve_config(config_path: Path | None, convention: str | None) -> dict:
    """Load config and apply command-line overrides."""
    if config_path is not None and not config_path.exists():
        console.print(f"[red]Config file not found:[/red] {escape(str(config_path))}")
        raise typer.Exit(1)
    config = load_config(config_path)
    if convention is not None:
        config.setdefault("parser", {})["convention"] = convention
    return config


def load_dataset(log_file: Path, config: dict) -> Dataset:
    """Parse ``log_file`` or print the error and exit with status 1."""
    try:
        conv = get_convention(config)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    encoding = config.get("parser", {}).get("encoding", "utf-8")
    try:
        return parse_file(log_file, convention=conv, encoding=encoding)
    except TrajectoryError as e:
        console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
        raise typer.Exit(1)
