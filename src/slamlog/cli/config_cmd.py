"""slamlog config — Show the effective config or write a starter file."""

from pathlib import Path

import tomli_w
import typer
from rich.markup import escape

from ..core.config import load_defaults, save_config
from .common import CONFIG_OPTION, console, resolve_config


def config(
    config_path: Path = CONFIG_OPTION,
    init: Path = typer.Option(
        None,
        "--init",
        help="Write the default config to this path and exit",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing file with --init",
    ),
) -> None:
    """Print the merged configuration as TOML."""
    if init is not None:
        if init.exists() and not force:
            console.print(f"[red]{escape(str(init))} already exists[/red] (use --force to overwrite)")
            raise typer.Exit(1)
        save_config(init, load_defaults())
        console.print(f"[green]Wrote default config to[/green] {escape(str(init))}")
        return

    cfg = resolve_config(config_path, None)
    console.print(escape(tomli_w.dumps(cfg)), highlight=False)
