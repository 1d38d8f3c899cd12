"""slamlog CLI — Typer application with subcommands."""

import logging

import typer

from ..core.log import configure_logging
from .summary_cmd import summary
from .export_cmd import export
from .rays_cmd import rays
from .config_cmd import config

app = typer.Typer(
    name="slamlog",
    help="Parse SLAM trajectory / point-cloud logs into cameras, points and intrinsics.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log parser decisions for every line",
    ),
) -> None:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)


app.command()(summary)
app.command(name="export")(export)
app.command()(rays)
app.command()(config)


if __name__ == "__main__":
    app()
