"""Typer CLI for What The Port - Main entry point."""

import typer

from . import __version__
from .commands import allowlist, config, copy, list_cmd, open_cmd, stop, watch
from .console import setup_logging

app = typer.Typer(
    name="what-the-port",
    help="See what's running on your ports",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"what-the-port version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """See what's running on your ports."""
    setup_logging(debug)


# Register all commands
app.command(name="list")(list_cmd)
app.command()(stop)
app.command(name="open")(open_cmd)
app.command()(copy)
app.command()(watch)
app.command()(allowlist)
app.command()(config)


def main() -> None:
    """Main entry point."""
    app()
