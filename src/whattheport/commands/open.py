"""Open command - open a dev server in the browser."""

import typer

from .common import console


def open_cmd(
    port: int = typer.Argument(..., help="Port to open"),
) -> None:
    """Open http://localhost:PORT in the default browser.

    Examples:
        what-the-port open 3000
    """
    url = f"http://localhost:{port}"
    typer.launch(url)
    console.print(f"[green]Opened {url}[/green]")
