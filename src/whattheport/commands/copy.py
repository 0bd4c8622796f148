"""Copy command - copy a dev server URL to the clipboard."""

import pyperclip
import typer

from .common import console, error_console


def copy(
    port: int = typer.Argument(..., help="Port to copy the URL of"),
) -> None:
    """Copy http://localhost:PORT to the clipboard.

    Examples:
        what-the-port copy 3000
    """
    url = f"http://localhost:{port}"
    try:
        pyperclip.copy(url)
    except pyperclip.PyperclipException as e:
        error_console.print(f"[red]Error:[/red] Could not copy to clipboard: {e}")
        raise typer.Exit(1)
    console.print(f"[green]Copied {url} to clipboard[/green]")
