"""Allowlist command - manage monitored process names."""

import typer
from rich.table import Table

from .common import console, get_monitor


def allowlist(
    show: bool = typer.Option(False, "--show", help="Show the current allowlist"),
    add: str | None = typer.Option(None, "--add", help="Process name to add"),
    remove: str | None = typer.Option(None, "--remove", help="Process name to remove"),
    reset: bool = typer.Option(False, "--reset", help="Restore the built-in allowlist"),
) -> None:
    """Manage which process names are monitored.

    Names are matched exactly, so "Python" and "python" are different.

    Examples:
        what-the-port allowlist --show
        what-the-port allowlist --add caddy
        what-the-port allowlist --remove docker-proxy
        what-the-port allowlist --reset
    """
    monitor = get_monitor()

    if reset:
        monitor.reset_to_default(rescan=False)
        console.print("[green]Allowlist reset to default[/green]")
        return

    if add:
        monitor.add(add, rescan=False)
        console.print(f"[green]Added {add}[/green]")
        return

    if remove:
        if remove not in monitor.allowlist:
            console.print(f"[yellow]{remove} is not in the allowlist[/yellow]")
            return
        monitor.remove(remove, rescan=False)
        console.print(f"[green]Removed {remove}[/green]")
        return

    if show:
        table = Table(title="Allowlist")
        table.add_column("Process", style="green")
        for name in sorted(monitor.allowlist):
            table.add_row(name)
        console.print(table)
        return

    console.print("[yellow]Use --show, --add, --remove or --reset[/yellow]")
