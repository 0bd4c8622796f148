"""Config command - manage the monitored port range."""

import typer
from rich.table import Table

from ..config import get_db_path
from .common import console, get_db


def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    set_range: str | None = typer.Option(
        None, "--set-range", help="Set port range: start-end"
    ),
) -> None:
    """Manage what-the-port configuration.

    Examples:
        what-the-port config --show
        what-the-port config --set-range 3000-9999
    """
    db = get_db()

    if show:
        scan_config = db.get_scan_config()
        table = Table(title="Configuration")
        table.add_column("Setting", style="green")
        table.add_column("Value", style="yellow")
        table.add_row("Min port", str(scan_config.min_port))
        table.add_row("Max port", str(scan_config.max_port))
        table.add_row("Database", str(get_db_path()))
        console.print(table)
        return

    if set_range:
        range_parts = set_range.split("-")
        if len(range_parts) != 2:
            console.print("[red]Error:[/red] Range should be start-end")
            raise typer.Exit(1)

        try:
            start = int(range_parts[0])
            end = int(range_parts[1])
        except ValueError:
            console.print("[red]Error:[/red] Ports must be integers")
            raise typer.Exit(1)

        if not (1 <= start <= 65535 and 1 <= end <= 65535):
            console.print("[red]Error:[/red] Ports must be between 1 and 65535")
            raise typer.Exit(1)

        if start > end:
            console.print("[red]Error:[/red] Start must not be greater than end")
            raise typer.Exit(1)

        db.set_port_range(start, end)
        console.print(f"[green]Set port range: {start}-{end}[/green]")
        return

    console.print("[yellow]Use --show or --set-range[/yellow]")
