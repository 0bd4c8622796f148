"""List command - show dev servers listening on monitored ports."""

import json

import typer
from rich.table import Table

from ..models import format_uptime
from .common import console, debug, get_monitor


def list_cmd(
    as_json: bool = typer.Option(False, "--json", help="Output ports as JSON"),
) -> None:
    """List dev servers listening on monitored ports.

    Examples:
        what-the-port list
        what-the-port list --json
    """
    monitor = get_monitor()
    debug(f"Scanning ports {monitor.config.min_port}-{monitor.config.max_port}")
    ports = monitor.refresh()

    if as_json:
        typer.echo(json.dumps([p.to_dict() for p in ports], indent=2))
        return

    if not ports:
        console.print(
            f"[yellow]No dev servers running on ports "
            f"{monitor.config.min_port}-{monitor.config.max_port}[/yellow]"
        )
        return

    table = Table(title="Listening Ports")
    table.add_column("Port", style="green")
    table.add_column("Project", style="cyan")
    table.add_column("Process", style="blue")
    table.add_column("PID", style="dim")
    table.add_column("Uptime", style="yellow")

    for port in ports:
        uptime = format_uptime(port.start_time)
        if port.start_time_estimated:
            # Start time unknown, uptime counts from first sighting
            uptime = f"[dim]~{uptime}[/dim]"
        table.add_row(
            f":{port.port}",
            port.project_name or "-",
            port.process_name,
            str(port.pid),
            uptime,
        )

    console.print(table)
