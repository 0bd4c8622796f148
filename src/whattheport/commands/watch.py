"""Watch command - report servers as they start and stop."""

import typer

from ..config import SCAN_INTERVAL_SECONDS
from ..monitor import PortStarted, PortStopped
from .common import console, get_monitor


def watch(
    interval: float = typer.Option(
        SCAN_INTERVAL_SECONDS, "-i", "--interval", help="Seconds between scans"
    ),
) -> None:
    """Watch monitored ports and report transitions until interrupted.

    Examples:
        what-the-port watch
        what-the-port watch --interval 5
    """
    if interval <= 0:
        console.print("[red]Error:[/red] Interval must be positive")
        raise typer.Exit(1)

    monitor = get_monitor()

    def started(event: PortStarted) -> None:
        name = event.project_name or event.process_name
        console.print(f"[green]● Port Started[/green] {name} on port {event.port}")

    def stopped(event: PortStopped) -> None:
        console.print(f"[red]○ Port Stopped[/red] Port {event.port} is no longer listening")

    monitor.on_port_started(started)
    monitor.on_port_stopped(stopped)

    console.print(
        f"[dim]Watching ports {monitor.config.min_port}-{monitor.config.max_port} "
        f"every {interval:g}s (Ctrl-C to quit)[/dim]"
    )
    try:
        monitor.run(interval=interval)
    except KeyboardInterrupt:
        console.print("\n[dim]Goodbye![/dim]")
