"""Stop command - terminate the server listening on a port."""

import signal

import typer

from .common import console, error_console, get_monitor

SIGNALS = {
    "TERM": signal.SIGTERM,
    "INT": signal.SIGINT,
    "KILL": signal.SIGKILL,
}


def stop(
    port: int = typer.Argument(..., help="Port the server listens on"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
    sig: str = typer.Option("TERM", "--signal", "-s", help="Signal to send: TERM, INT or KILL"),
) -> None:
    """Stop the server listening on a port.

    Examples:
        what-the-port stop 3000
        what-the-port stop 8080 --force --signal KILL
    """
    signum = SIGNALS.get(sig.upper().removeprefix("SIG"))
    if signum is None:
        error_console.print(f"[red]Error:[/red] Unknown signal {sig}")
        raise typer.Exit(1)

    monitor = get_monitor()
    target = next((p for p in monitor.refresh() if p.port == port), None)
    if target is None:
        error_console.print(f"[red]Error:[/red] No dev server on port {port}")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Stop {target.label} on port {port}?")
        if not confirm:
            console.print("[yellow]Cancelled[/yellow]")
            return

    if not monitor.stop(target.pid, sig=signum):
        error_console.print(f"[red]Error:[/red] Failed to stop process {target.pid}")
        raise typer.Exit(1)

    console.print(f"[green]Stopped process {target.pid}[/green]")
    if any(p.port == port for p in monitor.ports):
        console.print(f"[dim]Port {port} is still listening, it may take a moment to close[/dim]")
