"""
CLI: ``agencydesk serve`` — start the functions server.
"""

from __future__ import annotations

import typer
import uvicorn

from agencydesk.cli.utils import console
from agencydesk.core.settings import AgencyDeskSettings


def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of workers"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the HTTP functions server."""
    settings = AgencyDeskSettings()
    bind_host = host or settings.host
    bind_port = port or settings.port

    console.print(f"[bold green]Starting agency-desk functions[/bold green] on {bind_host}:{bind_port}")
    uvicorn.run(
        "agencydesk.api:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )
