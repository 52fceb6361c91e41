"""
Root Typer application for the agency-desk CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from agencydesk import __version__
from agencydesk.core.logging import configure_logging

app = Typer(
    name="agencydesk",
    help="agency-desk — backend jobs for the agency dashboard.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"agency-desk {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="structlog level for this run"),
) -> None:
    """agency-desk command line."""
    configure_logging(level=log_level, json_format=False)


# ── Sub-command registration ─────────────────────────────────────────────

from agencydesk.cli.approvals import app as approvals_app  # noqa: E402
from agencydesk.cli.health import app as health_app  # noqa: E402
from agencydesk.cli.serve import serve  # noqa: E402

app.add_typer(approvals_app, name="approvals", help="Content auto-approval.")
app.add_typer(health_app, name="health", help="Health checks.")
app.command("serve")(serve)
