"""
CLI: ``agencydesk health`` — probe the store and LLM configuration.
"""

from __future__ import annotations

import typer

from agencydesk.cli.utils import make_context, output_result, print_table
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.ops.health import OverallStatus, get_health

app = typer.Typer(no_args_is_help=True)


@app.command("check")
def health_check(
    database: str | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Check system health. Exits 1 when unhealthy."""
    settings = AgencyDeskSettings()
    ctx, store = make_context(database)
    try:
        result = get_health(
            ctx,
            llm_configured=bool(settings.llm_api_key),
            slow_ms=settings.health_slow_ms,
            version=settings.app_version,
            environment=settings.environment,
        )
    finally:
        store.close()

    output_result(result, as_json=json_out, title="Health")
    report = result.data
    if not json_out:
        print_table(
            [{"check": name, **check.to_dict()} for name, check in report.checks.items()],
            title="Checks",
        )
    if report.status is OverallStatus.UNHEALTHY:
        raise typer.Exit(code=1)
