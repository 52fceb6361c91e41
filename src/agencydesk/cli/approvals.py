"""
CLI: ``agencydesk approvals`` — run the auto-approval pass by hand or on a timer.
"""

from __future__ import annotations

import typer

from agencydesk.cli.utils import console, make_context, output_result, print_table
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.ops.approvals import auto_approve_posts

app = typer.Typer(no_args_is_help=True)


def _outcome_rows(report) -> list[dict[str, str]]:
    rows = []
    for outcome in report.outcomes:
        rows.append({
            "post": outcome.post_id,
            "client": outcome.client_id,
            "todos": f"{outcome.todo_status.value} ({outcome.todos_completed})",
            "activity": outcome.activity_status.value,
        })
    return rows


@app.command("run")
def run(
    database: str | None = typer.Option(None, "--database", "-d", help="SQLite file instead of the hosted store"),
    dry_run: bool = typer.Option(False, "--dry-run", help="List due posts without approving them"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Approve every pending post whose deadline has passed."""
    ctx, store = make_context(database, dry_run=dry_run)
    try:
        result = auto_approve_posts(ctx)
    finally:
        store.close()

    output_result(result, as_json=json_out, title="Auto-approval")
    if json_out or result.data is None:
        return
    if dry_run:
        print_table(
            [{"post": p.id, "client": p.client_id, "due": str(p.auto_approve_at)} for p in result.data.posts],
            title="Would approve",
        )
    elif result.data.outcomes:
        print_table(_outcome_rows(result.data), title="Cascade")


@app.command("watch")
def watch(
    interval: float | None = typer.Option(None, "--interval", "-i", help="Seconds between passes"),
    database: str | None = typer.Option(None, "--database", "-d"),
    max_runs: int | None = typer.Option(None, "--max-runs", help="Stop after this many passes"),
) -> None:
    """Run the pass now and then on a fixed interval until interrupted."""
    from agencydesk.scheduling import ThreadScheduler

    seconds = interval if interval is not None else AgencyDeskSettings().auto_approve_interval_s

    def _tick() -> None:
        ctx, store = make_context(database, caller="scheduler")
        try:
            result = auto_approve_posts(ctx)
        finally:
            store.close()
        if result.success and result.data is not None:
            console.print(f"[green]{result.data.message}[/green] ({result.data.processed})")
        else:
            console.print(f"[red]{result.error.message if result.error else 'pass failed'}[/red]")

    scheduler = ThreadScheduler()
    console.print(f"[bold]Watching[/bold] every {seconds}s. Ctrl+C to stop.")
    scheduler.start(_tick, interval_seconds=seconds, max_ticks=max_runs)
    try:
        while scheduler.is_running:
            scheduler.wait(timeout=1.0)
    except KeyboardInterrupt:
        console.print("Stopping...")
    finally:
        scheduler.stop()
