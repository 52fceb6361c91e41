"""
CLI utility helpers — output formatting and store management.
"""

from __future__ import annotations

import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from agencydesk.core.errors import AgencyDeskError
from agencydesk.core.settings import AgencyDeskSettings
from agencydesk.ops.context import OperationContext
from agencydesk.ops.result import OperationResult
from agencydesk.store import SqliteStore, open_store
from agencydesk.store.protocol import ContentStore

console = Console()
err_console = Console(stderr=True)


# ── Store helper ─────────────────────────────────────────────────────────


def get_store(database: str | None = None, settings: AgencyDeskSettings | None = None) -> ContentStore:
    """Open a store. ``--database`` forces a local SQLite file."""
    if database:
        return SqliteStore(database)
    try:
        return open_store(settings or AgencyDeskSettings())
    except AgencyDeskError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e


def make_context(
    database: str | None = None,
    *,
    dry_run: bool = False,
    caller: str = "cli",
) -> tuple[OperationContext, ContentStore]:
    """Create an ``OperationContext`` + store pair for CLI commands.

    The caller owns the store and must close it.
    """
    store = get_store(database)
    ctx = OperationContext(store=store, caller=caller, dry_run=dry_run)
    return ctx, store


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an ``OperationResult`` to the terminal; exit 1 on failure."""
    if not result.success:
        err = result.error
        msg = err.message if err else "Unknown error"
        code = err.code if err else "ERROR"
        err_console.print(f"[bold red]Error[/bold red] ({code}): {msg}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(result.to_dict(), default=str))
        return

    _print_dict(_to_dict(result.data), title=title)
    for warning in result.warnings:
        err_console.print(f"[yellow]warning:[/yellow] {warning}")


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        if isinstance(v, (list, dict)):
            continue
        console.print(f"  [cyan]{k}[/cyan]: {v}")
