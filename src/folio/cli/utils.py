"""
Shared plumbing for the CLI commands: building an ``OperationContext`` from
command-line flags and rendering ``OperationResult`` with rich.

A failed result prints ``Error (CODE): message`` to stderr and exits 1.
"""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from folio.core.settings import get_settings
from folio.ops.activity import dispatcher_from_settings
from folio.ops.context import Identity, OperationContext
from folio.ops.result import OperationResult
from folio.ops.sqlite_conn import SqliteConnection

console = Console()
err_console = Console(stderr=True)


def get_connection(database: str | None = None) -> SqliteConnection:
    """Connection to *database*, or to ``FOLIO_DATABASE`` when omitted."""
    return SqliteConnection(database or get_settings().database)


def make_context(
    database: str | None = None,
    *,
    user: str | None = None,
    paid: bool = False,
) -> tuple[OperationContext, SqliteConnection]:
    """Context for one command.  No ``user`` means an anonymous caller."""
    settings = get_settings()
    conn = get_connection(database)
    identity = Identity(id=user, is_paid=paid) if user else None
    ctx = OperationContext(conn=conn, user=identity, activity=dispatcher_from_settings(settings), caller="cli")
    return ctx, conn


def _to_dict(obj: Any) -> dict[str, Any]:
    if isinstance(obj, dict):
        return obj
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    return {"value": str(obj)}


def fail_if_error(result: OperationResult) -> None:
    if result.success:
        return
    code, message = (result.error.code, result.error.message) if result.error else ("ERROR", "Unknown error")
    err_console.print(f"[bold red]Error[/bold red] ({code}): {message}")
    raise typer.Exit(code=1)


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
    columns: list[str] | None = None,
) -> None:
    """Print a result's payload: JSON, a table for lists, key/value lines otherwise."""
    fail_if_error(result)
    data = result.data
    rows = [_to_dict(d) for d in data] if isinstance(data, list | tuple) else None

    if as_json:
        console.print_json(json.dumps(rows if rows is not None else _to_dict(data), default=str))
    elif rows is None:
        print_dict(_to_dict(data), title=title)
    elif rows:
        print_table(rows, title=title, columns=columns)
    else:
        console.print("[dim]No items.[/dim]")


def print_table(rows: list[Any], *, title: str = "", columns: list[str] | None = None) -> None:
    records = [_to_dict(r) for r in rows]
    table = Table(title=title or None, pad_edge=False)
    names = columns or list(records[0])
    for name in names:
        table.add_column(name, overflow="fold")
    for record in records:
        table.add_row(*[str(record.get(name, "")) for name in names])
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    if title:
        console.print(f"[bold]{title}[/bold]")
    for key, value in data.items():
        console.print(f"  [cyan]{key}[/cyan]: {value}")
