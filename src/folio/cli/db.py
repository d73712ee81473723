"""
CLI: ``folio db`` - database management commands.
"""

from __future__ import annotations

import typer

from folio.cli.utils import make_context, output_result

app = typer.Typer(no_args_is_help=True)


@app.command()
def init(
    database: str | None = typer.Option(None, "--database", "-d", help="Database path"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Initialise database schema (create tables)."""
    from folio.ops.database import initialize_database

    ctx, _conn = make_context(database)
    result = initialize_database(ctx)
    output_result(result, as_json=json_out, title="Database Init")
