"""
Root Typer application for the folio CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="folio",
    help="folio - portfolio document registry.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from folio import __version__

        typer.echo(f"folio {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """folio CLI - manage portfolios and their public documents."""
    from folio.core.logging import configure_logging
    from folio.core.settings import get_settings

    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_json, service="folio")


# ── Sub-command registration ─────────────────────────────────────────────

from folio.cli.db import app as db_app  # noqa: E402
from folio.cli.portfolio import app as portfolio_app  # noqa: E402

app.add_typer(db_app, name="db", help="Database operations.")
app.add_typer(portfolio_app, name="portfolio", help="Portfolio management.")


if __name__ == "__main__":
    app()
