"""
Database operations.

Thin wrapper around :func:`folio.core.schema.create_tables` for the CLI and
for embedding applications that own their connection.
"""

from __future__ import annotations

from folio.core.logging import get_logger
from folio.core.schema import create_tables
from folio.ops.context import OperationContext
from folio.ops.guards import failure
from folio.ops.responses import DatabaseInitResult
from folio.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def initialize_database(ctx: OperationContext) -> OperationResult[DatabaseInitResult]:
    """Create the portfolio tables (idempotent)."""
    timer = start_timer()
    try:
        tables = create_tables(ctx.conn)
        logger.info("database.initialized", tables=tables)
        return OperationResult.ok(DatabaseInitResult(tables_created=tables), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("initialize_database", exc, timer.elapsed_ms)
