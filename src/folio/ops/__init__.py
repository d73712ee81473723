"""
Operations layer - the portfolio registry.

Typed request/response functions over the project → section → item
hierarchy:

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` (never raise)
- All functions are transport-agnostic (no HTTP, no CLI knowledge)
- Mutations run in one transaction and then emit a best-effort activity event

Usage::

    from folio.ops import Identity, OperationContext, SqliteConnection
    from folio.ops.database import initialize_database
    from folio.ops.projects import create_project
    from folio.ops.requests import CreateProjectRequest

    ctx = OperationContext(conn=SqliteConnection(":memory:"), user=Identity("u1"))
    initialize_database(ctx)
    result = create_project(ctx, CreateProjectRequest(title="My Site"))
    assert result.data.project.slug == "my-site"
"""

from folio.ops.context import Identity, OperationContext
from folio.ops.result import OperationError, OperationResult
from folio.ops.sqlite_conn import SqliteConnection

__all__ = [
    "Identity",
    "OperationContext",
    "OperationError",
    "OperationResult",
    "SqliteConnection",
]
