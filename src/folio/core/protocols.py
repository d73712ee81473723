"""
Canonical protocol definitions for folio.

Single home for the structural contracts the registry depends on.  The
storage engine, the identity provider and the activity sink are external
collaborators; folio only describes the shape it needs from them.

Architecture:
    ::

        protocols.py (YOU ARE HERE)
        ├── Connection          - sync DB protocol (sqlite3, psycopg2, etc.)
        └── ActivitySink        - best-effort activity/notification delivery

    Consumers:
        core/repository.py, ops/context.py, ops/activity.py

Guardrails:
    ❌ DON'T: Redeclare Connection in other modules
    ✅ DO: Import from folio.core.protocols

    ❌ DON'T: Put implementation logic in protocol classes
    ✅ DO: Keep implementations in ops/ adapters

Tags:
    protocol, connection, activity, contracts, folio
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """
    Minimal synchronous connection interface used by the repositories.

    ::

        ┌────────────────────────────────────────────────────────┐
        │ execute(sql, params)   → Execute single statement      │
        │ executemany(sql, list) → Execute for multiple params   │
        │ fetchone()             → Get one result row            │
        │ fetchall()             → Get all result rows           │
        │ commit()               → Commit transaction            │
        │ rollback()             → Rollback transaction          │
        └────────────────────────────────────────────────────────┘

    Driver exceptions for constraint violations must be translated to
    :class:`folio.core.errors.IntegrityError` by the adapter, so the slug
    allocator can retry without knowing the driver.
    """

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute a single SQL statement."""
        ...

    def executemany(self, sql: str, params: list[tuple]) -> Any:
        """Execute a statement once per parameter tuple."""
        ...

    def fetchone(self) -> Any:
        """Fetch one row from the last query."""
        ...

    def fetchall(self) -> list[Any]:
        """Fetch all rows from the last query."""
        ...

    def commit(self) -> None:
        """Commit the current transaction."""
        ...

    def rollback(self) -> None:
        """Roll back the current transaction."""
        ...


@runtime_checkable
class ActivitySink(Protocol):
    """Receives activity events after a successful mutation.

    Implementations must not raise into the caller and must not block on
    network delivery.
    """

    def dispatch(self, event: Any) -> None:
        """Hand the event off for out-of-band delivery."""
        ...


__all__ = ["ActivitySink", "Connection"]
