"""Base repository over the ``Connection`` protocol.

Every portfolio write that spans rows (project creation with its sections
and seed items, a reorder, a cascading delete) must be seen whole or not at
all.  :class:`BaseRepository` gives the table repositories a shared
``transaction()`` scope for that, plus the few query helpers they need.

Architecture::

    ProjectRepository ─┐
    SectionRepository ─┼──► BaseRepository ──► Connection (SqliteConnection)
    ItemRepository    ─┘      query / query_one / insert / insert_many
                              transaction(): commit, or roll back and re-raise

Tags:
    repository, transaction, sqlite
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from folio.core.protocols import Connection


def _row_dict(cursor: Any, row: Any) -> dict[str, Any]:
    if hasattr(row, "keys"):
        return {key: row[key] for key in row.keys()}
    columns = [desc[0] for desc in cursor.description]
    return dict(zip(columns, row, strict=True))


class BaseRepository:
    """Shared plumbing for the portfolio table repositories."""

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def ph(count: int) -> str:
        """``?, ?, ...`` for *count* bound parameters."""
        return ", ".join(["?"] * count)

    def execute(self, sql: str, params: tuple = ()) -> Any:
        return self.conn.execute(sql, params)

    def query(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        """Run a SELECT; rows come back as plain dicts keyed by column."""
        cursor = self.conn.execute(sql, params)
        return [_row_dict(cursor, row) for row in cursor.fetchall()]

    def query_one(self, sql: str, params: tuple = ()) -> dict[str, Any] | None:
        rows = self.query(sql, params)
        return rows[0] if rows else None

    def insert(self, table: str, data: dict[str, Any]) -> Any:
        columns = ", ".join(data)
        return self.conn.execute(
            f"INSERT INTO {table} ({columns}) VALUES ({self.ph(len(data))})",
            tuple(data.values()),
        )

    def insert_many(self, table: str, rows: Sequence[dict[str, Any]]) -> int:
        """Insert rows sharing the first row's columns. Returns the row count."""
        if not rows:
            return 0
        columns = list(rows[0])
        self.conn.executemany(
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({self.ph(len(columns))})",
            [tuple(row[col] for col in columns) for row in rows],
        )
        return len(rows)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit the enclosed writes together, or roll all of them back."""
        try:
            yield
        except BaseException:
            self.conn.rollback()
            raise
        self.conn.commit()


__all__ = ["BaseRepository"]
