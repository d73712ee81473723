"""SQLite implementation of the ``Connection`` protocol.

The portfolio schema relies on the database for two guarantees: foreign
keys (sections and items never outlive their project) and UNIQUE
constraints (slug, and one section per key per project).  This adapter turns
foreign keys on for every connection and re-raises constraint violations as
:class:`folio.core.errors.IntegrityError` carrying the offending column, so
the slug allocator can tell a slug collision from any other conflict.

    conn = SqliteConnection("~/.folio/folio.db")
    create_tables(conn)
"""

from __future__ import annotations

import re
import sqlite3
from pathlib import Path
from typing import Any

from folio.core.errors import IntegrityError

_UNIQUE_COLUMN = re.compile(r"UNIQUE constraint failed: (?:\w+\.)?(\w+)")


def _integrity_error(exc: sqlite3.IntegrityError) -> IntegrityError:
    match = _UNIQUE_COLUMN.search(str(exc))
    return IntegrityError(str(exc), column=match.group(1) if match else None, cause=exc)


class SqliteConnection:
    """One ``sqlite3`` connection and the single cursor its results are read from."""

    def __init__(self, path: str = ":memory:") -> None:
        if path != ":memory:":
            target = Path(path).expanduser()
            target.parent.mkdir(parents=True, exist_ok=True)
            path = str(target)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._cursor = self._conn.cursor()

    def execute(self, sql: str, params: tuple = ()) -> Any:
        try:
            return self._cursor.execute(sql, params)
        except sqlite3.IntegrityError as exc:
            raise _integrity_error(exc) from exc

    def executemany(self, sql: str, params: list[tuple]) -> Any:
        try:
            return self._cursor.executemany(sql, params)
        except sqlite3.IntegrityError as exc:
            raise _integrity_error(exc) from exc

    def fetchone(self) -> Any:
        return self._cursor.fetchone()

    def fetchall(self) -> list:
        return self._cursor.fetchall()

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()
