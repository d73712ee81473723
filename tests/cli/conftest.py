"""Shared fixtures for folio.cli tests."""

import pytest
from structlog.testing import capture_logs

from folio.ops.context import OperationContext
from folio.ops.database import initialize_database
from folio.ops.sqlite_conn import SqliteConnection


@pytest.fixture(autouse=True)
def _captured_logs(monkeypatch):
    """Keep CLI invocations from reconfiguring logging onto CliRunner's streams."""
    monkeypatch.setattr("folio.core.logging.configure_logging", lambda *args, **kwargs: None)
    with capture_logs() as logs:
        yield logs


@pytest.fixture()
def db_path(tmp_path) -> str:
    """A file database with the schema applied."""
    path = str(tmp_path / "cli.db")
    conn = SqliteConnection(path)
    initialize_database(OperationContext(conn=conn, caller="test"))
    conn.close()
    return path
