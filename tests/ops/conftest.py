"""Shared fixtures for folio.ops tests."""

import pytest

from folio.ops.activity import RecordingActivityDispatcher
from folio.ops.context import Identity, OperationContext
from folio.ops.database import initialize_database
from folio.ops.projects import create_project
from folio.ops.requests import CreateProjectRequest
from folio.ops.sqlite_conn import SqliteConnection


@pytest.fixture()
def conn() -> SqliteConnection:
    """In-memory SQLite connection with the portfolio schema."""
    conn = SqliteConnection(":memory:")
    result = initialize_database(OperationContext(conn=conn, caller="test"))
    assert result.success
    yield conn
    conn.close()


@pytest.fixture()
def recorder() -> RecordingActivityDispatcher:
    return RecordingActivityDispatcher()


@pytest.fixture()
def user() -> Identity:
    return Identity(id="user-1")


@pytest.fixture()
def ctx(conn: SqliteConnection, user: Identity, recorder: RecordingActivityDispatcher) -> OperationContext:
    """Free-tier caller."""
    return OperationContext(conn=conn, user=user, activity=recorder, caller="test")


@pytest.fixture()
def paid_ctx(conn: SqliteConnection, recorder: RecordingActivityDispatcher) -> OperationContext:
    """Same owner as ``ctx`` but holding the pro entitlement."""
    return OperationContext(conn=conn, user=Identity(id="user-1", is_paid=True), activity=recorder, caller="test")


@pytest.fixture()
def other_ctx(conn: SqliteConnection) -> OperationContext:
    """A different authenticated user on the same store."""
    return OperationContext(conn=conn, user=Identity(id="user-2", is_paid=True), caller="test")


@pytest.fixture()
def anon_ctx(conn: SqliteConnection) -> OperationContext:
    return OperationContext(conn=conn, caller="test")


@pytest.fixture()
def project(ctx: OperationContext):
    """A freshly created ``My Site`` project (ProjectDetail)."""
    result = create_project(ctx, CreateProjectRequest(title="My Site"))
    assert result.success, result.error
    return result.data
