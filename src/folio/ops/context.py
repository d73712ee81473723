"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument.  The context carries the database connection, the caller identity
resolved by the (external) identity provider, the activity sink, and
arbitrary metadata.  There is no global store: each command gets its state
explicitly.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from folio.core.protocols import ActivitySink, Connection


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated caller as supplied by the identity provider.

    Attributes:
        id: Stable user id; owns projects.
        is_paid: Whether the caller holds the paid entitlement for pro templates.
    """

    id: str
    is_paid: bool = False


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        conn: Database connection satisfying :class:`folio.core.protocols.Connection`.
        user: Authenticated caller, ``None`` when anonymous.
        activity: Sink for best-effort activity events (``None`` disables them).
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request - ``"api"``, ``"cli"`` or ``"sdk"``.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    conn: Connection
    user: Identity | None = None
    activity: ActivitySink | None = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    metadata: dict[str, Any] = field(default_factory=dict)
