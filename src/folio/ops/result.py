"""
Operation result envelope.

Registry operations never raise.  They hand back an :class:`OperationResult`
holding either the payload or an :class:`OperationError` whose ``code`` is
one of ``UNAUTHORIZED``, ``NOT_FOUND``, ``BAD_REQUEST``,
``PAYMENT_REQUIRED``, ``CONFLICT`` or ``INTERNAL``.  Transports (the CLI
today) translate the code into an exit status or an HTTP status.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from folio.core.errors import ErrorCategory, FolioError, ValidationError


@dataclass(frozen=True, slots=True)
class OperationError:
    """Why an operation failed.

    ``details`` carries the offending field, constraint, or the context a
    caller needs to fix the request (for example the missing ids of a
    reorder).
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)

T = TypeVar("T")


@dataclass
class OperationResult(Generic[T]):
    """Success payload or failure, plus how long the operation took."""

    success: bool
    data: T | None = None
    error: OperationError | None = None
    elapsed_ms: float = 0.0

    @classmethod
    def ok(cls, data: T, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        return cls(success=True, data=data, elapsed_ms=elapsed_ms)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        error = OperationError(code=code, message=message, category=category, details=details or {})
        return cls(success=False, error=error, elapsed_ms=elapsed_ms)

    @classmethod
    def from_error(cls, error: FolioError, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Fold a typed folio error into a failed result.

        Validation errors contribute ``field`` and ``constraint``; free-form
        context (``with_context(missing=[...])``) is copied into details.
        Ids in the error context stay in the logs, not in the response.
        """
        details: dict[str, Any] = {}
        if isinstance(error, ValidationError):
            if error.field:
                details["field"] = error.field
            if error.constraint:
                details["constraint"] = error.constraint
        details.update(error.context.metadata)
        return cls.fail(error.code, error.message, category=error.category, details=details, elapsed_ms=elapsed_ms)

    def to_dict(self) -> dict[str, Any]:
        """Plain dict for ``--json`` output."""
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = {"code": self.error.code, "message": self.error.message}
            if self.error.details:
                out["error"]["details"] = self.error.details
        if self.elapsed_ms:
            out["elapsed_ms"] = round(self.elapsed_ms, 2)
        return out


class _Timer:
    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000


def start_timer() -> _Timer:
    """Stopwatch started now; read ``elapsed_ms`` when the operation ends."""
    return _Timer()
