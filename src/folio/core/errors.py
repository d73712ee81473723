"""
Typed errors raised inside the registry and folded into results at the ops
boundary.

Each class carries a stable ``code``.  The ops layer copies it into
:class:`~folio.ops.result.OperationError`, and transports map it to an exit
status or HTTP status without matching on message text.

Manifesto:
    - **One class per outcome the caller must tell apart:** signed out,
      missing, invalid, unpaid, conflicting
    - **Codes are contract:** a code never changes once shipped
    - **Ids for logs, not for responses:** entity ids ride in
      :class:`ErrorContext`; only free-form metadata reaches the caller

Architecture:
    ::

        FolioError (code, category, context, cause)
        ├── AuthenticationError     UNAUTHORIZED
        ├── NotFoundError           NOT_FOUND        (missing or not yours)
        ├── ValidationError         BAD_REQUEST      (field, value, constraint)
        ├── PaymentRequiredError    PAYMENT_REQUIRED (pro template, free caller)
        └── ConflictError           CONFLICT
            └── IntegrityError      CONFLICT         (column of the violated constraint)

Examples:
    >>> ValidationError("Title is required.", field="title").code
    'BAD_REQUEST'
    >>> NotFoundError("Portfolio not found.").with_context(project_id="p1").context.project_id
    'p1'

Guardrails:
    ❌ DON'T: Word a NotFoundError differently for "exists but not yours"
    ✅ DO: Raise the same message for both

Tags:
    error-handling, error-codes, folio
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Coarse grouping used for log routing."""

    AUTH = "AUTH"
    VALIDATION = "VALIDATION"
    BILLING = "BILLING"
    STORAGE = "STORAGE"
    DATABASE = "DATABASE"
    NETWORK = "NETWORK"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Entity ids involved in a failure, plus anything else worth logging."""

    user_id: str | None = None
    project_id: str | None = None
    section_id: str | None = None
    item_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        ids = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "metadata"}
        return {**{k: v for k, v in ids.items() if v is not None}, **self.metadata}


_CONTEXT_IDS = frozenset({"user_id", "project_id", "section_id", "item_id"})


class FolioError(Exception):
    """Base class.  Subclasses pin ``code`` and ``default_category``."""

    code: str = "INTERNAL"
    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FolioError:
        """Attach ids and extra fields, returning ``self`` for ``raise ... .with_context(...)``."""
        for key, value in kwargs.items():
            if key in _CONTEXT_IDS:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "error_type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
        }
        if context := self.context.to_dict():
            out["context"] = context
        if self.cause is not None:
            out["cause"] = str(self.cause)
        return out

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code})"


class AuthenticationError(FolioError):
    """No authenticated caller."""

    code = "UNAUTHORIZED"
    default_category = ErrorCategory.AUTH


class NotFoundError(FolioError):
    """Entity absent, or owned by someone else."""

    code = "NOT_FOUND"
    default_category = ErrorCategory.AUTH


class ValidationError(FolioError):
    """A request field was rejected.  ``field`` names it in the response."""

    code = "BAD_REQUEST"
    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.constraint = constraint

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.field:
            out["field"] = self.field
        if self.value is not None:
            out["value"] = repr(self.value)
        if self.constraint:
            out["constraint"] = self.constraint
        return out


class PaymentRequiredError(FolioError):
    """Pro template requested by a caller without the paid entitlement."""

    code = "PAYMENT_REQUIRED"
    default_category = ErrorCategory.BILLING

    def __init__(self, message: str = "Upgrade to Pro to use this template.", **kwargs: Any):
        super().__init__(message, **kwargs)


class ConflictError(FolioError):
    """A uniqueness requirement could not be met, e.g. slug attempts exhausted."""

    code = "CONFLICT"
    default_category = ErrorCategory.STORAGE


class IntegrityError(ConflictError):
    """Database constraint violation; ``column`` is set for UNIQUE failures."""

    default_category = ErrorCategory.DATABASE

    def __init__(self, message: str, *, column: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.column = column


def error_code(error: Exception) -> str:
    """Stable code of *error*; anything that is not a FolioError is ``INTERNAL``."""
    return error.code if isinstance(error, FolioError) else "INTERNAL"


def categorize_error(error: Exception) -> ErrorCategory:
    if isinstance(error, FolioError):
        return error.category
    if isinstance(error, OSError):
        return ErrorCategory.NETWORK
    if isinstance(error, ValueError):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "FolioError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "PaymentRequiredError",
    "ConflictError",
    "IntegrityError",
    "error_code",
    "categorize_error",
]
