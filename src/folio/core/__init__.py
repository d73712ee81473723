"""
Core infrastructure for folio.

Errors, structured logging, settings, the storage ``Connection`` protocol,
the SQLite schema and the repositories that the ops layer
drives.  Nothing here knows about HTTP or the CLI.
"""

from folio.core.errors import (
    AuthenticationError,
    ConflictError,
    FolioError,
    IntegrityError,
    NotFoundError,
    PaymentRequiredError,
    ValidationError,
)
from folio.core.logging import get_logger
from folio.core.protocols import Connection

__all__ = [
    "AuthenticationError",
    "ConflictError",
    "Connection",
    "FolioError",
    "IntegrityError",
    "NotFoundError",
    "PaymentRequiredError",
    "ValidationError",
    "get_logger",
]
