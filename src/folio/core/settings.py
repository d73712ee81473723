"""Settings for folio.

Environment-driven configuration with ``FOLIO_`` prefixed variables and
``.env`` support.

Fields
──────
database               : SQLite path for the reference storage adapter
log_level              : Structlog log level
log_json               : JSON logs (None = auto, JSON when not a TTY)
activity_webhook_url   : Base URL of the parent app receiving activity events
activity_webhook_secret: Shared secret used to sign activity payloads
activity_timeout_s     : Per-request timeout for webhook delivery
activity_max_workers   : Background delivery threads

Examples:
    >>> from folio.core.settings import FolioSettings
    >>> FolioSettings(database="/tmp/folio.db").database
    '/tmp/folio.db'
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FolioSettings(BaseSettings):
    """Runtime configuration, read from ``FOLIO_*`` env vars and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="FOLIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    database: str = Field(
        default_factory=lambda: str(Path.home() / ".folio" / "folio.db"),
        description="SQLite database path",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Activity webhook ─────────────────────────────────────────
    activity_webhook_url: str | None = None
    activity_webhook_secret: str | None = None
    activity_timeout_s: float = 5.0
    activity_max_workers: int = 2


@lru_cache(maxsize=1)
def get_settings() -> FolioSettings:
    """Process-wide settings (cached; call ``get_settings.cache_clear()`` in tests)."""
    return FolioSettings()


__all__ = ["FolioSettings", "get_settings"]
