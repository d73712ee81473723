"""
Activity events for the parent dashboard.

After a successful mutation the registry emits an :class:`ActivityEvent`
carrying a freshly computed dashboard summary.  Delivery is fire-and-forget:
:func:`emit_activity` never raises and never waits on the network.  Failures
end in the log.

Architecture:
    ::

        ops/projects.py ─┐
        ops/sections.py ─┼─► emit_activity(ctx, user, event, entity_id)
        ops/items.py    ─┘        │ summary scan (ProjectRepository)
                                  ▼
                          ctx.activity.dispatch(ActivityEvent)
                                  │
            ┌─────────────────────┼──────────────────────────┐
            ▼                     ▼                          ▼
     NullActivityDispatcher  RecordingActivityDispatcher  WebhookActivityDispatcher
                                                          (thread pool, HMAC-signed POST)

Guardrails:
    ❌ DON'T: Let a dispatch failure fail the enclosing operation
    ✅ DO: Log ``activity.dispatch_failed`` and return
"""

from __future__ import annotations

import hashlib
import hmac
import json
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from folio.content.summary import APP_ID, DashboardSummary, build_dashboard_summary
from folio.core.logging import get_logger
from folio.core.models import Project
from folio.core.repositories import ProjectRepository
from folio.ops.context import Identity, OperationContext
from folio.ops.guards import utc_now_iso

logger = get_logger(__name__)

WEBHOOK_PATH = "/api/webhooks/portfolio-creator-activity.json"
SIGNATURE_HEADER = "X-Folio-Signature"

# Event kinds
PORTFOLIO_CREATED = "portfolio.created"
PORTFOLIO_UPDATED = "portfolio.updated"
PORTFOLIO_DELETED = "portfolio.deleted"
PORTFOLIO_PUBLISHED = "portfolio.published"
PORTFOLIO_UNPUBLISHED = "portfolio.unpublished"
VISIBILITY_CHANGED = "visibility.changed"
SECTION_TOGGLED = "section.toggled"
SECTIONS_REORDERED = "sections.reordered"
ITEM_CREATED = "item.created"
ITEM_UPDATED = "item.updated"
ITEM_DELETED = "item.deleted"
ITEMS_REORDERED = "items.reordered"


@dataclass(frozen=True, slots=True)
class ActivityEvent:
    """One activity notification for the parent app."""

    user_id: str
    event: str
    occurred_at: str
    summary: DashboardSummary
    entity_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        activity: dict[str, Any] = {"event": self.event, "occurredAt": self.occurred_at}
        if self.entity_id is not None:
            activity["entityId"] = self.entity_id
        return {
            "userId": self.user_id,
            "appId": APP_ID,
            "activity": activity,
            "summary": self.summary.model_dump(),
        }


# ------------------------------------------------------------------ #
# Dispatchers
# ------------------------------------------------------------------ #


class NullActivityDispatcher:
    """Drops every event."""

    def dispatch(self, event: ActivityEvent) -> None:
        return None


@dataclass
class RecordingActivityDispatcher:
    """Keeps events in memory (tests, CLI ``--show-activity``)."""

    events: list[ActivityEvent] = field(default_factory=list)

    def dispatch(self, event: ActivityEvent) -> None:
        self.events.append(event)

    @property
    def kinds(self) -> list[str]:
        return [e.event for e in self.events]


def sign_payload(body: bytes, secret: str) -> str:
    """``sha256=<hex>`` HMAC of *body* under *secret*."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


class WebhookActivityDispatcher:
    """POSTs signed activity payloads to the parent app on a thread pool.

    Missing URL or secret turns every dispatch into a logged no-op.
    """

    def __init__(
        self,
        base_url: str | None,
        secret: str | None,
        *,
        timeout: float = 5.0,
        max_workers: int = 2,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}{WEBHOOK_PATH}" if base_url else None
        self._secret = secret
        self._timeout = timeout
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="folio-activity")

    @property
    def url(self) -> str | None:
        return self._url

    def dispatch(self, event: ActivityEvent) -> None:
        if not self._url or not self._secret:
            logger.debug("activity.skipped", reason="webhook not configured", event=event.event)
            return
        body = json.dumps(event.to_payload(), separators=(",", ":")).encode("utf-8")
        self._pool.submit(self._post, body, event.event)

    def _post(self, body: bytes, kind: str) -> None:
        try:
            request = urllib.request.Request(
                self._url,  # type: ignore[arg-type]
                data=body,
                method="POST",
                headers={
                    "Content-Type": "application/json",
                    SIGNATURE_HEADER: sign_payload(body, self._secret or ""),
                },
            )
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                logger.debug("activity.delivered", event=kind, status=response.status)
        except urllib.error.URLError as exc:
            logger.warning("activity.dispatch_failed", event=kind, error=str(exc), transient=True)
        except Exception as exc:
            logger.warning("activity.dispatch_failed", event=kind, error=str(exc), error_type=type(exc).__name__)

    def close(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)


def dispatcher_from_settings(settings: Any) -> WebhookActivityDispatcher | NullActivityDispatcher:
    """Webhook dispatcher when configured, otherwise the null dispatcher."""
    if settings.activity_webhook_url and settings.activity_webhook_secret:
        return WebhookActivityDispatcher(
            settings.activity_webhook_url,
            settings.activity_webhook_secret,
            timeout=settings.activity_timeout_s,
            max_workers=settings.activity_max_workers,
        )
    return NullActivityDispatcher()


# ------------------------------------------------------------------ #
# Emission
# ------------------------------------------------------------------ #


def dashboard_summary(ctx: OperationContext, user_id: str) -> DashboardSummary:
    rows = ProjectRepository(ctx.conn).list_for_user(user_id)
    return build_dashboard_summary(Project.from_row(r) for r in rows)


def emit_activity(
    ctx: OperationContext,
    user: Identity,
    event: str,
    entity_id: str | None = None,
) -> None:
    """Best-effort activity dispatch; never raises."""
    if ctx.activity is None:
        return
    try:
        ctx.activity.dispatch(
            ActivityEvent(
                user_id=user.id,
                event=event,
                occurred_at=utc_now_iso(),
                summary=dashboard_summary(ctx, user.id),
                entity_id=entity_id,
            )
        )
    except Exception as exc:
        logger.warning(
            "activity.dispatch_failed",
            event=event,
            entity_id=entity_id,
            request_id=ctx.request_id,
            error=str(exc),
        )
