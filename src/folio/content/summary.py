"""
Dashboard summary for the activity feed.

Aggregates a caller's projects into the small summary that rides along with
every activity event.  Pure over project rows; the ops layer does the scan.

Examples:
    >>> from folio.core.models import Project
    >>> s = build_dashboard_summary(
    ...     [Project(visibility="public", is_published=True, updated_at="2026-01-02T00:00:00+00:00"),
    ...      Project(visibility="private", updated_at="2026-01-01T00:00:00+00:00")],
    ... )
    >>> (s.totalPortfolios, s.publishedCount, s.completionHint)
    (2, 1, 50)
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from folio.content.constants import Visibility
from folio.core.models import Project

APP_ID = "portfolio-creator"
SUMMARY_VERSION = 1


class VisibilityBreakdown(BaseModel):
    public: int = 0
    unlisted: int = 0
    private: int = 0


class DashboardSummary(BaseModel):
    appId: str = APP_ID
    version: int = SUMMARY_VERSION
    totalPortfolios: int = 0
    publishedCount: int = 0
    lastUpdatedAt: str
    visibilityBreakdown: VisibilityBreakdown = Field(default_factory=VisibilityBreakdown)
    completionHint: int = 0


def _parse(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def build_dashboard_summary(projects: Iterable[Project], *, now: datetime | None = None) -> DashboardSummary:
    """Summarize *projects*; ``now`` stands in for ``lastUpdatedAt`` when empty."""
    breakdown = VisibilityBreakdown()
    total = 0
    published = 0
    latest: datetime | None = None

    for project in projects:
        total += 1
        if project.is_published:
            published += 1
        if project.visibility in Visibility._value2member_map_:
            setattr(breakdown, project.visibility, getattr(breakdown, project.visibility) + 1)
        candidate = _parse(project.updated_at) or _parse(project.created_at)
        if candidate is not None and (latest is None or candidate > latest):
            latest = candidate

    last_updated = latest or now or datetime.now(UTC)
    return DashboardSummary(
        totalPortfolios=total,
        publishedCount=published,
        lastUpdatedAt=last_updated.isoformat(),
        visibilityBreakdown=breakdown,
        completionHint=round(published / total * 100) if total else 0,
    )


__all__ = ["APP_ID", "DashboardSummary", "VisibilityBreakdown", "build_dashboard_summary"]
