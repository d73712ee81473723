"""Tests for ``folio.content.summary``."""

from datetime import UTC, datetime

from folio.content.summary import APP_ID, build_dashboard_summary
from tests._support import make_project


class TestBuildDashboardSummary:
    def test_empty(self):
        now = datetime(2026, 10, 17, tzinfo=UTC)
        summary = build_dashboard_summary([], now=now)
        assert summary.totalPortfolios == 0
        assert summary.publishedCount == 0
        assert summary.completionHint == 0
        assert summary.lastUpdatedAt == now.isoformat()
        assert summary.appId == APP_ID
        assert summary.version == 1

    def test_counts(self):
        projects = [
            make_project(id="a", visibility="public", is_published=True, updated_at="2026-10-01T00:00:00+00:00"),
            make_project(id="b", visibility="private", is_published=False, updated_at="2026-10-03T00:00:00+00:00"),
            make_project(id="c", visibility="unlisted", is_published=False, updated_at="2026-10-02T00:00:00+00:00"),
        ]
        summary = build_dashboard_summary(projects)
        assert summary.totalPortfolios == 3
        assert summary.publishedCount == 1
        assert summary.completionHint == 33
        assert summary.visibilityBreakdown.model_dump() == {"public": 1, "unlisted": 1, "private": 1}
        assert summary.lastUpdatedAt == "2026-10-03T00:00:00+00:00"

    def test_completion_rounds(self):
        projects = [
            make_project(id="a", is_published=True),
            make_project(id="b", is_published=True),
            make_project(id="c", is_published=False),
        ]
        assert build_dashboard_summary(projects).completionHint == 67
