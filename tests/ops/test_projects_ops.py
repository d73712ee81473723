"""Tests for ``folio.ops.projects`` - project lifecycle against in-memory SQLite."""

from __future__ import annotations

import pytest

from folio.content.constants import DEFAULT_SECTION_ORDER
from folio.core.repositories import ProjectRepository, SectionRepository
from folio.ops.context import OperationContext
from folio.ops.projects import (
    create_project,
    delete_project,
    get_project,
    get_public_document,
    list_projects,
    preview_project,
    set_profile_photo,
    set_publish,
    update_project,
)
from folio.ops.requests import CreateProjectRequest, SetProfilePhotoRequest, UpdateProjectRequest
from tests._support import section_of


def _count(conn, table: str) -> int:
    return ProjectRepository(conn).query_one(f"SELECT COUNT(*) AS n FROM {table}")["n"]


# ---------------------------------------------------------------------------
# create_project
# ---------------------------------------------------------------------------


class TestCreateProject:
    def test_creates_nine_sections_in_default_order(self, project):
        assert project.project.slug == "my-site"
        assert project.project.visibility == "private"
        assert project.project.is_published is False
        assert project.project.template_key == "classic"
        assert [s.key for s in project.sections] == [k.value for k in DEFAULT_SECTION_ORDER]
        assert [s.order for s in project.sections] == list(range(1, 10))
        assert all(s.is_enabled for s in project.sections)

    def test_seeds_singleton_sections(self, project):
        counts = {s.key: len(s.items) for s in project.sections}
        assert counts == {
            "profile": 1,
            "about": 1,
            "featuredProjects": 0,
            "experience": 0,
            "skills": 1,
            "education": 0,
            "certifications": 0,
            "achievements": 0,
            "contact": 1,
        }
        skills = section_of(project, "skills").items[0].data
        assert [g["name"] for g in skills["groups"]] == ["Backend", "Frontend", "Tools"]

    def test_same_title_gets_suffixed_slugs(self, ctx):
        slugs = [create_project(ctx, CreateProjectRequest(title="My Site")).data.project.slug for _ in range(3)]
        assert slugs == ["my-site", "my-site-2", "my-site-3"]

    def test_more_than_fifty_same_titles(self, ctx):
        slugs = [create_project(ctx, CreateProjectRequest(title="My Site")).data.project.slug for _ in range(52)]
        assert slugs[-3:] == ["my-site-50", "my-site-51", "my-site-52"]
        assert len(set(slugs)) == 52

    def test_slugs_are_global_across_users(self, ctx, other_ctx):
        create_project(ctx, CreateProjectRequest(title="My Site"))
        result = create_project(other_ctx, CreateProjectRequest(title="My Site"))
        assert result.data.project.slug == "my-site-2"

    def test_title_trimmed(self, ctx):
        result = create_project(ctx, CreateProjectRequest(title="   Hello World  "))
        assert result.data.project.title == "Hello World"

    @pytest.mark.parametrize("title", ["", "   ", "x" * 61])
    def test_invalid_title(self, ctx, conn, title):
        result = create_project(ctx, CreateProjectRequest(title=title))
        assert result.success is False
        assert result.error.code == "BAD_REQUEST"
        assert result.error.details["field"] == "title"
        assert _count(conn, "portfolio_projects") == 0

    def test_unknown_template(self, ctx):
        result = create_project(ctx, CreateProjectRequest(title="A", template_key="retro"))
        assert result.error.code == "BAD_REQUEST"

    def test_pro_template_requires_paid(self, ctx, conn, recorder):
        result = create_project(ctx, CreateProjectRequest(title="A", template_key="minimal"))
        assert result.error.code == "PAYMENT_REQUIRED"
        assert result.error.message == "Upgrade to Pro to use this template."
        assert _count(conn, "portfolio_projects") == 0
        assert _count(conn, "portfolio_sections") == 0
        assert recorder.events == []

    def test_pro_template_for_paid_user(self, paid_ctx):
        result = create_project(paid_ctx, CreateProjectRequest(title="A", template_key="story"))
        assert result.success
        assert result.data.project.template_key == "story"

    def test_anonymous_rejected(self, anon_ctx):
        result = create_project(anon_ctx, CreateProjectRequest(title="A"))
        assert result.error.code == "UNAUTHORIZED"

    def test_emits_activity(self, project, recorder):
        assert recorder.kinds == ["portfolio.created"]
        event = recorder.events[0]
        assert event.user_id == "user-1"
        assert event.entity_id == project.project.id
        assert event.summary.totalPortfolios == 1

    def test_failure_mid_creation_leaves_nothing(self, ctx, conn, monkeypatch):
        def boom(self, rows):
            raise RuntimeError("disk full")

        monkeypatch.setattr(SectionRepository, "create_many", boom)
        result = create_project(ctx, CreateProjectRequest(title="My Site"))
        assert result.success is False
        assert result.error.code == "INTERNAL"
        assert _count(conn, "portfolio_projects") == 0
        assert _count(conn, "portfolio_items") == 0

    def test_slug_race_retries_on_constraint(self, ctx, monkeypatch):
        create_project(ctx, CreateProjectRequest(title="My Site"))
        # Probe says free, the UNIQUE constraint disagrees.
        monkeypatch.setattr(ProjectRepository, "slug_taken", lambda self, slug, exclude_id=None: False)
        result = create_project(ctx, CreateProjectRequest(title="My Site"))
        assert result.success, result.error
        assert result.data.project.slug == "my-site-2"


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


class TestReads:
    def test_list_is_owner_scoped(self, ctx, other_ctx, project):
        assert [p.id for p in list_projects(ctx).data] == [project.project.id]
        assert list_projects(other_ctx).data == []

    def test_list_most_recent_first(self, ctx):
        first = create_project(ctx, CreateProjectRequest(title="First")).data.project
        second = create_project(ctx, CreateProjectRequest(title="Second")).data.project
        assert [p.id for p in list_projects(ctx).data] == [second.id, first.id]
        update_project(ctx, UpdateProjectRequest(project_id=first.id, title="First again"))
        assert [p.id for p in list_projects(ctx).data] == [first.id, second.id]

    def test_list_requires_user(self, anon_ctx):
        assert list_projects(anon_ctx).error.code == "UNAUTHORIZED"

    def test_get_project(self, ctx, project):
        detail = get_project(ctx, project.project.id).data
        assert detail.project.id == project.project.id
        assert len(detail.sections) == 9

    def test_foreign_and_missing_look_the_same(self, other_ctx, project):
        foreign = get_project(other_ctx, project.project.id)
        missing = get_project(other_ctx, "does-not-exist")
        assert foreign.error.code == missing.error.code == "NOT_FOUND"
        assert foreign.error.message == missing.error.message == "Portfolio not found."

    def test_pro_project_gated_for_free_caller(self, ctx, paid_ctx):
        pid = create_project(paid_ctx, CreateProjectRequest(title="Pro", template_key="minimal")).data.project.id
        assert get_project(ctx, pid).error.code == "PAYMENT_REQUIRED"
        assert get_project(paid_ctx, pid).success

    def test_preview_includes_unpublished(self, ctx, project):
        doc = preview_project(ctx, project.project.id).data
        assert doc.meta.slug == "my-site"
        assert doc.meta.publishedAt is None
        assert doc.templateKey == "classic"


# ---------------------------------------------------------------------------
# update_project
# ---------------------------------------------------------------------------


class TestUpdateProject:
    def test_title(self, ctx, project):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id, title=" New "))
        assert result.data.title == "New"
        assert result.data.slug == "my-site"

    def test_slug_normalized(self, ctx, project):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id, slug="Brand New!"))
        assert result.data.slug == "brand-new"

    def test_slug_keeps_own_value(self, ctx, project):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id, slug="my-site"))
        assert result.data.slug == "my-site"

    def test_slug_collision_suffixed(self, ctx, project):
        other = create_project(ctx, CreateProjectRequest(title="Other")).data.project
        result = update_project(ctx, UpdateProjectRequest(project_id=other.id, slug="my-site"))
        assert result.data.slug == "my-site-2"

    def test_slug_without_usable_characters(self, ctx, project):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id, slug="***"))
        assert result.data.slug == "portfolio"

    def test_blank_slug_rejected(self, ctx, project):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id, slug="  "))
        assert result.error.code == "BAD_REQUEST"

    def test_nothing_to_update(self, ctx, project):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id))
        assert result.error.code == "BAD_REQUEST"

    def test_visibility(self, ctx, project, recorder):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id, visibility="PUBLIC"))
        assert result.data.visibility == "public"
        assert recorder.kinds[-1] == "visibility.changed"

    def test_same_visibility_is_plain_update(self, ctx, project, recorder):
        update_project(ctx, UpdateProjectRequest(project_id=project.project.id, visibility="private"))
        assert recorder.kinds[-1] == "portfolio.updated"

    def test_unknown_visibility(self, ctx, project):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id, visibility="secret"))
        assert result.error.code == "BAD_REQUEST"

    def test_switch_to_pro_template_requires_paid(self, ctx, project):
        result = update_project(ctx, UpdateProjectRequest(project_id=project.project.id, template_key="minimal"))
        assert result.error.code == "PAYMENT_REQUIRED"
        assert get_project(ctx, project.project.id).data.project.template_key == "classic"

    def test_template_entitlement_checked_before_title(self, ctx, project):
        request = UpdateProjectRequest(project_id=project.project.id, title="x" * 200, template_key="story")
        assert update_project(ctx, request).error.code == "PAYMENT_REQUIRED"

    def test_switch_to_pro_template_paid(self, paid_ctx, project):
        result = update_project(paid_ctx, UpdateProjectRequest(project_id=project.project.id, template_key="story"))
        assert result.data.template_key == "story"

    def test_foreign_project(self, other_ctx, project):
        result = update_project(other_ctx, UpdateProjectRequest(project_id=project.project.id, title="Mine"))
        assert result.error.code == "NOT_FOUND"


# ---------------------------------------------------------------------------
# Publish + public read
# ---------------------------------------------------------------------------


class TestPublish:
    def test_publish_round_trip(self, ctx, project, recorder):
        pid = project.project.id
        published = set_publish(ctx, pid, True).data
        assert published.is_published is True
        assert published.published_at is not None

        unpublished = set_publish(ctx, pid, False).data
        assert unpublished.is_published is False
        assert unpublished.published_at is None
        assert recorder.kinds[-2:] == ["portfolio.published", "portfolio.unpublished"]

    def test_public_read_requires_published(self, ctx, anon_ctx, project):
        pid = project.project.id
        update_project(ctx, UpdateProjectRequest(project_id=pid, visibility="public"))
        assert get_public_document(anon_ctx, "my-site").error.code == "NOT_FOUND"

        set_publish(ctx, pid, True)
        doc = get_public_document(anon_ctx, "my-site").data
        assert doc.meta.slug == "my-site"
        assert doc.meta.visibility == "public"

    def test_private_is_never_public(self, ctx, anon_ctx, project):
        set_publish(ctx, project.project.id, True)
        assert get_public_document(anon_ctx, "my-site").error.code == "NOT_FOUND"

    def test_unlisted_readable_by_slug(self, ctx, anon_ctx, project):
        pid = project.project.id
        update_project(ctx, UpdateProjectRequest(project_id=pid, visibility="unlisted"))
        set_publish(ctx, pid, True)
        assert get_public_document(anon_ctx, " MY-SITE ").success

    def test_unknown_slug(self, anon_ctx):
        assert get_public_document(anon_ctx, "nope").error.code == "NOT_FOUND"


# ---------------------------------------------------------------------------
# set_profile_photo
# ---------------------------------------------------------------------------


class TestProfilePhoto:
    def test_set_and_clear(self, ctx, project):
        pid = project.project.id
        result = set_profile_photo(
            ctx, SetProfilePhotoRequest(project_id=pid, key="u/1/photo.png", url="cdn.example.com/u/1/photo.png")
        )
        assert result.data.profile_photo_key == "u/1/photo.png"
        assert result.data.profile_photo_url == "https://cdn.example.com/u/1/photo.png"
        assert result.data.profile_photo_updated_at is not None

        cleared = set_profile_photo(ctx, SetProfilePhotoRequest(project_id=pid)).data
        assert cleared.profile_photo_key is None
        assert cleared.profile_photo_url is None

    def test_invalid_url(self, ctx, project):
        result = set_profile_photo(ctx, SetProfilePhotoRequest(project_id=project.project.id, url="not a url"))
        assert result.error.code == "BAD_REQUEST"


# ---------------------------------------------------------------------------
# delete_project
# ---------------------------------------------------------------------------


class TestDeleteProject:
    def test_cascades(self, ctx, conn, project, recorder):
        result = delete_project(ctx, project.project.id)
        assert result.data.deleted is True
        assert _count(conn, "portfolio_projects") == 0
        assert _count(conn, "portfolio_sections") == 0
        assert _count(conn, "portfolio_items") == 0
        assert recorder.kinds[-1] == "portfolio.deleted"
        assert recorder.events[-1].summary.totalPortfolios == 0

    def test_foreign(self, other_ctx, conn, project):
        assert delete_project(other_ctx, project.project.id).error.code == "NOT_FOUND"
        assert _count(conn, "portfolio_projects") == 1

    def test_free_caller_can_delete_pro_project(self, ctx, paid_ctx):
        pid = create_project(paid_ctx, CreateProjectRequest(title="Pro", template_key="minimal")).data.project.id
        assert delete_project(ctx, pid).success

    def test_anonymous(self, conn, project):
        assert delete_project(OperationContext(conn=conn), project.project.id).error.code == "UNAUTHORIZED"
