"""
Project operations.

Create, read, update, publish and delete portfolio projects, plus the
preview and public-read projections.  Every function takes an
``OperationContext`` and returns an ``OperationResult``; nothing raises.

Gate order (see :mod:`folio.ops.guards`): caller → ownership → template
entitlement → field validation → single transaction → activity dispatch.
"""

from __future__ import annotations

import json
import uuid

from folio.content.constants import (
    DEFAULT_SECTION_ORDER,
    DEFAULT_TEMPLATE,
    DEFAULT_VISIBILITY,
    MAX_LENGTHS,
    SECTION_LABELS,
    SINGLETON_SECTIONS,
    Visibility,
)
from folio.content.public import PublicDocument, to_public_document
from folio.content.sanitize import default_payload, normalize_text, normalize_url
from folio.content.slugs import SlugAllocator
from folio.core.errors import NotFoundError, ValidationError
from folio.core.logging import LogContext, get_logger
from folio.core.models import Project
from folio.core.repositories import ItemRepository, ProjectRepository, SectionRepository
from folio.ops import activity
from folio.ops.context import OperationContext
from folio.ops.guards import (
    PROJECT_NOT_FOUND,
    ensure_template_access,
    ensure_template_key,
    failure,
    load_sections,
    owned_project,
    owned_project_with_access,
    require_user,
    utc_now_iso,
)
from folio.ops.requests import CreateProjectRequest, SetProfilePhotoRequest, UpdateProjectRequest
from folio.ops.responses import DeleteResult, ProjectDetail
from folio.ops.result import OperationResult, start_timer

logger = get_logger(__name__)

_PUBLIC_VISIBILITIES = frozenset({Visibility.PUBLIC, Visibility.UNLISTED})


def _clean_title(value: str | None) -> str:
    return normalize_text(
        value, field="title", label="Title", max_length=MAX_LENGTHS["projectTitle"], required=True
    )


def _detail(ctx: OperationContext, project_id: str) -> ProjectDetail:
    row = ProjectRepository(ctx.conn).get(project_id)
    if row is None:
        raise NotFoundError(PROJECT_NOT_FOUND).with_context(project_id=project_id)
    return ProjectDetail(project=Project.from_row(row), sections=load_sections(ctx, project_id))


# ------------------------------------------------------------------ #
# Reads
# ------------------------------------------------------------------ #


def list_projects(ctx: OperationContext) -> OperationResult[list[Project]]:
    """The caller's projects, most recently updated first."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        rows = ProjectRepository(ctx.conn).list_for_user(user.id)
        return OperationResult.ok([Project.from_row(r) for r in rows], elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("list_projects", exc, timer.elapsed_ms)


def get_project(ctx: OperationContext, project_id: str) -> OperationResult[ProjectDetail]:
    """Project with ordered sections and ordered items."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        owned_project_with_access(ctx, project_id, user)
        return OperationResult.ok(_detail(ctx, project_id), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("get_project", exc, timer.elapsed_ms)


def preview_project(ctx: OperationContext, project_id: str) -> OperationResult[PublicDocument]:
    """Public document for the owner, drafts included."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        project = owned_project_with_access(ctx, project_id, user)
        document = to_public_document(project, load_sections(ctx, project.id))
        return OperationResult.ok(document, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("preview_project", exc, timer.elapsed_ms)


def get_public_document(ctx: OperationContext, slug: str) -> OperationResult[PublicDocument]:
    """Anonymous read of a published, non-private project by slug."""
    timer = start_timer()
    try:
        row = ProjectRepository(ctx.conn).get_by_slug((slug or "").strip().lower())
        project = Project.from_row(row) if row else None
        if project is None or not project.is_published or project.visibility not in _PUBLIC_VISIBILITIES:
            raise NotFoundError(PROJECT_NOT_FOUND).with_context(slug=slug)
        document = to_public_document(project, load_sections(ctx, project.id))
        return OperationResult.ok(document, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("get_public_document", exc, timer.elapsed_ms)


# ------------------------------------------------------------------ #
# Create
# ------------------------------------------------------------------ #


def create_project(ctx: OperationContext, request: CreateProjectRequest) -> OperationResult[ProjectDetail]:
    """Create a project with its nine sections and seed items, atomically."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        template_key = ensure_template_key(request.template_key or DEFAULT_TEMPLATE)
        ensure_template_access(template_key, user)
        title = _clean_title(request.title)

        projects = ProjectRepository(ctx.conn)
        sections = SectionRepository(ctx.conn)
        items = ItemRepository(ctx.conn)

        now = utc_now_iso()
        project_id = str(uuid.uuid4())

        def insert_project(slug: str) -> None:
            projects.create({
                "id": project_id,
                "user_id": user.id,
                "title": title,
                "slug": slug,
                "visibility": DEFAULT_VISIBILITY.value,
                "is_published": 0,
                "published_at": None,
                "template_key": template_key,
                "created_at": now,
                "updated_at": now,
            })

        section_rows = [
            {
                "id": str(uuid.uuid4()),
                "project_id": project_id,
                "key": key.value,
                "label": SECTION_LABELS[key],
                "sort_order": index + 1,
                "is_enabled": 1,
                "created_at": now,
                "updated_at": now,
            }
            for index, key in enumerate(DEFAULT_SECTION_ORDER)
        ]
        seed_rows = [
            {
                "id": str(uuid.uuid4()),
                "section_id": row["id"],
                "sort_order": 1,
                "data_json": json.dumps(default_payload(row["key"])),
                "created_at": now,
                "updated_at": now,
            }
            for row in section_rows
            if row["key"] in SINGLETON_SECTIONS
        ]

        with LogContext(request_id=ctx.request_id, user_id=user.id), projects.transaction():
            slug = SlugAllocator(projects.slug_taken).allocate_and_apply(title, insert_project)
            sections.create_many(section_rows)
            items.create_many(seed_rows)
            logger.info("project.created", project_id=project_id, slug=slug, template_key=template_key)

        activity.emit_activity(ctx, user, activity.PORTFOLIO_CREATED, project_id)
        return OperationResult.ok(_detail(ctx, project_id), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("create_project", exc, timer.elapsed_ms)


# ------------------------------------------------------------------ #
# Update
# ------------------------------------------------------------------ #


def update_project(ctx: OperationContext, request: UpdateProjectRequest) -> OperationResult[Project]:
    """Change any of title, slug, visibility and template."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        project = owned_project_with_access(ctx, request.project_id, user)
        if not request.has_changes():
            raise ValidationError("Nothing to update.", field="project")

        fields: dict[str, object] = {}
        if request.template_key is not None:
            template_key = ensure_template_key(request.template_key)
            ensure_template_access(template_key, user)
            fields["template_key"] = template_key
        if request.title is not None:
            fields["title"] = _clean_title(request.title)
        if request.visibility is not None:
            visibility = request.visibility.strip().lower()
            if visibility not in Visibility._value2member_map_:
                raise ValidationError("Unknown visibility.", field="visibility", value=request.visibility)
            fields["visibility"] = visibility
        slug_base = None
        if request.slug is not None:
            slug_base = normalize_text(request.slug, field="slug", label="Slug", required=True)

        fields["updated_at"] = utc_now_iso()
        projects = ProjectRepository(ctx.conn)

        with LogContext(request_id=ctx.request_id, user_id=user.id), projects.transaction():
            if slug_base is None:
                projects.update_fields(project.id, fields)
            else:
                slug = SlugAllocator(projects.slug_taken).allocate_and_apply(
                    slug_base,
                    lambda s: projects.update_fields(project.id, {**fields, "slug": s}),
                    exclude_project_id=project.id,
                )
                logger.info("project.slug_changed", project_id=project.id, slug=slug)
            logger.info("project.updated", project_id=project.id, fields=sorted(fields))

        visibility_changed = "visibility" in fields and fields["visibility"] != project.visibility
        event = activity.VISIBILITY_CHANGED if visibility_changed else activity.PORTFOLIO_UPDATED
        activity.emit_activity(ctx, user, event, project.id)

        updated = Project.from_row(projects.get(project.id) or {})
        return OperationResult.ok(updated, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("update_project", exc, timer.elapsed_ms)


def set_publish(ctx: OperationContext, project_id: str, is_published: bool) -> OperationResult[Project]:
    """Publish or unpublish; the only writer of ``published_at``."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        project = owned_project_with_access(ctx, project_id, user)
        now = utc_now_iso()
        projects = ProjectRepository(ctx.conn)

        with projects.transaction():
            projects.update_fields(project.id, {
                "is_published": 1 if is_published else 0,
                "published_at": now if is_published else None,
                "updated_at": now,
            })
        logger.info("project.publish_set", project_id=project.id, is_published=is_published)

        event = activity.PORTFOLIO_PUBLISHED if is_published else activity.PORTFOLIO_UNPUBLISHED
        activity.emit_activity(ctx, user, event, project.id)

        return OperationResult.ok(Project.from_row(projects.get(project.id) or {}), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("set_publish", exc, timer.elapsed_ms)


def set_profile_photo(ctx: OperationContext, request: SetProfilePhotoRequest) -> OperationResult[Project]:
    """Set or clear the profile photo reference."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        project = owned_project_with_access(ctx, request.project_id, user)
        key = normalize_text(
            request.key, field="key", label="Photo key", max_length=MAX_LENGTHS["profilePhotoKey"]
        )
        url = normalize_url(
            request.url, field="url", label="Photo URL", max_length=MAX_LENGTHS["profilePhotoUrl"]
        )
        now = utc_now_iso()
        projects = ProjectRepository(ctx.conn)

        with projects.transaction():
            projects.update_fields(project.id, {
                "profile_photo_key": key or None,
                "profile_photo_url": url or None,
                "profile_photo_updated_at": now,
                "updated_at": now,
            })

        activity.emit_activity(ctx, user, activity.PORTFOLIO_UPDATED, project.id)
        return OperationResult.ok(Project.from_row(projects.get(project.id) or {}), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("set_profile_photo", exc, timer.elapsed_ms)


# ------------------------------------------------------------------ #
# Delete
# ------------------------------------------------------------------ #


def delete_project(ctx: OperationContext, project_id: str) -> OperationResult[DeleteResult]:
    """Delete a project with all its sections and items.

    Ownership only: deletion stays possible without the pro entitlement.
    """
    timer = start_timer()
    try:
        user = require_user(ctx)
        project = owned_project(ctx, project_id, user)
        projects = ProjectRepository(ctx.conn)

        with projects.transaction():
            ItemRepository(ctx.conn).delete_for_project(project.id)
            SectionRepository(ctx.conn).delete_for_project(project.id)
            projects.delete(project.id)
        logger.info("project.deleted", project_id=project.id, user_id=user.id)

        activity.emit_activity(ctx, user, activity.PORTFOLIO_DELETED, project.id)
        return OperationResult.ok(DeleteResult(id=project.id), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("delete_project", exc, timer.elapsed_ms)
