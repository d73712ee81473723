"""
Section operations.

Sections are created with their project and never added or removed one by
one; they can only be enabled/disabled and reordered.
"""

from __future__ import annotations

from folio.content.ordering import check_permutation, positions
from folio.core.errors import NotFoundError
from folio.core.logging import get_logger
from folio.core.models import Section
from folio.core.repositories import ProjectRepository, SectionRepository
from folio.ops import activity
from folio.ops.context import OperationContext
from folio.ops.guards import (
    SECTION_NOT_FOUND,
    failure,
    owned_project_with_access,
    require_user,
    utc_now_iso,
)
from folio.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def toggle_section(
    ctx: OperationContext,
    project_id: str,
    section_id: str,
    is_enabled: bool,
) -> OperationResult[Section]:
    """Show or hide a section in the public document."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        project = owned_project_with_access(ctx, project_id, user)
        sections = SectionRepository(ctx.conn)
        row = sections.get(section_id)
        if row is None or row["project_id"] != project.id:
            raise NotFoundError(SECTION_NOT_FOUND).with_context(section_id=section_id, project_id=project_id)

        now = utc_now_iso()
        with sections.transaction():
            sections.set_enabled(section_id, is_enabled, now)
            ProjectRepository(ctx.conn).touch(project.id, now)
        logger.info("section.toggled", section_id=section_id, key=row["key"], is_enabled=is_enabled)

        activity.emit_activity(ctx, user, activity.SECTION_TOGGLED, section_id)
        return OperationResult.ok(Section.from_row(sections.get(section_id) or row), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("toggle_section", exc, timer.elapsed_ms)


def reorder_sections(
    ctx: OperationContext,
    project_id: str,
    ordered_section_ids: list[str],
) -> OperationResult[list[Section]]:
    """Apply a full permutation of the project's sections."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        project = owned_project_with_access(ctx, project_id, user)
        sections = SectionRepository(ctx.conn)
        existing = [r["id"] for r in sections.list_for_project(project.id)]
        check_permutation(existing, ordered_section_ids, "section")

        now = utc_now_iso()
        with sections.transaction():
            for section_id, order in positions(ordered_section_ids):
                sections.set_order(section_id, order, now)
            ProjectRepository(ctx.conn).touch(project.id, now)
        logger.info("sections.reordered", project_id=project.id, count=len(existing))

        activity.emit_activity(ctx, user, activity.SECTIONS_REORDERED, project.id)
        reordered = [Section.from_row(r) for r in sections.list_for_project(project.id)]
        return OperationResult.ok(reordered, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("reorder_sections", exc, timer.elapsed_ms)
