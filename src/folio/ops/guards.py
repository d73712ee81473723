"""
Ownership, identity and entitlement checks shared by the registry operations.

Every operation runs the same gate sequence before touching content:

    1. authenticated caller            → AuthenticationError (UNAUTHORIZED)
    2. entity reachable via the owner  → NotFoundError (NOT_FOUND)
    3. pro template ⇒ paid caller      → PaymentRequiredError (PAYMENT_REQUIRED)

Ownership failures and missing rows raise the same ``NotFoundError`` with the
same message, so callers cannot probe for other users' ids.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from folio.content.constants import is_pro_template, is_template_key
from folio.core.errors import (
    AuthenticationError,
    FolioError,
    NotFoundError,
    PaymentRequiredError,
    ValidationError,
    categorize_error,
    error_code,
)
from folio.core.logging import get_logger
from folio.core.models import Item, Project, Section
from folio.core.repositories import ItemRepository, ProjectRepository, SectionRepository
from folio.ops.context import Identity, OperationContext
from folio.ops.result import OperationResult

logger = get_logger(__name__)

PROJECT_NOT_FOUND = "Portfolio not found."
SECTION_NOT_FOUND = "Portfolio section not found."
ITEM_NOT_FOUND = "Portfolio item not found."


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def require_user(ctx: OperationContext) -> Identity:
    if ctx.user is None:
        raise AuthenticationError("Sign in to manage portfolios.")
    return ctx.user


def ensure_template_key(template_key: str) -> str:
    """Reject template keys outside the catalog."""
    key = (template_key or "").strip()
    if not is_template_key(key):
        raise ValidationError("Unknown template.", field="template_key", value=template_key)
    return key


def ensure_template_access(template_key: str, user: Identity) -> None:
    if is_pro_template(template_key) and not user.is_paid:
        raise PaymentRequiredError().with_context(user_id=user.id, template_key=template_key)


def owned_project(ctx: OperationContext, project_id: str, user: Identity) -> Project:
    """Project owned by *user*; no entitlement check (used by delete)."""
    row = ProjectRepository(ctx.conn).get_owned(project_id, user.id)
    if row is None:
        raise NotFoundError(PROJECT_NOT_FOUND).with_context(project_id=project_id, user_id=user.id)
    return Project.from_row(row)


def owned_project_with_access(ctx: OperationContext, project_id: str, user: Identity) -> Project:
    project = owned_project(ctx, project_id, user)
    ensure_template_access(project.template_key, user)
    return project


def owned_section(ctx: OperationContext, section_id: str, user: Identity) -> tuple[Section, Project]:
    """Section reachable through a project *user* owns, with entitlement checked."""
    row = SectionRepository(ctx.conn).get(section_id)
    if row is None:
        raise NotFoundError(SECTION_NOT_FOUND).with_context(section_id=section_id, user_id=user.id)
    project_row = ProjectRepository(ctx.conn).get_owned(row["project_id"], user.id)
    if project_row is None:
        raise NotFoundError(SECTION_NOT_FOUND).with_context(section_id=section_id, user_id=user.id)
    project = Project.from_row(project_row)
    ensure_template_access(project.template_key, user)
    return Section.from_row(row), project


def owned_item(
    ctx: OperationContext,
    section_id: str,
    item_id: str,
    user: Identity,
) -> tuple[Item, Section, Project]:
    """Item of *section_id* reachable through a project *user* owns."""
    section, project = owned_section(ctx, section_id, user)
    row = ItemRepository(ctx.conn).get(item_id)
    if row is None or row["section_id"] != section.id:
        raise NotFoundError(ITEM_NOT_FOUND).with_context(
            item_id=item_id, section_id=section_id, user_id=user.id
        )
    return Item.from_row(row), section, project


def load_sections(ctx: OperationContext, project_id: str) -> list[Section]:
    """Sections of a project in display order, each with its ordered items."""
    section_rows = SectionRepository(ctx.conn).list_for_project(project_id)
    item_rows = ItemRepository(ctx.conn).list_for_sections([r["id"] for r in section_rows])
    by_section: dict[str, list[Item]] = {}
    for item_row in item_rows:
        by_section.setdefault(item_row["section_id"], []).append(Item.from_row(item_row))
    return [Section.from_row(r, by_section.get(r["id"], [])) for r in section_rows]


def failure(op: str, exc: Exception, elapsed_ms: float) -> OperationResult[Any]:
    """Fold an exception raised inside operation *op* into a failed result."""
    if isinstance(exc, FolioError):
        logger.info("op_rejected", op=op, code=exc.code, message=exc.message)
        return OperationResult.from_error(exc, elapsed_ms=elapsed_ms)
    category = categorize_error(exc)
    logger.exception("op_failed", op=op, error=str(exc), category=category.value)
    return OperationResult.fail(
        error_code(exc),
        f"Failed to {op.replace('_', ' ')}: {exc}",
        category=category,
        elapsed_ms=elapsed_ms,
    )
