"""
Item operations.

Item payloads are sanitized by the owning section's key before they are
stored.  Singleton sections (profile, about, skills, contact) never hold more
than one item: creating into one that already has its item replaces that
item in place.  Multi sections append, and deletes close the gap so ``order``
stays ``1..M``.
"""

from __future__ import annotations

import json
import uuid

from folio.content.constants import is_singleton
from folio.content.ordering import check_permutation, positions
from folio.content.sanitize import sanitize
from folio.core.logging import get_logger
from folio.core.models import Item
from folio.core.repositories import ItemRepository, ProjectRepository
from folio.ops import activity
from folio.ops.context import OperationContext
from folio.ops.guards import (
    failure,
    owned_item,
    owned_section,
    require_user,
    utc_now_iso,
)
from folio.ops.requests import CreateItemRequest, UpdateItemRequest
from folio.ops.responses import DeleteResult
from folio.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def _dump(data: object) -> str:
    return json.dumps(data, ensure_ascii=False, sort_keys=True)


def create_item(ctx: OperationContext, request: CreateItemRequest) -> OperationResult[Item]:
    """Add an item to a section (or replace the singleton item)."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        section, project = owned_section(ctx, request.section_id, user)
        data = sanitize(section.key, request.data)

        items = ItemRepository(ctx.conn)
        now = utc_now_iso()
        existing = items.list_for_section(section.id) if is_singleton(section.key) else []

        with items.transaction():
            if existing:
                item_id = existing[0]["id"]
                items.update_data(item_id, _dump(data), now)
                event = activity.ITEM_UPDATED
            else:
                item_id = str(uuid.uuid4())
                items.create({
                    "id": item_id,
                    "section_id": section.id,
                    "sort_order": items.count(section.id) + 1,
                    "data_json": _dump(data),
                    "created_at": now,
                    "updated_at": now,
                })
                event = activity.ITEM_CREATED
            ProjectRepository(ctx.conn).touch(project.id, now)
        logger.info("item.saved", item_id=item_id, section_key=section.key, replaced=bool(existing))

        activity.emit_activity(ctx, user, event, item_id)
        return OperationResult.ok(Item.from_row(items.get(item_id) or {}), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("create_item", exc, timer.elapsed_ms)


def update_item(ctx: OperationContext, request: UpdateItemRequest) -> OperationResult[Item]:
    """Replace an item's payload in place."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        item, section, project = owned_item(ctx, request.section_id, request.item_id, user)
        data = sanitize(section.key, request.data)

        items = ItemRepository(ctx.conn)
        now = utc_now_iso()
        with items.transaction():
            items.update_data(item.id, _dump(data), now)
            ProjectRepository(ctx.conn).touch(project.id, now)
        logger.info("item.updated", item_id=item.id, section_key=section.key)

        activity.emit_activity(ctx, user, activity.ITEM_UPDATED, item.id)
        return OperationResult.ok(Item.from_row(items.get(item.id) or {}), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("update_item", exc, timer.elapsed_ms)


def delete_item(ctx: OperationContext, section_id: str, item_id: str) -> OperationResult[DeleteResult]:
    """Remove an item and close the gap in the section's order."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        item, section, project = owned_item(ctx, section_id, item_id, user)

        items = ItemRepository(ctx.conn)
        now = utc_now_iso()
        with items.transaction():
            items.delete(item.id)
            remaining = [r["id"] for r in items.list_for_section(section.id)]
            for remaining_id, order in positions(remaining):
                items.set_order(remaining_id, order, now)
            ProjectRepository(ctx.conn).touch(project.id, now)
        logger.info("item.deleted", item_id=item.id, section_key=section.key)

        activity.emit_activity(ctx, user, activity.ITEM_DELETED, item.id)
        return OperationResult.ok(DeleteResult(id=item.id), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("delete_item", exc, timer.elapsed_ms)


def reorder_items(
    ctx: OperationContext,
    section_id: str,
    ordered_item_ids: list[str],
) -> OperationResult[list[Item]]:
    """Apply a full permutation of the section's items."""
    timer = start_timer()
    try:
        user = require_user(ctx)
        section, project = owned_section(ctx, section_id, user)
        items = ItemRepository(ctx.conn)
        existing = [r["id"] for r in items.list_for_section(section.id)]
        check_permutation(existing, ordered_item_ids, "item")

        now = utc_now_iso()
        with items.transaction():
            for item_id, order in positions(ordered_item_ids):
                items.set_order(item_id, order, now)
            ProjectRepository(ctx.conn).touch(project.id, now)
        logger.info("items.reordered", section_id=section.id, count=len(existing))

        activity.emit_activity(ctx, user, activity.ITEMS_REORDERED, section.id)
        reordered = [Item.from_row(r) for r in items.list_for_section(section.id)]
        return OperationResult.ok(reordered, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return failure("reorder_items", exc, timer.elapsed_ms)
