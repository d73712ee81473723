"""Portfolio table models (``portfolio_projects``, ``portfolio_sections``, ``portfolio_items``).

Typed dataclass views of the three-level hierarchy.  Repositories return
plain row dicts; ``from_row`` converts them, parsing the stored item JSON and
the integer booleans.

Tags:
    folio, models, dataclasses, schema-mapping
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


def _load_json(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return value if isinstance(value, dict) else {}


# ---------------------------------------------------------------------------
# portfolio_projects
# ---------------------------------------------------------------------------


@dataclass
class Project:
    """Project row (``portfolio_projects``)."""

    id: str = ""
    user_id: str = ""
    title: str = ""
    slug: str = ""
    visibility: str = "private"  # public, unlisted, private
    is_published: bool = False
    published_at: str | None = None
    template_key: str = "classic"
    profile_photo_key: str | None = None
    profile_photo_url: str | None = None
    profile_photo_updated_at: str | None = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Project:
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            slug=row["slug"],
            visibility=row.get("visibility") or "private",
            is_published=bool(row.get("is_published")),
            published_at=row.get("published_at"),
            template_key=row.get("template_key") or "classic",
            profile_photo_key=row.get("profile_photo_key"),
            profile_photo_url=row.get("profile_photo_url"),
            profile_photo_updated_at=row.get("profile_photo_updated_at"),
            created_at=row.get("created_at") or "",
            updated_at=row.get("updated_at") or "",
        )


# ---------------------------------------------------------------------------
# portfolio_items
# ---------------------------------------------------------------------------


@dataclass
class Item:
    """Item row (``portfolio_items``); ``data`` is the sanitized payload."""

    id: str = ""
    section_id: str = ""
    order: int = 0
    data: dict[str, Any] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Item:
        return cls(
            id=row["id"],
            section_id=row["section_id"],
            order=int(row.get("sort_order") or 0),
            data=_load_json(row.get("data_json")),
            created_at=row.get("created_at") or "",
            updated_at=row.get("updated_at") or "",
        )


# ---------------------------------------------------------------------------
# portfolio_sections
# ---------------------------------------------------------------------------


@dataclass
class Section:
    """Section row (``portfolio_sections``) with its ordered items attached."""

    id: str = ""
    project_id: str = ""
    key: str = ""
    label: str = ""
    order: int = 0
    is_enabled: bool = True
    created_at: str = ""
    updated_at: str = ""
    items: list[Item] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict[str, Any], items: list[Item] | None = None) -> Section:
        enabled = row.get("is_enabled")
        return cls(
            id=row["id"],
            project_id=row["project_id"],
            key=row["key"],
            label=row.get("label") or "",
            order=int(row.get("sort_order") or 0),
            is_enabled=True if enabled is None else bool(enabled),
            created_at=row.get("created_at") or "",
            updated_at=row.get("updated_at") or "",
            items=items or [],
        )


__all__ = ["Item", "Project", "Section"]
