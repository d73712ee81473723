"""Repositories for the portfolio tables.

Each repository extends :class:`BaseRepository` and owns the SQL for one
table.  Operations in ``folio.ops`` compose them; ownership checks live in
``folio.ops.guards``, not here.

Architecture::

    ┌────────────────────────────────────────────────────────────────┐
    │  ops/projects.py, ops/sections.py, ops/items.py               │
    │  (operation functions - ownership, gating, orchestration)      │
    └────────────────────────────┬───────────────────────────────────┘
                                 │ uses
                                 ▼
    ┌────────────────────────────────────────────────────────────────┐
    │  folio.core.repositories  (this module)                       │
    │                                                               │
    │  ProjectRepository  - portfolio_projects                      │
    │  SectionRepository  - portfolio_sections                      │
    │  ItemRepository     - portfolio_items                         │
    └────────────────────────────────────────────────────────────────┘

Tags:
    repository, sql, portfolio
"""

from __future__ import annotations

from typing import Any

from folio.core.repository import BaseRepository
from folio.core.schema import PORTFOLIO_TABLES

_UPDATABLE_PROJECT_COLUMNS = frozenset(
    {
        "title",
        "slug",
        "visibility",
        "is_published",
        "published_at",
        "template_key",
        "profile_photo_key",
        "profile_photo_url",
        "profile_photo_updated_at",
        "updated_at",
    }
)


class ProjectRepository(BaseRepository):
    """CRUD for ``portfolio_projects``."""

    TABLE = PORTFOLIO_TABLES["projects"]

    def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """All projects of *user_id*, most recently updated first."""
        return self.query(
            f"SELECT * FROM {self.TABLE} WHERE user_id = {self.ph(1)} "
            "ORDER BY updated_at DESC, created_at DESC, id",
            (user_id,),
        )

    def get(self, project_id: str) -> dict[str, Any] | None:
        return self.query_one(
            f"SELECT * FROM {self.TABLE} WHERE id = {self.ph(1)}",
            (project_id,),
        )

    def get_owned(self, project_id: str, user_id: str) -> dict[str, Any] | None:
        """Project by id, only if *user_id* owns it."""
        return self.query_one(
            f"SELECT * FROM {self.TABLE} WHERE id = {self.ph(1)} AND user_id = {self.ph(1)}",
            (project_id, user_id),
        )

    def get_by_slug(self, slug: str) -> dict[str, Any] | None:
        return self.query_one(
            f"SELECT * FROM {self.TABLE} WHERE slug = {self.ph(1)}",
            (slug,),
        )

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        """True when a project other than *exclude_id* holds *slug*."""
        if exclude_id is None:
            row = self.query_one(f"SELECT id FROM {self.TABLE} WHERE slug = {self.ph(1)}", (slug,))
        else:
            row = self.query_one(
                f"SELECT id FROM {self.TABLE} WHERE slug = {self.ph(1)} AND id != {self.ph(1)}",
                (slug, exclude_id),
            )
        return row is not None

    def create(self, data: dict[str, Any]) -> None:
        self.insert(self.TABLE, data)

    def update_fields(self, project_id: str, fields: dict[str, Any]) -> None:
        """Update the given columns of one project."""
        unknown = set(fields) - _UPDATABLE_PROJECT_COLUMNS
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return
        assignments = ", ".join(f"{col} = {self.ph(1)}" for col in fields)
        self.execute(
            f"UPDATE {self.TABLE} SET {assignments} WHERE id = {self.ph(1)}",
            (*fields.values(), project_id),
        )

    def touch(self, project_id: str, now: str) -> None:
        self.execute(
            f"UPDATE {self.TABLE} SET updated_at = {self.ph(1)} WHERE id = {self.ph(1)}",
            (now, project_id),
        )

    def delete(self, project_id: str) -> None:
        self.execute(f"DELETE FROM {self.TABLE} WHERE id = {self.ph(1)}", (project_id,))


class SectionRepository(BaseRepository):
    """CRUD for ``portfolio_sections``."""

    TABLE = PORTFOLIO_TABLES["sections"]

    def list_for_project(self, project_id: str) -> list[dict[str, Any]]:
        """Sections of a project in display order."""
        return self.query(
            f"SELECT * FROM {self.TABLE} WHERE project_id = {self.ph(1)} ORDER BY sort_order, id",
            (project_id,),
        )

    def get(self, section_id: str) -> dict[str, Any] | None:
        return self.query_one(
            f"SELECT * FROM {self.TABLE} WHERE id = {self.ph(1)}",
            (section_id,),
        )

    def create_many(self, rows: list[dict[str, Any]]) -> int:
        return self.insert_many(self.TABLE, rows)

    def set_enabled(self, section_id: str, enabled: bool, now: str) -> None:
        self.execute(
            f"UPDATE {self.TABLE} SET is_enabled = {self.ph(1)}, updated_at = {self.ph(1)} "
            f"WHERE id = {self.ph(1)}",
            (1 if enabled else 0, now, section_id),
        )

    def set_order(self, section_id: str, order: int, now: str) -> None:
        self.execute(
            f"UPDATE {self.TABLE} SET sort_order = {self.ph(1)}, updated_at = {self.ph(1)} "
            f"WHERE id = {self.ph(1)}",
            (order, now, section_id),
        )

    def delete_for_project(self, project_id: str) -> None:
        self.execute(f"DELETE FROM {self.TABLE} WHERE project_id = {self.ph(1)}", (project_id,))


class ItemRepository(BaseRepository):
    """CRUD for ``portfolio_items``."""

    TABLE = PORTFOLIO_TABLES["items"]

    def list_for_section(self, section_id: str) -> list[dict[str, Any]]:
        return self.query(
            f"SELECT * FROM {self.TABLE} WHERE section_id = {self.ph(1)} ORDER BY sort_order, created_at, id",
            (section_id,),
        )

    def list_for_sections(self, section_ids: list[str]) -> list[dict[str, Any]]:
        """Items of several sections, grouped by section in display order."""
        if not section_ids:
            return []
        return self.query(
            f"SELECT * FROM {self.TABLE} WHERE section_id IN ({self.ph(len(section_ids))}) "
            "ORDER BY section_id, sort_order, created_at, id",
            tuple(section_ids),
        )

    def get(self, item_id: str) -> dict[str, Any] | None:
        return self.query_one(
            f"SELECT * FROM {self.TABLE} WHERE id = {self.ph(1)}",
            (item_id,),
        )

    def count(self, section_id: str) -> int:
        row = self.query_one(
            f"SELECT COUNT(*) AS cnt FROM {self.TABLE} WHERE section_id = {self.ph(1)}",
            (section_id,),
        )
        return int((row or {}).get("cnt", 0))

    def create(self, data: dict[str, Any]) -> None:
        self.insert(self.TABLE, data)

    def create_many(self, rows: list[dict[str, Any]]) -> int:
        return self.insert_many(self.TABLE, rows)

    def update_data(self, item_id: str, data_json: str, now: str) -> None:
        self.execute(
            f"UPDATE {self.TABLE} SET data_json = {self.ph(1)}, updated_at = {self.ph(1)} "
            f"WHERE id = {self.ph(1)}",
            (data_json, now, item_id),
        )

    def set_order(self, item_id: str, order: int, now: str) -> None:
        self.execute(
            f"UPDATE {self.TABLE} SET sort_order = {self.ph(1)}, updated_at = {self.ph(1)} "
            f"WHERE id = {self.ph(1)}",
            (order, now, item_id),
        )

    def delete(self, item_id: str) -> None:
        self.execute(f"DELETE FROM {self.TABLE} WHERE id = {self.ph(1)}", (item_id,))

    def delete_for_project(self, project_id: str) -> None:
        self.execute(
            f"DELETE FROM {self.TABLE} WHERE section_id IN "
            f"(SELECT id FROM {SectionRepository.TABLE} WHERE project_id = {self.ph(1)})",
            (project_id,),
        )


__all__ = ["ItemRepository", "ProjectRepository", "SectionRepository"]
