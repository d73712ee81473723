"""
Portfolio tables.

Defines table names and DDL for the three-level project → section → item
hierarchy.  The storage layer is the source of truth for slug uniqueness
(``UNIQUE(slug)``) and for one section per key per project
(``UNIQUE(project_id, key)``).

Tables:
    - **portfolio_projects:** One row per portfolio, owner-scoped
    - **portfolio_sections:** Exactly nine rows per project
    - **portfolio_items:** Section content, JSON payload in ``data_json``

Examples:
    >>> from folio.core.schema import PORTFOLIO_TABLES
    >>> PORTFOLIO_TABLES["projects"]
    'portfolio_projects'
    >>> create_tables(conn)  # doctest: +SKIP
"""

from __future__ import annotations

from folio.core.protocols import Connection

PORTFOLIO_TABLES = {
    "projects": "portfolio_projects",
    "sections": "portfolio_sections",
    "items": "portfolio_items",
}

PORTFOLIO_DDL = {
    "projects": """
        CREATE TABLE IF NOT EXISTS portfolio_projects (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            slug TEXT NOT NULL UNIQUE,
            visibility TEXT NOT NULL DEFAULT 'private',
            is_published INTEGER NOT NULL DEFAULT 0,
            published_at TEXT,
            template_key TEXT NOT NULL DEFAULT 'classic',
            profile_photo_key TEXT,
            profile_photo_url TEXT,
            profile_photo_updated_at TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
    "sections": """
        CREATE TABLE IF NOT EXISTS portfolio_sections (
            id TEXT PRIMARY KEY,
            project_id TEXT NOT NULL REFERENCES portfolio_projects(id),
            key TEXT NOT NULL,
            label TEXT NOT NULL,
            sort_order INTEGER NOT NULL,
            is_enabled INTEGER NOT NULL DEFAULT 1,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            UNIQUE (project_id, key)
        )
    """,
    "items": """
        CREATE TABLE IF NOT EXISTS portfolio_items (
            id TEXT PRIMARY KEY,
            section_id TEXT NOT NULL REFERENCES portfolio_sections(id),
            sort_order INTEGER NOT NULL,
            data_json TEXT NOT NULL DEFAULT '{}',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """,
}

PORTFOLIO_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_portfolio_projects_user ON portfolio_projects(user_id, updated_at)",
    "CREATE INDEX IF NOT EXISTS idx_portfolio_sections_project ON portfolio_sections(project_id, sort_order)",
    "CREATE INDEX IF NOT EXISTS idx_portfolio_items_section ON portfolio_items(section_id, sort_order)",
]


def create_tables(conn: Connection) -> list[str]:
    """Create all portfolio tables and indexes (idempotent).

    Returns:
        Names of the tables ensured.
    """
    for ddl in PORTFOLIO_DDL.values():
        conn.execute(ddl)
    for index in PORTFOLIO_INDEXES:
        conn.execute(index)
    conn.commit()
    return list(PORTFOLIO_TABLES.values())


__all__ = ["PORTFOLIO_DDL", "PORTFOLIO_INDEXES", "PORTFOLIO_TABLES", "create_tables"]
