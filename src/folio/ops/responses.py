"""
Typed response objects for operations.

Payloads beyond the generic :class:`OperationResult` envelope.  Row-shaped
results reuse the models in :mod:`folio.core.models`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from folio.core.models import Project, Section


@dataclass(slots=True)
class ProjectDetail:
    """A project with its sections (display order) and their items."""

    project: Project
    sections: list[Section] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DeleteResult:
    """Result payload for delete operations."""

    id: str
    deleted: bool = True


@dataclass(frozen=True, slots=True)
class DatabaseInitResult:
    """Result payload for :func:`folio.ops.database.initialize_database`."""

    tables_created: list[str]
