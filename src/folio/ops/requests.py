"""
Typed request objects for operations.

Each dataclass represents the *input* contract for a single operation
function.  Requests carry transport-agnostic data only; field cleaning
happens inside the operation so every caller gets the same rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ------------------------------------------------------------------ #
# Project operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class CreateProjectRequest:
    """Request for :func:`folio.ops.projects.create_project`."""

    title: str = ""
    template_key: str = "classic"


@dataclass(frozen=True, slots=True)
class UpdateProjectRequest:
    """Request for :func:`folio.ops.projects.update_project`.

    ``None`` means "leave unchanged"; at least one field must be set.
    """

    project_id: str = ""
    title: str | None = None
    slug: str | None = None
    visibility: str | None = None
    template_key: str | None = None

    def has_changes(self) -> bool:
        return any(v is not None for v in (self.title, self.slug, self.visibility, self.template_key))


@dataclass(frozen=True, slots=True)
class SetProfilePhotoRequest:
    """Request for :func:`folio.ops.projects.set_profile_photo`.

    Empty or ``None`` values clear the corresponding reference.
    """

    project_id: str = ""
    key: str | None = None
    url: str | None = None


# ------------------------------------------------------------------ #
# Item operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class CreateItemRequest:
    """Request for :func:`folio.ops.items.create_item`."""

    section_id: str = ""
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class UpdateItemRequest:
    """Request for :func:`folio.ops.items.update_item`."""

    section_id: str = ""
    item_id: str = ""
    data: dict[str, Any] = field(default_factory=dict)
