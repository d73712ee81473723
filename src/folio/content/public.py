"""
Public output transformer.

Projects a project and its sections into the versioned, render-ready
``PublicDocument``.  This is the contract with whatever renders portfolios,
so it is pure and deterministic: no clock, no locale, no I/O.  Disabled
sections contribute nothing and are absent from ``visibleSections``; an
enabled section with no content shows up in ``visibleSections`` with empty
content, which lets a renderer tell "empty" from "hidden".

Architecture:
    ::

        Project ─┐
                 ├─► enabled sections (stored order) ─► PortfolioContent
        Sections ┘                                         │
                                                           ▼
                                  PublicDocument { version, owner, contact,
                                                   sections, visibleSections,
                                                   meta }

Examples:
    >>> normalize_href("example.com")
    'https://example.com'
    >>> normalize_href("mailto:me@example.com")
    'mailto:me@example.com'
    >>> format_date_label("2026-10-17T08:00:00+00:00")
    'Oct 17, 2026'
    >>> format_date_label("soon")
    'soon'

Tags:
    transformer, public-document, rendering-contract, folio
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from folio.content.constants import (
    DEFAULT_TEMPLATE,
    SectionKey,
    is_template_key,
)
from folio.content.sanitize import default_payload
from folio.core.models import Item, Project, Section

PUBLIC_SCHEMA_VERSION = "1.0"

# Keys a renderer may list; the profile section feeds the owner block instead.
PUBLIC_SECTION_KEYS: tuple[str, ...] = (
    SectionKey.ABOUT,
    SectionKey.FEATURED_PROJECTS,
    SectionKey.EXPERIENCE,
    SectionKey.SKILLS,
    SectionKey.EDUCATION,
    SectionKey.CERTIFICATIONS,
    SectionKey.ACHIEVEMENTS,
    SectionKey.CONTACT,
)

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_HREF_OK = re.compile(r"^(mailto:|tel:|https?://)", re.IGNORECASE)


# =============================================================================
# SCHEMA
# =============================================================================


class _PublicModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class PublicOwner(_PublicModel):
    fullName: str = ""
    headline: str = ""
    summary: str = ""
    location: str = ""


class PublicLink(_PublicModel):
    label: str
    href: str


class PublicContact(_PublicModel):
    email: str = ""
    phone: str = ""
    website: str = ""
    github: str = ""
    linkedin: str = ""
    callToActionTitle: str = ""
    callToActionText: str = ""
    links: list[PublicLink] = Field(default_factory=list)


class PublicFeaturedProject(_PublicModel):
    name: str
    description: str
    link: str
    bullets: list[str]
    tags: list[str]


class PublicExperience(_PublicModel):
    role: str
    company: str
    location: str
    start: str
    end: str
    bullets: list[str]


class PublicSkillGroup(_PublicModel):
    name: str
    items: list[str]


class PublicEducation(_PublicModel):
    degree: str
    field: str
    institution: str
    start: str
    end: str
    grade: str


class PublicCredential(_PublicModel):
    title: str
    issuer: str
    year: str
    note: str


class PublicSections(_PublicModel):
    about: str = ""
    featuredProjects: list[PublicFeaturedProject] = Field(default_factory=list)
    experience: list[PublicExperience] = Field(default_factory=list)
    skills: list[PublicSkillGroup] = Field(default_factory=list)
    education: list[PublicEducation] = Field(default_factory=list)
    certifications: list[PublicCredential] = Field(default_factory=list)
    achievements: list[PublicCredential] = Field(default_factory=list)


class PublicMeta(_PublicModel):
    title: str
    slug: str
    visibility: str
    publishedAt: str | None = None
    updatedAt: str | None = None
    lastUpdatedLabel: str = ""


class PublicDocument(_PublicModel):
    """Versioned public projection of a portfolio."""

    version: str = PUBLIC_SCHEMA_VERSION
    templateKey: str
    owner: PublicOwner
    contact: PublicContact
    sections: PublicSections
    visibleSections: list[str]
    meta: PublicMeta


# =============================================================================
# FORMATTING HELPERS
# =============================================================================


def clean(value: Any) -> str:
    return "" if value is None else str(value).strip()


def normalize_href(value: Any) -> str:
    """Turn a stored URL into a link target; empty stays empty."""
    raw = clean(value)
    if not raw:
        return ""
    if _HREF_OK.match(raw):
        return raw
    return f"https://{raw.lstrip('/')}"


def format_date_label(value: Any) -> str:
    """``"Oct 17, 2026"`` for an ISO timestamp, else the raw value."""
    raw = clean(value)
    if not raw:
        return ""
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return raw
    return f"{MONTH_LABELS[parsed.month - 1]} {parsed.day}, {parsed.year}"


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _month_year(year: int | None, month: int | None) -> str:
    if not year:
        return ""
    if month and 1 <= month <= 12:
        return f"{MONTH_LABELS[month - 1]} {year}"
    return str(year)


def format_range(data: dict[str, Any], *, allow_present: bool) -> tuple[str, str]:
    """Start/end labels for a dated entry, falling back to raw ``start``/``end``."""
    start = _month_year(_as_int(data.get("startYear")), _as_int(data.get("startMonth")))
    is_present = allow_present and bool(data.get("isPresent", data.get("present")))
    if is_present:
        end = "Present"
    else:
        end = _month_year(_as_int(data.get("endYear")), _as_int(data.get("endMonth")))
    return start or clean(data.get("start")), end or clean(data.get("end"))


def _strings(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [text for text in (clean(v) for v in value) if text]


# =============================================================================
# TRANSFORMER
# =============================================================================


def _ordered_items(section: Section | None) -> list[Item]:
    if section is None:
        return []
    return sorted(section.items, key=lambda item: item.order)


def _first_data(section: Section | None) -> dict[str, Any]:
    items = _ordered_items(section)
    return items[0].data if items else {}


def _credential(data: dict[str, Any]) -> PublicCredential:
    year = data.get("year")
    return PublicCredential(
        title=clean(data.get("title")),
        issuer=clean(data.get("issuer")),
        year="" if year is None else clean(year),
        note=clean(data.get("note")),
    )


def _skill_groups(section: Section | None) -> list[PublicSkillGroup]:
    if section is None:
        return []
    data = _first_data(section)
    groups = data.get("groups")
    if not isinstance(groups, list):
        groups = default_payload(SectionKey.SKILLS)["groups"]
    result = []
    for group in groups:
        if not isinstance(group, dict):
            continue
        name = clean(group.get("name"))
        items = _strings(group.get("items"))
        if name or items:
            result.append(PublicSkillGroup(name=name, items=items))
    return result


def _links(contact: dict[str, Any]) -> list[PublicLink]:
    links = contact.get("links")
    if not isinstance(links, list):
        return []
    result = []
    for link in links:
        if not isinstance(link, dict):
            continue
        href = normalize_href(link.get("url"))
        if not href:
            continue
        result.append(PublicLink(label=clean(link.get("label")) or clean(link.get("url")), href=href))
    return result


def _template_key(value: str | None) -> str:
    candidate = clean(value)
    return candidate if is_template_key(candidate) else DEFAULT_TEMPLATE.value


def to_public_document(project: Project, sections: Sequence[Section]) -> PublicDocument:
    """Build the public document for *project* from its *sections*.

    Only enabled sections contribute content, in their stored order.
    """
    enabled = [s for s in sorted(sections, key=lambda s: s.order) if s.is_enabled]
    by_key: dict[str, Section] = {}
    for section in enabled:
        by_key.setdefault(section.key, section)

    profile = _first_data(by_key.get(SectionKey.PROFILE))
    about_text = clean(_first_data(by_key.get(SectionKey.ABOUT)).get("text"))
    contact = _first_data(by_key.get(SectionKey.CONTACT))

    featured = [
        PublicFeaturedProject(
            name=clean(item.data.get("name")),
            description=clean(item.data.get("description")),
            link=normalize_href(item.data.get("link")),
            bullets=_strings(item.data.get("bullets")),
            tags=_strings(item.data.get("tags")),
        )
        for item in _ordered_items(by_key.get(SectionKey.FEATURED_PROJECTS))
    ]

    experience = []
    for item in _ordered_items(by_key.get(SectionKey.EXPERIENCE)):
        start, end = format_range(item.data, allow_present=True)
        experience.append(
            PublicExperience(
                role=clean(item.data.get("role")),
                company=clean(item.data.get("company")),
                location=clean(item.data.get("location")),
                start=start,
                end=end,
                bullets=_strings(item.data.get("bullets")),
            )
        )

    education = []
    for item in _ordered_items(by_key.get(SectionKey.EDUCATION)):
        start, end = format_range(item.data, allow_present=True)
        education.append(
            PublicEducation(
                degree=clean(item.data.get("degree")),
                field=clean(item.data.get("field")),
                institution=clean(item.data.get("institution")),
                start=start,
                end=end,
                grade=clean(item.data.get("grade")),
            )
        )

    return PublicDocument(
        templateKey=_template_key(project.template_key),
        owner=PublicOwner(
            fullName=clean(profile.get("fullName")),
            headline=clean(profile.get("headline")),
            summary=about_text,
            location=clean(profile.get("location")),
        ),
        contact=PublicContact(
            email=clean(profile.get("email")) or clean(contact.get("email")),
            phone=clean(profile.get("phone")),
            website=clean(profile.get("website")) or clean(contact.get("website")),
            github=clean(profile.get("github")),
            linkedin=clean(profile.get("linkedin")),
            callToActionTitle=clean(contact.get("callToActionTitle")),
            callToActionText=clean(contact.get("callToActionText")),
            links=_links(contact),
        ),
        sections=PublicSections(
            about=about_text,
            featuredProjects=featured,
            experience=experience,
            skills=_skill_groups(by_key.get(SectionKey.SKILLS)),
            education=education,
            certifications=[_credential(i.data) for i in _ordered_items(by_key.get(SectionKey.CERTIFICATIONS))],
            achievements=[_credential(i.data) for i in _ordered_items(by_key.get(SectionKey.ACHIEVEMENTS))],
        ),
        visibleSections=_visible_keys(enabled),
        meta=PublicMeta(
            title=clean(project.title),
            slug=clean(project.slug),
            visibility=project.visibility,
            publishedAt=project.published_at,
            updatedAt=project.updated_at or None,
            lastUpdatedLabel=format_date_label(project.updated_at or project.published_at),
        ),
    )


def _visible_keys(enabled: Iterable[Section]) -> list[str]:
    keys = []
    for section in enabled:
        if section.key in PUBLIC_SECTION_KEYS and section.key not in keys:
            keys.append(section.key)
    return keys


def render_public_json(document: PublicDocument) -> str:
    """Serialize *document*; identical documents give identical text."""
    return document.model_dump_json(indent=2)


__all__ = [
    "PUBLIC_SCHEMA_VERSION",
    "PublicDocument",
    "format_date_label",
    "format_range",
    "normalize_href",
    "render_public_json",
    "to_public_document",
]
