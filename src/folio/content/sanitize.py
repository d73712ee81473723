"""
Sanitization and validation pipeline for section payloads.

``sanitize(section_key, payload)`` is a total function over the section-key
union: each known key has one sanitizer that trims, bounds and normalizes the
free-form editor payload into the canonical shape stored on an item.  Keys
outside the catalog pass through untouched so newer clients can store content
kinds this version does not know yet.

Manifesto:
    - **Pure:** No I/O, no clock reads unless ``current_year`` is omitted
    - **Fail closed:** Any rule violation raises ``ValidationError``; required
      data is never silently dropped
    - **Canonical output:** Same input always yields the same stored shape

Architecture:
    ::

        raw payload ──► SANITIZERS[key] ──► field helpers ──► clean dict
                              │                (text, email, url, lines,
                              │                 tags, year, month)
                              └──► check_chronology (experience, education)

Examples:
    >>> sanitize("about", {"text": "  Hello  "})
    {'text': 'Hello'}
    >>> sanitize("featuredProjects", {"name": "Folio", "tags": "Python, python, CLI"})["tags"]
    ['python', 'cli']
    >>> normalize_url("Example.COM/path")
    'https://example.com/path'

Guardrails:
    ❌ DON'T: Return partially cleaned payloads on error
    ✅ DO: Raise ValidationError naming the field

Tags:
    validation, sanitization, pipeline, folio
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from folio.content.constants import LIMITS, MAX_LENGTHS, YEAR_MIN, SectionKey
from folio.core.errors import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
_OPAQUE_SCHEME_RE = re.compile(r"^(mailto|tel):", re.IGNORECASE)
_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})

Payload = dict[str, Any]
Sanitizer = Callable[[Mapping[str, Any], int], Payload]


# =============================================================================
# FIELD HELPERS
# =============================================================================


def normalize_text(
    value: Any,
    *,
    field: str = "value",
    label: str | None = None,
    max_length: int | None = None,
    required: bool = False,
) -> str:
    """Trim *value* and enforce its length bound.

    ``None`` becomes the empty string; non-strings are converted with
    ``str()``.
    """
    label = label or field
    text = "" if value is None else str(value)
    text = text.strip()
    if required and not text:
        raise ValidationError(f"{label} is required.", field=field, constraint="required")
    if max_length is not None and len(text) > max_length:
        raise ValidationError(
            f"{label} must be {max_length} characters or fewer.",
            field=field,
            value=text,
            constraint=f"max_length={max_length}",
        )
    return text


def normalize_email(
    value: Any,
    *,
    field: str = "email",
    label: str = "Email",
    max_length: int = MAX_LENGTHS["profileEmail"],
) -> str:
    """Validate an optional email address and lower-case it."""
    text = normalize_text(value, field=field, label=label, max_length=max_length)
    if not text:
        return ""
    if not _EMAIL_RE.match(text):
        raise ValidationError(
            f"{label} must be a valid email address.",
            field=field,
            value=text,
            constraint="email",
        )
    return text.lower()


def normalize_url(
    value: Any,
    *,
    field: str = "url",
    label: str = "URL",
    max_length: int = MAX_LENGTHS["linkUrl"],
) -> str:
    """Canonicalize an optional URL.

    Scheme-less input gets ``https://``.  The scheme and hostname are
    lower-cased; path, query and fragment are kept as written.
    """
    text = normalize_text(value, field=field, label=label, max_length=max_length)
    if not text:
        return ""

    invalid = ValidationError(f"{label} must be a valid URL.", field=field, value=text, constraint="url")

    if _OPAQUE_SCHEME_RE.match(text):
        scheme, _, rest = text.partition(":")
        if not rest.strip() or any(ch.isspace() for ch in rest):
            raise invalid
        return f"{scheme.lower()}:{rest}"

    candidate = text if _SCHEME_RE.match(text) else f"https://{text.lstrip('/')}"
    if any(ch.isspace() for ch in candidate):
        raise invalid
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
        port = parts.port
    except ValueError as exc:
        raise ValidationError(
            f"{label} must be a valid URL.", field=field, value=text, constraint="url", cause=exc
        ) from exc
    if not hostname:
        raise invalid

    netloc = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None:
        netloc = f"{netloc}:{port}"
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunsplit((parts.scheme.lower(), netloc, parts.path, parts.query, parts.fragment))


def to_lines(
    value: Any,
    *,
    field: str,
    label: str | None = None,
    max_length: int,
    max_count: int,
) -> list[str]:
    """Clean a list of strings, or a newline separated string, into lines."""
    label = label or field
    if value is None:
        entries: list[Any] = []
    elif isinstance(value, str):
        entries = value.split("\n")
    elif isinstance(value, (list, tuple)):
        entries = list(value)
    else:
        raise ValidationError(f"{label} must be a list of lines.", field=field, value=value)

    lines = []
    for entry in entries:
        line = normalize_text(entry, field=field, label=label, max_length=max_length)
        if line:
            lines.append(line)
    return lines[:max_count]


def to_tags(
    value: Any,
    *,
    field: str = "tags",
    label: str = "Tag",
    max_length: int = MAX_LENGTHS["tag"],
    max_count: int = LIMITS["projectTags"],
) -> list[str]:
    """Clean a list, or a comma separated string, into unique lower-case tags."""
    if value is None:
        entries: list[Any] = []
    elif isinstance(value, str):
        entries = value.split(",")
    elif isinstance(value, (list, tuple)):
        entries = list(value)
    else:
        raise ValidationError(f"{label}s must be a list.", field=field, value=value)

    tags: list[str] = []
    for entry in entries:
        tag = normalize_text(entry, field=field, label=label, max_length=max_length).lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags[:max_count]


def _parse_int(value: Any, *, field: str, label: str) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise ValidationError(
            f"{label} must be a whole number.", field=field, value=value, cause=exc
        ) from exc


def parse_year(
    value: Any,
    *,
    field: str = "year",
    label: str = "Year",
    required: bool = False,
    current_year: int | None = None,
) -> int | None:
    """Parse a year in ``[YEAR_MIN, current_year]``; empty is ``None``."""
    year = _parse_int(value, field=field, label=label)
    if year is None:
        if required:
            raise ValidationError(f"{label} is required.", field=field, constraint="required")
        return None
    max_year = current_year if current_year is not None else datetime.now(UTC).year
    if year < YEAR_MIN or year > max_year:
        raise ValidationError(
            f"{label} must be between {YEAR_MIN} and {max_year}.",
            field=field,
            value=year,
            constraint=f"range={YEAR_MIN}..{max_year}",
        )
    return year


def parse_month(
    value: Any,
    *,
    field: str = "month",
    label: str = "Month",
    required: bool = False,
) -> int | None:
    """Parse a month in ``[1, 12]``; empty is ``None``."""
    month = _parse_int(value, field=field, label=label)
    if month is None:
        if required:
            raise ValidationError(f"{label} is required.", field=field, constraint="required")
        return None
    if month < 1 or month > 12:
        raise ValidationError(
            f"{label} must be between 1 and 12.", field=field, value=month, constraint="range=1..12"
        )
    return month


def to_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def check_chronology(
    start_year: int | None,
    start_month: int | None,
    end_year: int | None,
    end_month: int | None,
    is_present: bool,
) -> None:
    """Reject date ranges that cannot describe a real period."""
    if start_month is not None and start_year is None:
        raise ValidationError("Start year is required when a start month is set.", field="startYear")
    if end_month is not None and end_year is None:
        raise ValidationError("End year is required when an end month is set.", field="endYear")

    if is_present:
        if end_year is not None or end_month is not None:
            raise ValidationError("End date must be empty when marked as present.", field="endYear")
        if start_year is None:
            raise ValidationError("Start year is required when marked as present.", field="startYear")
        return

    if end_year is not None and start_year is None:
        raise ValidationError("Start year is required when an end date is set.", field="startYear")

    if start_year is not None and end_year is not None:
        start = start_year * 100 + (start_month or 1)
        end = end_year * 100 + (end_month or 12)
        if end < start:
            raise ValidationError("End date cannot be before start date.", field="endYear")


def _date_range(data: Mapping[str, Any], current_year: int) -> Payload:
    start_year = parse_year(data.get("startYear"), field="startYear", label="Start year", current_year=current_year)
    start_month = parse_month(data.get("startMonth"), field="startMonth", label="Start month")
    end_year = parse_year(data.get("endYear"), field="endYear", label="End year", current_year=current_year)
    end_month = parse_month(data.get("endMonth"), field="endMonth", label="End month")
    is_present = to_flag(data.get("isPresent", data.get("present")))
    check_chronology(start_year, start_month, end_year, end_month, is_present)
    return {
        "startYear": start_year,
        "startMonth": start_month,
        "endYear": end_year,
        "endMonth": end_month,
        "isPresent": is_present,
    }


# =============================================================================
# SECTION SANITIZERS
# =============================================================================


def sanitize_profile(data: Mapping[str, Any], current_year: int) -> Payload:
    return {
        "fullName": normalize_text(
            data.get("fullName"), field="fullName", label="Full name",
            max_length=MAX_LENGTHS["profileFullName"], required=True,
        ),
        "headline": normalize_text(
            data.get("headline"), field="headline", label="Headline", max_length=MAX_LENGTHS["profileHeadline"]
        ),
        "location": normalize_text(
            data.get("location"), field="location", label="Location", max_length=MAX_LENGTHS["profileLocation"]
        ),
        "email": normalize_email(data.get("email"), field="email", max_length=MAX_LENGTHS["profileEmail"]),
        "phone": normalize_text(
            data.get("phone"), field="phone", label="Phone", max_length=MAX_LENGTHS["profilePhone"]
        ),
        "website": normalize_url(
            data.get("website"), field="website", label="Website", max_length=MAX_LENGTHS["profileWebsite"]
        ),
        "github": normalize_url(
            data.get("github"), field="github", label="GitHub", max_length=MAX_LENGTHS["profileGithub"]
        ),
        "linkedin": normalize_url(
            data.get("linkedin"), field="linkedin", label="LinkedIn", max_length=MAX_LENGTHS["profileLinkedin"]
        ),
    }


def sanitize_about(data: Mapping[str, Any], current_year: int) -> Payload:
    return {
        "text": normalize_text(data.get("text"), field="text", label="About", max_length=MAX_LENGTHS["aboutText"]),
    }


def sanitize_featured_project(data: Mapping[str, Any], current_year: int) -> Payload:
    return {
        "name": normalize_text(
            data.get("name"), field="name", label="Project name", max_length=MAX_LENGTHS["projectName"], required=True
        ),
        "description": normalize_text(
            data.get("description"), field="description", label="Description",
            max_length=MAX_LENGTHS["projectDescription"],
        ),
        "link": normalize_url(data.get("link"), field="link", label="Link", max_length=MAX_LENGTHS["projectLink"]),
        "bullets": to_lines(
            data.get("bullets"), field="bullets", label="Bullet",
            max_length=MAX_LENGTHS["bulletLine"], max_count=LIMITS["projectBullets"],
        ),
        "tags": to_tags(data.get("tags"), max_length=MAX_LENGTHS["tag"], max_count=LIMITS["projectTags"]),
    }


def sanitize_experience(data: Mapping[str, Any], current_year: int) -> Payload:
    payload = {
        "role": normalize_text(
            data.get("role"), field="role", label="Role", max_length=MAX_LENGTHS["experienceRole"], required=True
        ),
        "company": normalize_text(
            data.get("company"), field="company", label="Company",
            max_length=MAX_LENGTHS["experienceCompany"], required=True,
        ),
        "location": normalize_text(
            data.get("location"), field="location", label="Location", max_length=MAX_LENGTHS["experienceLocation"]
        ),
    }
    payload.update(_date_range(data, current_year))
    payload["bullets"] = to_lines(
        data.get("bullets"), field="bullets", label="Bullet",
        max_length=MAX_LENGTHS["bulletLine"], max_count=LIMITS["experienceBullets"],
    )
    return payload


def sanitize_skills(data: Mapping[str, Any], current_year: int) -> Payload:
    raw_groups = data.get("groups")
    if raw_groups is None:
        raw_groups = []
    if not isinstance(raw_groups, (list, tuple)):
        raise ValidationError("Skill groups must be a list.", field="groups", value=raw_groups)

    groups = []
    for group in raw_groups:
        if not isinstance(group, Mapping):
            raise ValidationError("Each skill group must be an object.", field="groups", value=group)
        name = normalize_text(
            group.get("name"), field="groups.name", label="Group name", max_length=MAX_LENGTHS["skillsGroupName"]
        )
        items = to_lines(
            group.get("items"), field="groups.items", label="Skill",
            max_length=MAX_LENGTHS["skillItem"], max_count=LIMITS["skillItems"],
        )
        if name or items:
            groups.append({"name": name, "items": items})
    return {"groups": groups[: LIMITS["skillGroups"]]}


def sanitize_education(data: Mapping[str, Any], current_year: int) -> Payload:
    payload = {
        "degree": normalize_text(
            data.get("degree"), field="degree", label="Degree",
            max_length=MAX_LENGTHS["educationDegree"], required=True,
        ),
        "field": normalize_text(
            data.get("field"), field="field", label="Field of study", max_length=MAX_LENGTHS["educationField"]
        ),
        "institution": normalize_text(
            data.get("institution"), field="institution", label="Institution",
            max_length=MAX_LENGTHS["educationInstitution"], required=True,
        ),
        "grade": normalize_text(
            data.get("grade"), field="grade", label="Grade", max_length=MAX_LENGTHS["educationGrade"]
        ),
    }
    payload.update(_date_range(data, current_year))
    return payload


def sanitize_credential(data: Mapping[str, Any], current_year: int) -> Payload:
    """Certifications and achievements share one shape."""
    return {
        "title": normalize_text(
            data.get("title"), field="title", label="Title",
            max_length=MAX_LENGTHS["certificationTitle"], required=True,
        ),
        "issuer": normalize_text(
            data.get("issuer"), field="issuer", label="Issuer", max_length=MAX_LENGTHS["certificationIssuer"]
        ),
        "year": parse_year(data.get("year"), field="year", label="Year", current_year=current_year),
        "note": normalize_text(data.get("note"), field="note", label="Note", max_length=MAX_LENGTHS["note"]),
    }


def _parse_link_lines(value: str) -> list[dict[str, str]]:
    links = []
    for line in value.split("\n"):
        line = line.strip()
        if not line:
            continue
        label, _, url = line.partition("|")
        links.append({"label": label.strip(), "url": url.strip()})
    return links


def normalize_links(value: Any) -> list[dict[str, str]]:
    """Clean contact links; drop empty entries and exact duplicates."""
    if value is None:
        entries: list[Any] = []
    elif isinstance(value, str):
        entries = _parse_link_lines(value)
    elif isinstance(value, (list, tuple)):
        entries = list(value)
    else:
        raise ValidationError("Links must be a list.", field="links", value=value)

    links: list[dict[str, str]] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise ValidationError("Each link must have a label and a URL.", field="links", value=entry)
        label = normalize_text(
            entry.get("label"), field="links.label", label="Link label", max_length=MAX_LENGTHS["linkLabel"]
        )
        url = normalize_url(entry.get("url"), field="links.url", label="Link URL", max_length=MAX_LENGTHS["linkUrl"])
        if not label and not url:
            continue
        link = {"label": label, "url": url}
        if link not in links:
            links.append(link)
    return links


def sanitize_contact(data: Mapping[str, Any], current_year: int) -> Payload:
    return {
        "callToActionTitle": normalize_text(
            data.get("callToActionTitle"), field="callToActionTitle", label="Call to action title",
            max_length=MAX_LENGTHS["ctaTitle"],
        ),
        "callToActionText": normalize_text(
            data.get("callToActionText"), field="callToActionText", label="Call to action text",
            max_length=MAX_LENGTHS["ctaText"],
        ),
        "email": normalize_email(data.get("email"), field="email", max_length=MAX_LENGTHS["profileEmail"]),
        "website": normalize_url(
            data.get("website"), field="website", label="Website", max_length=MAX_LENGTHS["profileWebsite"]
        ),
        "links": normalize_links(data.get("links")),
    }


SANITIZERS: dict[SectionKey, Sanitizer] = {
    SectionKey.PROFILE: sanitize_profile,
    SectionKey.ABOUT: sanitize_about,
    SectionKey.FEATURED_PROJECTS: sanitize_featured_project,
    SectionKey.EXPERIENCE: sanitize_experience,
    SectionKey.SKILLS: sanitize_skills,
    SectionKey.EDUCATION: sanitize_education,
    SectionKey.CERTIFICATIONS: sanitize_credential,
    SectionKey.ACHIEVEMENTS: sanitize_credential,
    SectionKey.CONTACT: sanitize_contact,
}


def sanitize(section_key: str, payload: Any, *, current_year: int | None = None) -> Any:
    """Clean *payload* for a section of kind *section_key*.

    Raises:
        ValidationError: On the first rule the payload violates.
    """
    sanitizer = SANITIZERS.get(section_key)  # type: ignore[call-overload]
    if sanitizer is None:
        return payload
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValidationError("Item data must be an object.", field="data", value=payload)
    year = current_year if current_year is not None else datetime.now(UTC).year
    return sanitizer(payload, year)


# =============================================================================
# SEED PAYLOADS
# =============================================================================


def default_payload(section_key: str) -> Payload:
    """Empty but well-formed payload for a freshly seeded item."""
    key = SectionKey(section_key)
    if key is SectionKey.PROFILE:
        return {
            "fullName": "",
            "headline": "",
            "location": "",
            "email": "",
            "phone": "",
            "website": "",
            "github": "",
            "linkedin": "",
        }
    if key is SectionKey.ABOUT:
        return {"text": ""}
    if key is SectionKey.SKILLS:
        return {"groups": [{"name": name, "items": []} for name in ("Backend", "Frontend", "Tools")]}
    if key is SectionKey.CONTACT:
        return {"callToActionTitle": "", "callToActionText": "", "email": "", "website": "", "links": []}
    raise ValueError(f"No seed payload for multi section '{section_key}'")


__all__ = [
    "SANITIZERS",
    "check_chronology",
    "default_payload",
    "normalize_email",
    "normalize_links",
    "normalize_text",
    "normalize_url",
    "parse_month",
    "parse_year",
    "sanitize",
    "to_flag",
    "to_lines",
    "to_tags",
]
