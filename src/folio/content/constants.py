"""
Content catalog: section kinds, templates, visibility and field limits.

The nine section keys are fixed; every project gets exactly one section of
each kind, seeded in ``DEFAULT_SECTION_ORDER``.  Field limits are shared by
the sanitizer and by anything that wants to show remaining characters.

Tags:
    constants, catalog, limits, folio
"""

from __future__ import annotations

from enum import StrEnum


class SectionKey(StrEnum):
    """The fixed content categories of a portfolio."""

    PROFILE = "profile"
    ABOUT = "about"
    FEATURED_PROJECTS = "featuredProjects"
    EXPERIENCE = "experience"
    SKILLS = "skills"
    EDUCATION = "education"
    CERTIFICATIONS = "certifications"
    ACHIEVEMENTS = "achievements"
    CONTACT = "contact"


class TemplateKey(StrEnum):
    """Rendering templates a project can select."""

    CLASSIC = "classic"
    GALLERY = "gallery"
    MINIMAL = "minimal"
    STORY = "story"


class TemplateTier(StrEnum):
    FREE = "free"
    PRO = "pro"


class Visibility(StrEnum):
    """Who may see a published project."""

    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


SECTION_LABELS: dict[SectionKey, str] = {
    SectionKey.PROFILE: "Profile",
    SectionKey.ABOUT: "About",
    SectionKey.FEATURED_PROJECTS: "Featured Projects",
    SectionKey.EXPERIENCE: "Experience",
    SectionKey.SKILLS: "Skills",
    SectionKey.EDUCATION: "Education",
    SectionKey.CERTIFICATIONS: "Certifications",
    SectionKey.ACHIEVEMENTS: "Achievements",
    SectionKey.CONTACT: "Contact",
}

# Seed order 1..9
DEFAULT_SECTION_ORDER: tuple[SectionKey, ...] = tuple(SectionKey)

SINGLETON_SECTIONS: frozenset[SectionKey] = frozenset(
    {SectionKey.PROFILE, SectionKey.ABOUT, SectionKey.SKILLS, SectionKey.CONTACT}
)

TEMPLATE_LABELS: dict[TemplateKey, str] = {
    TemplateKey.CLASSIC: "Case Study",
    TemplateKey.GALLERY: "Gallery",
    TemplateKey.MINIMAL: "Minimal",
    TemplateKey.STORY: "Story",
}

TEMPLATE_TIERS: dict[TemplateKey, TemplateTier] = {
    TemplateKey.CLASSIC: TemplateTier.FREE,
    TemplateKey.GALLERY: TemplateTier.FREE,
    TemplateKey.MINIMAL: TemplateTier.PRO,
    TemplateKey.STORY: TemplateTier.PRO,
}

DEFAULT_TEMPLATE = TemplateKey.CLASSIC
DEFAULT_VISIBILITY = Visibility.PRIVATE
DEFAULT_SLUG = "portfolio"

YEAR_MIN = 1950

MAX_LENGTHS: dict[str, int] = {
    "projectTitle": 60,
    "slug": 80,
    "profileFullName": 60,
    "profileHeadline": 80,
    "profileLocation": 60,
    "profileEmail": 120,
    "profilePhone": 30,
    "profileWebsite": 160,
    "profileGithub": 160,
    "profileLinkedin": 160,
    "profilePhotoKey": 200,
    "profilePhotoUrl": 500,
    "aboutText": 500,
    "projectName": 80,
    "projectDescription": 240,
    "projectLink": 160,
    "bulletLine": 120,
    "tag": 24,
    "experienceRole": 80,
    "experienceCompany": 80,
    "experienceLocation": 60,
    "educationDegree": 80,
    "educationField": 80,
    "educationInstitution": 100,
    "educationGrade": 20,
    "certificationTitle": 80,
    "certificationIssuer": 80,
    "note": 120,
    "ctaTitle": 60,
    "ctaText": 180,
    "linkLabel": 30,
    "linkUrl": 160,
    "skillsGroupName": 40,
    "skillItem": 40,
}

LIMITS: dict[str, int] = {
    "projectBullets": 6,
    "projectTags": 8,
    "experienceBullets": 8,
    "skillItems": 12,
    "skillGroups": 8,
}


def is_section_key(value: str) -> bool:
    return value in SectionKey._value2member_map_


def is_template_key(value: str) -> bool:
    return value in TemplateKey._value2member_map_


def is_pro_template(template_key: str) -> bool:
    """True when *template_key* names a template reserved for paid callers."""
    if not is_template_key(template_key):
        return False
    return TEMPLATE_TIERS[TemplateKey(template_key)] is TemplateTier.PRO


def is_singleton(section_key: str) -> bool:
    """Singleton sections hold at most one item."""
    return is_section_key(section_key) and SectionKey(section_key) in SINGLETON_SECTIONS


__all__ = [
    "DEFAULT_SECTION_ORDER",
    "DEFAULT_SLUG",
    "DEFAULT_TEMPLATE",
    "DEFAULT_VISIBILITY",
    "LIMITS",
    "MAX_LENGTHS",
    "SECTION_LABELS",
    "SINGLETON_SECTIONS",
    "TEMPLATE_LABELS",
    "TEMPLATE_TIERS",
    "YEAR_MIN",
    "SectionKey",
    "TemplateKey",
    "TemplateTier",
    "Visibility",
    "is_pro_template",
    "is_section_key",
    "is_singleton",
    "is_template_key",
]
