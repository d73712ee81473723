"""
Pure content transforms for portfolio documents.

Everything in this package is side-effect free: field sanitization, slug
normalization, reorder validation, dashboard aggregation and the public
document projection.  Storage and identity are handled by ``folio.ops``.
"""

from folio.content.constants import SectionKey, TemplateKey, Visibility
from folio.content.public import to_public_document
from folio.content.sanitize import sanitize
from folio.content.slugs import SlugAllocator, slugify

__all__ = [
    "SectionKey",
    "SlugAllocator",
    "TemplateKey",
    "Visibility",
    "sanitize",
    "slugify",
    "to_public_document",
]
