"""
Slug normalization and unique allocation.

``slugify`` is a pure normalizer.  ``SlugAllocator`` turns a base text into a
slug nobody else holds by probing storage for ``base``, ``base-2``,
``base-3`` ...  The probe is only an optimization: two callers can both see a
candidate as free, so :meth:`SlugAllocator.allocate_and_apply` also treats a
uniqueness violation raised by the write itself as "taken" and moves on to
the next suffix.

Examples:
    >>> slugify("  My Site!! ")
    'my-site'
    >>> slugify("***")
    'portfolio'
    >>> taken = {"my-site"}
    >>> SlugAllocator(lambda slug, exclude: slug in taken).allocate("My Site")
    'my-site-2'

Tags:
    slug, uniqueness, retry, folio
"""

from __future__ import annotations

import itertools
import re
from collections.abc import Callable, Iterator
from typing import TypeVar

from folio.content.constants import DEFAULT_SLUG, MAX_LENGTHS
from folio.core.errors import ConflictError, IntegrityError
from folio.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

MAX_SLUG_ATTEMPTS = 50
SLUG_MAX_LENGTH = MAX_LENGTHS["slug"]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str | None) -> str:
    """Lower-case, dash-separated, URL-safe form of *text*."""
    slug = _NON_ALNUM.sub("-", (text or "").strip().lower()).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].rstrip("-")
    return slug or DEFAULT_SLUG


def _with_suffix(base: str, n: int) -> str:
    if n == 1:
        return base
    suffix = f"-{n}"
    head = base[: SLUG_MAX_LENGTH - len(suffix)].rstrip("-") or DEFAULT_SLUG
    return f"{head}{suffix}"


class SlugAllocator:
    """Allocates slugs against a shared uniqueness constraint.

    Args:
        is_taken: ``is_taken(slug, exclude_id)`` returns True when another
            project (not ``exclude_id``) already holds ``slug``.
        max_attempts: Upper bound on uniqueness violations raised by the
            write in :meth:`allocate_and_apply`.  The probe itself walks
            ``-2``, ``-3`` ... until it finds a free candidate.
    """

    def __init__(
        self,
        is_taken: Callable[[str, str | None], bool],
        *,
        max_attempts: int = MAX_SLUG_ATTEMPTS,
    ) -> None:
        self._is_taken = is_taken
        self._max_attempts = max_attempts

    def candidates(self, base_text: str | None) -> Iterator[str]:
        base = slugify(base_text)
        for n in itertools.count(1):
            yield _with_suffix(base, n)

    def _free_candidates(self, base_text: str | None, exclude_project_id: str | None) -> Iterator[str]:
        for candidate in self.candidates(base_text):
            if not self._is_taken(candidate, exclude_project_id):
                yield candidate

    def allocate(self, base_text: str | None, exclude_project_id: str | None = None) -> str:
        """First candidate the probe reports as free."""
        return next(self._free_candidates(base_text, exclude_project_id))

    def allocate_and_apply(
        self,
        base_text: str | None,
        apply: Callable[[str], T],
        exclude_project_id: str | None = None,
    ) -> str:
        """Allocate a slug and write it with *apply*, retrying on collisions.

        *apply* performs the insert/update carrying the slug.  When it raises
        :class:`IntegrityError` on the slug column the next free candidate is
        tried, at most ``max_attempts`` times.  Violations on other columns
        propagate.
        """
        collisions = 0
        for candidate in self._free_candidates(base_text, exclude_project_id):
            try:
                apply(candidate)
            except IntegrityError as exc:
                if exc.column not in (None, "slug"):
                    raise
                collisions += 1
                logger.warning("slug.collision", slug=candidate, column=exc.column, attempt=collisions)
                if collisions >= self._max_attempts:
                    break
                continue
            return candidate
        raise ConflictError(f"Could not find a free slug for '{slugify(base_text)}'.")


__all__ = ["MAX_SLUG_ATTEMPTS", "SlugAllocator", "slugify"]
