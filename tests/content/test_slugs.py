"""Tests for ``folio.content.slugs`` - normalization and collision-safe allocation."""

from __future__ import annotations

import pytest

from folio.content.slugs import SlugAllocator, slugify
from folio.core.errors import ConflictError, IntegrityError


class TestSlugify:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("My Site", "my-site"),
            ("  My Site!! ", "my-site"),
            ("Hello---World", "hello-world"),
            ("2026 Portfolio", "2026-portfolio"),
        ],
    )
    def test_normalizes(self, text, expected):
        assert slugify(text) == expected

    @pytest.mark.parametrize("text", ["", "***", None, "   "])
    def test_fallback(self, text):
        assert slugify(text) == "portfolio"

    def test_capped_length(self):
        slug = slugify("a" * 200)
        assert len(slug) == 80

    def test_idempotent(self):
        assert slugify(slugify("Some Title")) == "some-title"


class TestAllocate:
    def test_free_base(self):
        assert SlugAllocator(lambda slug, exclude: False).allocate("My Site") == "my-site"

    def test_suffixes_in_sequence(self):
        taken = {"my-site", "my-site-2"}
        assert SlugAllocator(lambda slug, exclude: slug in taken).allocate("My Site") == "my-site-3"

    def test_exclude_is_forwarded(self):
        seen = []

        def is_taken(slug, exclude):
            seen.append(exclude)
            return False

        SlugAllocator(is_taken).allocate("x", exclude_project_id="p1")
        assert seen == ["p1"]

    def test_suffix_respects_length_cap(self):
        base = "a" * 80
        slug = SlugAllocator(lambda slug, exclude: slug == base).allocate(base)
        assert len(slug) == 80
        assert slug.endswith("-2")

    def test_probe_is_not_bounded_by_max_attempts(self):
        taken = {"x"} | {f"x-{n}" for n in range(2, 121)}
        allocator = SlugAllocator(lambda slug, exclude: slug in taken, max_attempts=3)
        assert allocator.allocate("x") == "x-121"


class TestAllocateAndApply:
    def test_retries_on_slug_violation(self):
        written = []

        def apply(slug):
            if slug == "my-site":
                raise IntegrityError("UNIQUE constraint failed: portfolio_projects.slug", column="slug")
            written.append(slug)

        slug = SlugAllocator(lambda slug, exclude: False).allocate_and_apply("My Site", apply)
        assert slug == "my-site-2"
        assert written == ["my-site-2"]

    def test_other_column_violation_propagates(self):
        def apply(slug):
            raise IntegrityError("UNIQUE constraint failed: portfolio_projects.id", column="id")

        with pytest.raises(IntegrityError):
            SlugAllocator(lambda slug, exclude: False).allocate_and_apply("x", apply)

    def test_exhausted(self):
        def apply(slug):
            raise IntegrityError("taken", column="slug")

        with pytest.raises(ConflictError):
            SlugAllocator(lambda slug, exclude: False, max_attempts=2).allocate_and_apply("x", apply)

    def test_only_write_collisions_count_toward_limit(self):
        taken = {"x"} | {f"x-{n}" for n in range(2, 60)}
        attempts = []

        def apply(slug):
            attempts.append(slug)
            if len(attempts) == 1:
                raise IntegrityError("taken", column="slug")

        allocator = SlugAllocator(lambda slug, exclude: slug in taken, max_attempts=2)
        assert allocator.allocate_and_apply("x", apply) == "x-61"
        assert attempts == ["x-60", "x-61"]
