"""
Test support utilities for folio tests.

This module provides helper functions and utilities that don't fit
as pytest fixtures but are useful across multiple test files.
"""

from __future__ import annotations

from typing import Any

from folio.core.models import Item, Project, Section


def make_project(**overrides: Any) -> Project:
    """A published public project with fixed timestamps."""
    base = {
        "id": "p1",
        "user_id": "u1",
        "title": "My Site",
        "slug": "my-site",
        "visibility": "public",
        "is_published": True,
        "published_at": "2026-10-01T09:30:00+00:00",
        "template_key": "classic",
        "created_at": "2026-09-01T00:00:00+00:00",
        "updated_at": "2026-10-17T08:00:00+00:00",
    }
    base.update(overrides)
    return Project(**base)


def make_section(
    key: str,
    order: int,
    items: list[dict[str, Any]] | None = None,
    *,
    enabled: bool = True,
) -> Section:
    """Section *key* at position *order* holding one item per payload in *items*."""
    return Section(
        id=f"s-{key}",
        project_id="p1",
        key=key,
        label=key.title(),
        order=order,
        is_enabled=enabled,
        items=[
            Item(id=f"i-{key}-{n}", section_id=f"s-{key}", order=n, data=data)
            for n, data in enumerate(items or [], start=1)
        ],
    )


def section_of(detail: Any, key: str) -> Section:
    """The section of kind *key* in a ``ProjectDetail``."""
    return next(s for s in detail.sections if s.key == key)


def assert_dict_subset(actual: dict, expected: dict, path: str = "") -> None:
    """
    Assert that expected is a subset of actual (recursive).

    Args:
        actual: The full dictionary
        expected: The expected subset
        path: Current path (for error messages)
    """
    for key, expected_value in expected.items():
        current_path = f"{path}.{key}" if path else key
        assert key in actual, f"Missing key at {current_path}"
        actual_value = actual[key]
        if isinstance(expected_value, dict) and isinstance(actual_value, dict):
            assert_dict_subset(actual_value, expected_value, current_path)
        else:
            assert actual_value == expected_value, (
                f"Mismatch at {current_path}: expected {expected_value!r}, got {actual_value!r}"
            )


def fail_on_call(func: Any, call_number: int, exc: Exception | None = None) -> Any:
    """Wrap *func* so its *call_number*-th call raises instead of running."""
    calls = 0

    def wrapper(*args: Any, **kwargs: Any) -> Any:
        nonlocal calls
        calls += 1
        if calls == call_number:
            raise exc or RuntimeError("write failed")
        return func(*args, **kwargs)

    return wrapper
