"""
Reorder protocol for sections and items.

A reorder request must name every current child of the container exactly
once.  Validation happens before any write; the repositories then apply all
positions and the parent touch in one transaction, so ``order`` stays a
dense ``1..N`` permutation.

Examples:
    >>> check_permutation(["a", "b", "c"], ["c", "a", "b"], "item")
    >>> list(positions(["c", "a", "b"]))
    [('c', 1), ('a', 2), ('b', 3)]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from folio.core.errors import ValidationError


def check_permutation(existing_ids: Iterable[str], ordered_ids: Sequence[str], what: str) -> None:
    """Raise ``ValidationError`` unless *ordered_ids* permutes *existing_ids*.

    Args:
        existing_ids: Ids of all children currently in the container.
        ordered_ids: Requested order.
        what: ``"section"`` or ``"item"``, used in the message.
    """
    existing = set(existing_ids)
    requested = list(ordered_ids)
    unknown = [i for i in requested if i not in existing]
    missing = sorted(existing.difference(requested))
    duplicates = len(requested) != len(set(requested))
    if unknown or missing or duplicates:
        raise ValidationError(
            f"Invalid {what} order.",
            field=f"ordered_{what}_ids",
            constraint="permutation",
        ).with_context(unknown=unknown, missing=missing, duplicates=duplicates)


def positions(ordered_ids: Sequence[str]) -> Iterator[tuple[str, int]]:
    """``(id, 1-based position)`` pairs in request order."""
    for index, child_id in enumerate(ordered_ids):
        yield child_id, index + 1


__all__ = ["check_permutation", "positions"]
