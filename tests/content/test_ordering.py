"""Tests for ``folio.content.ordering``."""

import pytest

from folio.content.ordering import check_permutation, positions
from folio.core.errors import ValidationError


class TestCheckPermutation:
    def test_accepts_permutation(self):
        check_permutation(["a", "b", "c"], ["c", "a", "b"], "item")

    def test_accepts_empty(self):
        check_permutation([], [], "item")

    def test_missing_id(self):
        with pytest.raises(ValidationError, match="Invalid section order.") as exc:
            check_permutation(["a", "b"], ["a"], "section")
        assert exc.value.context.metadata["missing"] == ["b"]

    def test_unknown_id(self):
        with pytest.raises(ValidationError) as exc:
            check_permutation(["a"], ["a", "z"], "item")
        assert exc.value.context.metadata["unknown"] == ["z"]

    def test_duplicate_id(self):
        with pytest.raises(ValidationError) as exc:
            check_permutation(["a", "b"], ["a", "a", "b"], "item")
        assert exc.value.context.metadata["duplicates"] is True
        assert exc.value.constraint == "permutation"


class TestPositions:
    def test_one_based(self):
        assert list(positions(["c", "a", "b"])) == [("c", 1), ("a", 2), ("b", 3)]
