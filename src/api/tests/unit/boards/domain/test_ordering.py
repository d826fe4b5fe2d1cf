"""Unit tests for sequence ordering helpers."""

import pytest

from boards.domain.exceptions import (
    DuplicateIdError,
    InvalidReorderError,
    NotFoundError,
)
from boards.domain.ordering import clamp_position, insert_at, remove, reorder


class TestClampPosition:
    """Tests for clamp_position."""

    def test_none_means_append(self):
        assert clamp_position(None, 3) == 3

    def test_in_range_position_is_kept(self):
        assert clamp_position(1, 3) == 1

    def test_negative_clamps_to_zero(self):
        assert clamp_position(-5, 3) == 0

    def test_past_end_clamps_to_length(self):
        assert clamp_position(99, 3) == 3


class TestInsertAt:
    """Tests for insert_at."""

    def test_appends_by_default(self):
        assert insert_at(["a", "b"], "c") == ["a", "b", "c"]

    def test_inserts_at_position(self):
        assert insert_at(["a", "b"], "c", 0) == ["c", "a", "b"]

    def test_clamps_out_of_range_position(self):
        assert insert_at(["a", "b"], "c", 10) == ["a", "b", "c"]
        assert insert_at(["a", "b"], "c", -1) == ["c", "a", "b"]

    def test_rejects_duplicate(self):
        with pytest.raises(DuplicateIdError):
            insert_at(["a", "b"], "a")

    def test_does_not_modify_input(self):
        sequence = ["a", "b"]
        insert_at(sequence, "c")
        assert sequence == ["a", "b"]


class TestRemove:
    """Tests for remove."""

    def test_removes_entry(self):
        assert remove(["a", "b", "c"], "b") == ["a", "c"]

    def test_missing_entry_raises_not_found(self):
        with pytest.raises(NotFoundError) as exc_info:
            remove(["a"], "z", "item")

        assert exc_info.value.entity == "item"
        assert exc_info.value.entity_id == "z"

    def test_does_not_modify_input(self):
        sequence = ["a", "b"]
        remove(sequence, "a")
        assert sequence == ["a", "b"]


class TestReorder:
    """Tests for reorder."""

    def test_accepts_permutation(self):
        assert reorder(["a", "b", "c"], ["c", "a", "b"]) == ["c", "a", "b"]

    def test_identity_permutation(self):
        assert reorder(["a", "b"], ["a", "b"]) == ["a", "b"]

    def test_empty_sequence(self):
        assert reorder([], []) == []

    def test_rejects_missing_entry(self):
        with pytest.raises(InvalidReorderError) as exc_info:
            reorder(["a", "b", "c"], ["a", "b"])

        assert exc_info.value.missing == ("c",)
        assert exc_info.value.unexpected == ()

    def test_rejects_unknown_entry(self):
        with pytest.raises(InvalidReorderError) as exc_info:
            reorder(["a", "b"], ["a", "b", "x"])

        assert exc_info.value.unexpected == ("x",)

    def test_rejects_duplicates_even_with_same_set(self):
        with pytest.raises(InvalidReorderError) as exc_info:
            reorder(["a", "b"], ["a", "a", "b"])

        assert exc_info.value.unexpected == ("a",)

    def test_failure_leaves_sequence_unchanged(self):
        sequence = ["a", "b", "c"]
        with pytest.raises(InvalidReorderError):
            reorder(sequence, ["c", "b"])

        assert sequence == ["a", "b", "c"]
