"""Ordering helpers for identifier sequences.

Pure functions used by the Board aggregate for every ordered collection it
owns (columns, groups, the item sequence of each group). None of them
modify their input; each returns a new list.

Membership changes and ordering changes are kept apart: ``insert_at`` and
``remove`` change which entries are present, ``reorder`` only changes their
order and rejects any request that would also add or drop an entry.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Hashable, Sequence
from typing import TypeVar

from boards.domain.exceptions import (
    DuplicateIdError,
    InvalidReorderError,
    NotFoundError,
)

T = TypeVar("T", bound=Hashable)


def clamp_position(position: int | None, length: int) -> int:
    """Resolve an insertion index against a sequence of the given length.

    ``None`` means append. Out-of-range positions clamp to the nearest end.
    """
    if position is None:
        return length
    return max(0, min(position, length))


def insert_at(sequence: Sequence[T], entry: T, position: int | None = None) -> list[T]:
    """Insert ``entry`` at ``position`` (0-based, clamped), appending by default.

    Raises:
        DuplicateIdError: If entry is already present
    """
    if entry in sequence:
        raise DuplicateIdError(entry)

    result = list(sequence)
    result.insert(clamp_position(position, len(result)), entry)
    return result


def remove(sequence: Sequence[T], entry: T, entity: str = "entry") -> list[T]:
    """Remove ``entry`` from the sequence.

    Args:
        sequence: Current order
        entry: Identifier to remove
        entity: Entity name used in the error message

    Raises:
        NotFoundError: If entry is absent
    """
    if entry not in sequence:
        raise NotFoundError(entity, entry)

    return [existing for existing in sequence if existing != entry]


def reorder(sequence: Sequence[T], new_order: Sequence[T]) -> list[T]:
    """Validate that ``new_order`` is a permutation of ``sequence`` and return it.

    Raises:
        InvalidReorderError: If the multisets differ; carries the missing and
            unexpected entries
    """
    current = Counter(sequence)
    requested = Counter(new_order)
    if current != requested:
        missing = list((current - requested).elements())
        unexpected = list((requested - current).elements())
        raise InvalidReorderError(missing=missing, unexpected=unexpected)

    return list(new_order)
