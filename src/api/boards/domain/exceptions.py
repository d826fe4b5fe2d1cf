"""Error taxonomy for the Boards bounded context.

Every failure the engine reports to a caller is a BoardError subclass.
All of them are raised before any mutation is applied, so a caller that
catches one can rely on the board being exactly as it was.

Only VersionConflictError and BusyError are safe to retry (after re-reading
state); the rest indicate a caller bug or a genuine access violation.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class BoardError(Exception):
    """Base class for all board engine errors."""

    retryable: bool = False


class NotFoundError(BoardError):
    """Raised when a board, column, group, item, or member is absent.

    Attributes:
        entity: Kind of entity that was looked up (e.g. "group")
        entity_id: The identifier that could not be resolved
    """

    def __init__(self, entity: str, entity_id: Any) -> None:
        self.entity = entity
        self.entity_id = str(entity_id)
        super().__init__(f"{entity.capitalize()} {self.entity_id} not found")


class UnauthorizedError(BoardError):
    """Raised when an actor lacks the capability an operation requires.

    When the actor cannot even read the board the error is ``concealed``:
    its message is identical to the board-not-found message so that the
    existence of the board is not revealed.

    Attributes:
        board_id: The board the check was made against
        capability: The capability that was denied
        concealed: True when the actor may not learn the board exists
    """

    def __init__(self, board_id: Any, capability: str, concealed: bool) -> None:
        self.board_id = str(board_id)
        self.capability = capability
        self.concealed = concealed
        if concealed:
            message = f"Board {self.board_id} not found"
        else:
            message = f"Not permitted to {capability.replace('_', ' ')} on this board"
        super().__init__(message)


class InvalidReorderError(BoardError):
    """Raised when a reorder request is not a permutation of the current order.

    Attributes:
        missing: Entries present in the current sequence but not in the request
        unexpected: Entries in the request that are not in the current sequence
            (includes surplus duplicates)
    """

    def __init__(self, missing: Iterable[Any], unexpected: Iterable[Any]) -> None:
        self.missing = tuple(str(entry) for entry in missing)
        self.unexpected = tuple(str(entry) for entry in unexpected)
        super().__init__(
            "Reorder must be a permutation of the current order "
            f"(missing={list(self.missing)}, unexpected={list(self.unexpected)})"
        )


class InvalidOperationError(BoardError):
    """Raised for semantically invalid requests.

    Examples: removing the owner, moving an item to a group of another board,
    deleting a group with an invalid reassignment target.
    """

    pass


class DuplicateIdError(BoardError):
    """Raised when inserting an identifier that is already in a sequence."""

    def __init__(self, entry: Any) -> None:
        self.entry = str(entry)
        super().__init__(f"{self.entry} is already present in the sequence")


class VersionConflictError(BoardError):
    """Raised when an optimistic-concurrency precondition fails.

    Attributes:
        board_id: The board being written
        expected: The version the writer expected (None for "must not exist")
        actual: The version currently stored, when known
    """

    retryable = True

    def __init__(
        self,
        board_id: Any,
        expected: int | None,
        actual: int | None = None,
    ) -> None:
        self.board_id = str(board_id)
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Board {self.board_id} version conflict "
            f"(expected={expected}, actual={actual})"
        )


class BusyError(BoardError):
    """Raised when the board's serialization scope cannot be acquired in time."""

    retryable = True

    def __init__(self, board_id: Any, timeout: float | None) -> None:
        self.board_id = str(board_id)
        self.timeout = timeout
        super().__init__(
            f"Board {self.board_id} is busy (lock not acquired within {timeout}s)"
        )
