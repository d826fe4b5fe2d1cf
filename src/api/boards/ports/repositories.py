"""Repository protocols (ports) for the Boards bounded context.

A board is persisted as a single unit: the aggregate together with all of
its columns, groups and items. Implementations must never hand out shared
mutable state; every load returns a freshly built aggregate.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from boards.domain.aggregates import Board
from boards.domain.value_objects import BoardId, GroupId, UserId


@runtime_checkable
class IBoardRepository(Protocol):
    """Repository for Board aggregate persistence."""

    async def load(self, board_id: BoardId) -> Board | None:
        """Retrieve a board by its ID.

        Args:
            board_id: The unique identifier of the board

        Returns:
            A new Board aggregate built from the stored state, or None if
            the board does not exist
        """
        ...

    async def save(self, board: Board, expected_version: int | None) -> None:
        """Persist a board as a whole.

        Args:
            board: The Board aggregate to persist
            expected_version: The version the stored board must currently
                have, or None when the board must not exist yet

        Raises:
            VersionConflictError: If the stored version differs from
                expected_version (or the board exists when None was given)
        """
        ...

    async def delete(self, board_id: BoardId) -> bool:
        """Delete a board and everything it owns.

        Returns:
            True if the board was deleted, False if it did not exist
        """
        ...

    async def list_for_member(self, user_id: UserId) -> list[Board]:
        """List boards the user owns or is a member of, oldest first."""
        ...

    async def find_board_id_by_group(self, group_id: GroupId) -> BoardId | None:
        """Resolve the board that owns a group.

        Returns:
            The owning board's ID, or None if no board has the group
        """
        ...
