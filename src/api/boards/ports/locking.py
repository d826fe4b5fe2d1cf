"""Serialization port for the Boards bounded context."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class IBoardLockRegistry(Protocol):
    """Provides one exclusive scope per board.

    Scopes of different boards are independent; holding one never delays
    work on another board.
    """

    def hold(
        self, board_id: str, timeout: float | None
    ) -> AbstractAsyncContextManager[None]:
        """Hold the board's exclusive scope for the duration of the context.

        Args:
            board_id: Board to serialize on
            timeout: Seconds to wait for acquisition, or None to wait forever

        Raises:
            BusyError: If the scope is not acquired within timeout
        """
        ...
