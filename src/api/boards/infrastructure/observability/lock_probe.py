"""Domain probe for per-board lock operations."""

from __future__ import annotations

from typing import Protocol

import structlog


class BoardLockProbe(Protocol):
    """Domain probe for board serialization scopes."""

    def lock_acquired(self, board_id: str, waited_seconds: float) -> None:
        """Record that a board's lock was acquired."""
        ...

    def lock_timed_out(self, board_id: str, timeout: float | None) -> None:
        """Record that a board's lock could not be acquired in time."""
        ...


class DefaultBoardLockProbe:
    """Default implementation of BoardLockProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger()

    def lock_acquired(self, board_id: str, waited_seconds: float) -> None:
        self._logger.debug(
            "board_lock_acquired",
            board_id=board_id,
            waited_seconds=round(waited_seconds, 4),
        )

    def lock_timed_out(self, board_id: str, timeout: float | None) -> None:
        self._logger.warning("board_lock_timed_out", board_id=board_id, timeout=timeout)
