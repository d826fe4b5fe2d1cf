"""Protocol for board store observability.

Defines the interface for domain probes that capture application-level
events for board operations.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class BoardStoreProbe(Protocol):
    """Domain probe for board store operations."""

    def board_created(self, board_id: str, owner_id: str, title: str) -> None:
        """Record board creation."""
        ...

    def board_deleted(self, board_id: str, user_id: str) -> None:
        """Record board deletion."""
        ...

    def mutation_committed(
        self,
        board_id: str,
        operation: str,
        version: int,
        user_id: str,
    ) -> None:
        """Record a committed board mutation."""
        ...

    def mutation_rejected(
        self,
        board_id: str,
        operation: str,
        user_id: str,
        error: str,
    ) -> None:
        """Record a mutation that was rejected before anything was persisted."""
        ...

    def boards_listed(self, user_id: str, count: int) -> None:
        """Record boards listed for a user."""
        ...

    def subscription_opened(self, board_id: str, user_id: str) -> None:
        """Record a new change subscription."""
        ...


class DefaultBoardStoreProbe:
    """Default implementation of BoardStoreProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger()

    def board_created(self, board_id: str, owner_id: str, title: str) -> None:
        self._logger.info(
            "board_created",
            board_id=board_id,
            owner_id=owner_id,
            title=title,
        )

    def board_deleted(self, board_id: str, user_id: str) -> None:
        self._logger.info("board_deleted", board_id=board_id, user_id=user_id)

    def mutation_committed(
        self,
        board_id: str,
        operation: str,
        version: int,
        user_id: str,
    ) -> None:
        self._logger.debug(
            "board_mutation_committed",
            board_id=board_id,
            operation=operation,
            version=version,
            user_id=user_id,
        )

    def mutation_rejected(
        self,
        board_id: str,
        operation: str,
        user_id: str,
        error: str,
    ) -> None:
        self._logger.warning(
            "board_mutation_rejected",
            board_id=board_id,
            operation=operation,
            user_id=user_id,
            error=error,
        )

    def boards_listed(self, user_id: str, count: int) -> None:
        self._logger.debug("boards_listed", user_id=user_id, count=count)

    def subscription_opened(self, board_id: str, user_id: str) -> None:
        self._logger.info(
            "board_subscription_opened",
            board_id=board_id,
            user_id=user_id,
        )
