"""Domain probe for board repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to board persistence.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class BoardRepositoryProbe(Protocol):
    """Domain probe for board repository operations."""

    def board_saved(self, board_id: str, version: int) -> None:
        """Record that a board was successfully saved."""
        ...

    def board_retrieved(self, board_id: str, version: int) -> None:
        """Record that a board was retrieved."""
        ...

    def board_not_found(self, board_id: str) -> None:
        """Record that a board was not found."""
        ...

    def board_deleted(self, board_id: str) -> None:
        """Record that a board was deleted."""
        ...

    def version_conflict(
        self,
        board_id: str,
        expected: int | None,
        actual: int | None,
    ) -> None:
        """Record that a save was rejected by the version precondition."""
        ...


class DefaultBoardRepositoryProbe:
    """Default implementation of BoardRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger()

    def board_saved(self, board_id: str, version: int) -> None:
        self._logger.info("board_saved", board_id=board_id, version=version)

    def board_retrieved(self, board_id: str, version: int) -> None:
        self._logger.debug("board_retrieved", board_id=board_id, version=version)

    def board_not_found(self, board_id: str) -> None:
        self._logger.debug("board_not_found", board_id=board_id)

    def board_deleted(self, board_id: str) -> None:
        self._logger.info("board_deleted_from_storage", board_id=board_id)

    def version_conflict(
        self,
        board_id: str,
        expected: int | None,
        actual: int | None,
    ) -> None:
        self._logger.warning(
            "board_version_conflict",
            board_id=board_id,
            expected=expected,
            actual=actual,
        )
