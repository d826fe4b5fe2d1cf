"""Observability probes for the Board aggregate.

Domain probes for Board following the Domain Oriented Observability pattern.
Probes emit structured logs with domain-specific context for the structural
operations whose effects reach beyond a single entity (membership changes,
item moves, group cascades).

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import Protocol

import structlog


class BoardProbe(Protocol):
    """Protocol for board aggregate observability probes."""

    def member_added(self, board_id: str, user_id: str) -> None:
        """Probe emitted when a member is added to a board."""
        ...

    def member_removed(self, board_id: str, user_id: str) -> None:
        """Probe emitted when a member is removed from a board."""
        ...

    def item_moved(
        self,
        board_id: str,
        item_id: str,
        source_group_id: str,
        target_group_id: str,
        position: int,
    ) -> None:
        """Probe emitted when an item is moved between or within groups."""
        ...

    def group_deleted(
        self,
        board_id: str,
        group_id: str,
        policy: str,
        affected_items: int,
    ) -> None:
        """Probe emitted when a group is deleted with its cascade policy.

        Args:
            board_id: The board ID
            group_id: The deleted group ID
            policy: "delete_items" or "reassign"
            affected_items: Number of items deleted or reassigned
        """
        ...

    def access_denied(self, board_id: str, user_id: str, capability: str) -> None:
        """Probe emitted when an actor is denied a capability on a board."""
        ...


class DefaultBoardProbe:
    """Default implementation of BoardProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._logger = logger or structlog.get_logger()

    def member_added(self, board_id: str, user_id: str) -> None:
        """Log member addition with structured context."""
        self._logger.info("board_member_added", board_id=board_id, user_id=user_id)

    def member_removed(self, board_id: str, user_id: str) -> None:
        """Log member removal with structured context."""
        self._logger.info("board_member_removed", board_id=board_id, user_id=user_id)

    def item_moved(
        self,
        board_id: str,
        item_id: str,
        source_group_id: str,
        target_group_id: str,
        position: int,
    ) -> None:
        """Log item move with structured context."""
        self._logger.info(
            "board_item_moved",
            board_id=board_id,
            item_id=item_id,
            source_group_id=source_group_id,
            target_group_id=target_group_id,
            position=position,
        )

    def group_deleted(
        self,
        board_id: str,
        group_id: str,
        policy: str,
        affected_items: int,
    ) -> None:
        """Log group deletion with structured context."""
        self._logger.info(
            "board_group_deleted",
            board_id=board_id,
            group_id=group_id,
            policy=policy,
            affected_items=affected_items,
        )

    def access_denied(self, board_id: str, user_id: str, capability: str) -> None:
        """Log access denial with structured context."""
        self._logger.warning(
            "board_access_denied",
            board_id=board_id,
            user_id=user_id,
            capability=capability,
        )
