"""Domain probe for change propagation.

Records subscriber lifecycle and delivery failures. Dropped events are
logged as warnings because the affected subscriber must re-read the board.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class ChangePropagatorProbe(Protocol):
    """Domain probe for change event fan-out."""

    def subscriber_added(self, board_id: str, subscriber_id: str, count: int) -> None:
        """Record a new subscriber and the board's subscriber count."""
        ...

    def subscriber_removed(self, board_id: str, subscriber_id: str, count: int) -> None:
        """Record a removed subscriber and the board's remaining count."""
        ...

    def event_published(self, board_id: str, operation: str, recipients: int) -> None:
        """Record that an event was delivered to the board's subscribers."""
        ...

    def event_dropped(
        self,
        board_id: str,
        subscriber_id: str,
        operation: str,
        version: int,
    ) -> None:
        """Record that a subscriber's queue was full and an event was dropped."""
        ...

    def board_closed(self, board_id: str, subscribers: int) -> None:
        """Record that all subscriptions of a board were terminated."""
        ...


class DefaultChangePropagatorProbe:
    """Default implementation of ChangePropagatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger()

    def subscriber_added(self, board_id: str, subscriber_id: str, count: int) -> None:
        self._logger.info(
            "board_subscriber_added",
            board_id=board_id,
            subscriber_id=subscriber_id,
            count=count,
        )

    def subscriber_removed(self, board_id: str, subscriber_id: str, count: int) -> None:
        self._logger.info(
            "board_subscriber_removed",
            board_id=board_id,
            subscriber_id=subscriber_id,
            count=count,
        )

    def event_published(self, board_id: str, operation: str, recipients: int) -> None:
        self._logger.debug(
            "board_change_published",
            board_id=board_id,
            operation=operation,
            recipients=recipients,
        )

    def event_dropped(
        self,
        board_id: str,
        subscriber_id: str,
        operation: str,
        version: int,
    ) -> None:
        self._logger.warning(
            "board_change_dropped",
            board_id=board_id,
            subscriber_id=subscriber_id,
            operation=operation,
            version=version,
        )

    def board_closed(self, board_id: str, subscribers: int) -> None:
        self._logger.info(
            "board_subscriptions_closed",
            board_id=board_id,
            subscribers=subscribers,
        )
