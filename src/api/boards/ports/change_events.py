"""Change propagation ports for the Boards bounded context.

Committed board mutations are published as ChangeEvents to every
subscriber of the board. Events carry identifiers only; subscribers
re-read the board for current state.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from boards.domain.value_objects import BoardOperation


@dataclass(frozen=True)
class ChangeEvent:
    """Notification of one committed mutation.

    Attributes:
        board_id: Board the mutation was applied to
        operation: Name of the committed operation
        entity_ids: Identifiers of the entities the operation affected
        version: Board version produced by the mutation
        occurred_at: When the mutation was committed
    """

    board_id: str
    operation: BoardOperation
    entity_ids: tuple[str, ...]
    version: int
    occurred_at: datetime


@runtime_checkable
class IBoardSubscription(Protocol):
    """A subscriber's stream of change events for one board.

    Iterating yields events in commit order until the subscription is
    closed, either by the subscriber or because the board was deleted.
    """

    board_id: str
    subscriber_id: str

    def __aiter__(self) -> AsyncIterator[ChangeEvent]: ...

    async def __anext__(self) -> ChangeEvent: ...

    async def close(self) -> None:
        """Stop receiving events and release the subscription."""
        ...


@runtime_checkable
class IChangePropagator(Protocol):
    """Fan-out of change events to the subscribers of a board."""

    def subscribe(self, board_id: str, subscriber_id: str) -> IBoardSubscription:
        """Register a subscriber for a board's change events."""
        ...

    def publish(self, board_id: str, event: ChangeEvent) -> None:
        """Deliver an event to every current subscriber of the board.

        Must not block; it is called while the board's lock is held.
        """
        ...

    def close_board(self, board_id: str) -> None:
        """Terminate every subscription of a board."""
        ...
