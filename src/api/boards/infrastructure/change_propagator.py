"""In-process change propagation.

Each subscriber owns a bounded asyncio.Queue. Publishing never waits: when
a subscriber's queue is full the event is dropped for that subscriber only
and the drop is reported, so one slow consumer cannot stall commits on the
board or delay other subscribers.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from boards.infrastructure.observability import (
    ChangePropagatorProbe,
    DefaultChangePropagatorProbe,
)
from boards.ports.change_events import ChangeEvent

DEFAULT_QUEUE_SIZE = 100

# Wakes a consumer blocked on an empty queue when the subscription closes
_CLOSED = object()


class BoardSubscription:
    """A subscriber's stream of change events for one board.

    Async iterator over ChangeEvents in commit order. Events already queued
    when the subscription closes are still delivered, then iteration stops.
    """

    def __init__(
        self,
        board_id: str,
        subscriber_id: str,
        queue_size: int,
        on_close: Callable[[BoardSubscription], None],
    ) -> None:
        self.board_id = board_id
        self.subscriber_id = subscriber_id
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=queue_size)
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self, event: ChangeEvent) -> bool:
        """Queue an event without waiting.

        Returns:
            False if the subscription is closed or its queue is full
        """
        if self._closed:
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            return False
        return True

    def terminate(self) -> None:
        """Mark the subscription closed and wake a waiting consumer."""
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            # A full queue means no consumer is waiting on it.
            pass

    async def close(self) -> None:
        """Stop receiving events and release the subscription."""
        self._on_close(self)

    def __aiter__(self) -> BoardSubscription:
        return self

    async def __anext__(self) -> ChangeEvent:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        return item  # type: ignore[return-value]

    async def __aenter__(self) -> BoardSubscription:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


class InMemoryChangePropagator:
    """Fan-out of change events to the subscribers of each board."""

    def __init__(
        self,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        probe: ChangePropagatorProbe | None = None,
    ) -> None:
        if queue_size < 1:
            raise ValueError("queue_size must be at least 1")
        self._queue_size = queue_size
        self._subscriptions: dict[str, set[BoardSubscription]] = {}
        self._probe = probe or DefaultChangePropagatorProbe()

    def subscribe(self, board_id: str, subscriber_id: str) -> BoardSubscription:
        subscription = BoardSubscription(
            board_id=board_id,
            subscriber_id=subscriber_id,
            queue_size=self._queue_size,
            on_close=self._remove,
        )
        subscribers = self._subscriptions.setdefault(board_id, set())
        subscribers.add(subscription)
        self._probe.subscriber_added(
            board_id=board_id,
            subscriber_id=subscriber_id,
            count=self.subscriber_count(board_id),
        )
        return subscription

    def publish(self, board_id: str, event: ChangeEvent) -> None:
        """Offer the event to every subscriber of the board without waiting."""
        delivered = 0
        for subscription in list(self._subscriptions.get(board_id, ())):
            if subscription.offer(event):
                delivered += 1
            else:
                self._probe.event_dropped(
                    board_id=board_id,
                    subscriber_id=subscription.subscriber_id,
                    operation=event.operation.value,
                    version=event.version,
                )
        self._probe.event_published(
            board_id=board_id,
            operation=event.operation.value,
            recipients=delivered,
        )

    def close_board(self, board_id: str) -> None:
        """Terminate every subscription of the board."""
        subscribers = self._subscriptions.pop(board_id, set())
        for subscription in subscribers:
            subscription.terminate()
        self._probe.board_closed(board_id=board_id, subscribers=len(subscribers))

    def subscriber_count(self, board_id: str) -> int:
        return len(self._subscriptions.get(board_id, ()))

    def _remove(self, subscription: BoardSubscription) -> None:
        subscribers = self._subscriptions.get(subscription.board_id)
        if subscribers is not None and subscription in subscribers:
            subscribers.discard(subscription)
            if not subscribers:
                del self._subscriptions[subscription.board_id]
            self._probe.subscriber_removed(
                board_id=subscription.board_id,
                subscriber_id=subscription.subscriber_id,
                count=self.subscriber_count(subscription.board_id),
            )
        subscription.terminate()
