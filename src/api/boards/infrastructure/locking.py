"""Per-board serialization with asyncio locks.

Each board gets its own asyncio.Lock, created on first use and evicted once
no task holds or waits for it, so the registry only tracks boards that are
currently being worked on.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from boards.domain.exceptions import BusyError
from boards.infrastructure.observability import (
    BoardLockProbe,
    DefaultBoardLockProbe,
)


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    # Tasks holding or waiting for the lock
    users: int = 0


class BoardLockRegistry:
    """Reference-counted registry of one asyncio.Lock per board id.

    Only valid within a single event loop; boards are serialized within
    this process only. Writers in other processes are caught by the
    repository's version precondition instead.
    """

    def __init__(self, probe: BoardLockProbe | None = None) -> None:
        self._entries: dict[str, _LockEntry] = {}
        self._probe = probe or DefaultBoardLockProbe()

    @asynccontextmanager
    async def hold(self, board_id: str, timeout: float | None) -> AsyncIterator[None]:
        """Hold the board's lock for the duration of the context.

        Args:
            board_id: Board to serialize on
            timeout: Seconds to wait for the lock, or None to wait forever

        Raises:
            BusyError: If the lock is not acquired within timeout
        """
        entry = self._entries.get(board_id)
        if entry is None:
            entry = self._entries[board_id] = _LockEntry()
        entry.users += 1

        started = time.monotonic()
        try:
            try:
                async with asyncio.timeout(timeout):
                    await entry.lock.acquire()
            except TimeoutError as e:
                self._probe.lock_timed_out(board_id=board_id, timeout=timeout)
                raise BusyError(board_id=board_id, timeout=timeout) from e

            self._probe.lock_acquired(
                board_id=board_id,
                waited_seconds=time.monotonic() - started,
            )
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[board_id]
