"""Ports (interfaces) for the Boards bounded context.

Ports define the contracts for persistence, serialization and change
propagation without specifying implementation details.
"""

from boards.ports.change_events import (
    ChangeEvent,
    IBoardSubscription,
    IChangePropagator,
)
from boards.ports.locking import IBoardLockRegistry
from boards.ports.repositories import IBoardRepository

__all__ = [
    "ChangeEvent",
    "IBoardLockRegistry",
    "IBoardRepository",
    "IBoardSubscription",
    "IChangePropagator",
]
