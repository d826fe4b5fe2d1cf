"""Domain-Oriented Observability for the Boards application layer."""

from boards.application.observability.board_store_probe import (
    BoardStoreProbe,
    DefaultBoardStoreProbe,
)

__all__ = [
    "BoardStoreProbe",
    "DefaultBoardStoreProbe",
]
