"""Domain-Oriented Observability for the Boards domain layer."""

from boards.domain.observability.board_probe import BoardProbe, DefaultBoardProbe

__all__ = [
    "BoardProbe",
    "DefaultBoardProbe",
]
