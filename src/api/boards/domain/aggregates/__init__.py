"""Domain aggregates for the Boards context.

The Board is the only aggregate root: columns, groups and items live
inside it and are changed only through its methods.
"""

from boards.domain.aggregates.board import Board

__all__ = [
    "Board",
]
