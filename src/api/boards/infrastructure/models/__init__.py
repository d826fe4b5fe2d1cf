"""SQLAlchemy ORM models for the Boards bounded context."""

from boards.infrastructure.models.board import (
    BoardGroupModel,
    BoardMemberModel,
    BoardModel,
)

__all__ = [
    "BoardGroupModel",
    "BoardMemberModel",
    "BoardModel",
]
