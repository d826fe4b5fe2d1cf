"""In-memory implementation of IBoardRepository.

Boards are kept as JSON text, so every load builds a brand-new aggregate
and no caller can change stored state except through save().
"""

from __future__ import annotations

import json

from boards.domain.aggregates import Board
from boards.domain.exceptions import VersionConflictError
from boards.domain.value_objects import BoardId, GroupId, UserId
from boards.infrastructure.observability import (
    BoardRepositoryProbe,
    DefaultBoardRepositoryProbe,
)
from boards.infrastructure.serializer import BoardDocumentSerializer
from boards.ports.repositories import IBoardRepository


class InMemoryBoardRepository(IBoardRepository):
    """Process-local board storage for development and tests."""

    def __init__(
        self,
        probe: BoardRepositoryProbe | None = None,
        serializer: BoardDocumentSerializer | None = None,
    ) -> None:
        self._documents: dict[str, str] = {}
        self._probe = probe or DefaultBoardRepositoryProbe()
        self._serializer = serializer or BoardDocumentSerializer()

    async def load(self, board_id: BoardId) -> Board | None:
        raw = self._documents.get(board_id.value)
        if raw is None:
            self._probe.board_not_found(board_id=board_id.value)
            return None

        board = self._serializer.from_document(json.loads(raw))
        self._probe.board_retrieved(board_id=board_id.value, version=board.version)
        return board

    async def save(self, board: Board, expected_version: int | None) -> None:
        """Store the board if the stored version matches expected_version.

        Raises:
            VersionConflictError: If the precondition fails
        """
        actual = self._stored_version(board.id)
        if actual != expected_version:
            self._probe.version_conflict(
                board_id=board.id.value,
                expected=expected_version,
                actual=actual,
            )
            raise VersionConflictError(
                board_id=board.id,
                expected=expected_version,
                actual=actual,
            )

        self._documents[board.id.value] = json.dumps(
            self._serializer.to_document(board)
        )
        self._probe.board_saved(board_id=board.id.value, version=board.version)

    async def delete(self, board_id: BoardId) -> bool:
        if self._documents.pop(board_id.value, None) is None:
            return False
        self._probe.board_deleted(board_id=board_id.value)
        return True

    async def list_for_member(self, user_id: UserId) -> list[Board]:
        boards = [
            self._serializer.from_document(json.loads(raw))
            for raw in self._documents.values()
        ]
        return sorted(
            (board for board in boards if board.is_member(user_id)),
            key=lambda board: board.created_at,
        )

    async def find_board_id_by_group(self, group_id: GroupId) -> BoardId | None:
        for board_id, raw in self._documents.items():
            groups = json.loads(raw)["groups"]
            if any(group["id"] == group_id.value for group in groups):
                return BoardId(value=board_id)
        return None

    def _stored_version(self, board_id: BoardId) -> int | None:
        raw = self._documents.get(board_id.value)
        if raw is None:
            return None
        return json.loads(raw)["version"]
