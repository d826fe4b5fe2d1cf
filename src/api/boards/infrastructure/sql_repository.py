"""PostgreSQL implementation of IBoardRepository.

Each save runs in its own transaction: the board row is inserted or
conditionally updated on its version, then the member and group index
rows are rewritten. A writer in another process that committed first
makes the conditional update match no row, which surfaces as a
VersionConflictError.
"""

from __future__ import annotations

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from boards.domain.aggregates import Board
from boards.domain.exceptions import VersionConflictError
from boards.domain.value_objects import BoardId, GroupId, UserId
from boards.infrastructure.models import (
    BoardGroupModel,
    BoardMemberModel,
    BoardModel,
)
from boards.infrastructure.observability import (
    BoardRepositoryProbe,
    DefaultBoardRepositoryProbe,
)
from boards.infrastructure.serializer import BoardDocumentSerializer
from boards.ports.repositories import IBoardRepository
from infrastructure.database.models import Base


async def create_tables(engine: AsyncEngine) -> None:
    """Create the board tables if they do not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class SqlBoardRepository(IBoardRepository):
    """Repository storing Board aggregates as JSON documents in PostgreSQL."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: BoardRepositoryProbe | None = None,
        serializer: BoardDocumentSerializer | None = None,
    ) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: Factory for sessions; each call runs in its own
            probe: Optional domain probe for observability
            serializer: Optional document serializer for testability
        """
        self._session_factory = session_factory
        self._probe = probe or DefaultBoardRepositoryProbe()
        self._serializer = serializer or BoardDocumentSerializer()

    async def load(self, board_id: BoardId) -> Board | None:
        async with self._session_factory() as session:
            model = await session.get(BoardModel, board_id.value)

        if model is None:
            self._probe.board_not_found(board_id=board_id.value)
            return None

        board = self._serializer.from_document(model.document)
        self._probe.board_retrieved(board_id=board_id.value, version=board.version)
        return board

    async def save(self, board: Board, expected_version: int | None) -> None:
        """Persist the board if the stored version matches expected_version.

        Raises:
            VersionConflictError: If the precondition fails
        """
        document = self._serializer.to_document(board)

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    if expected_version is None:
                        existing = await session.get(BoardModel, board.id.value)
                        if existing is not None:
                            self._conflict(board, expected_version, existing.version)
                        session.add(
                            BoardModel(
                                id=board.id.value,
                                owner_id=board.owner_id.value,
                                title=board.title,
                                version=board.version,
                                document=document,
                                created_at=board.created_at,
                                updated_at=board.updated_at,
                            )
                        )
                    else:
                        result = await session.execute(
                            update(BoardModel)
                            .where(
                                BoardModel.id == board.id.value,
                                BoardModel.version == expected_version,
                            )
                            .values(
                                title=board.title,
                                version=board.version,
                                document=document,
                                updated_at=board.updated_at,
                            )
                        )
                        if result.rowcount == 0:
                            actual = await session.scalar(
                                select(BoardModel.version).where(
                                    BoardModel.id == board.id.value
                                )
                            )
                            self._conflict(board, expected_version, actual)

                    await self._rewrite_indexes(session, board)
        except IntegrityError as e:
            # Concurrent insert of the same board id
            self._probe.version_conflict(
                board_id=board.id.value,
                expected=expected_version,
                actual=None,
            )
            raise VersionConflictError(
                board_id=board.id,
                expected=expected_version,
            ) from e

        self._probe.board_saved(board_id=board.id.value, version=board.version)

    async def delete(self, board_id: BoardId) -> bool:
        async with self._session_factory() as session:
            async with session.begin():
                await session.execute(
                    delete(BoardMemberModel).where(
                        BoardMemberModel.board_id == board_id.value
                    )
                )
                await session.execute(
                    delete(BoardGroupModel).where(
                        BoardGroupModel.board_id == board_id.value
                    )
                )
                result = await session.execute(
                    delete(BoardModel).where(BoardModel.id == board_id.value)
                )

        if result.rowcount == 0:
            return False
        self._probe.board_deleted(board_id=board_id.value)
        return True

    async def list_for_member(self, user_id: UserId) -> list[Board]:
        member_boards = select(BoardMemberModel.board_id).where(
            BoardMemberModel.user_id == user_id.value
        )
        stmt = (
            select(BoardModel)
            .where(
                or_(
                    BoardModel.owner_id == user_id.value,
                    BoardModel.id.in_(member_boards),
                )
            )
            .order_by(BoardModel.created_at)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            models = result.scalars().all()

        return [self._serializer.from_document(model.document) for model in models]

    async def find_board_id_by_group(self, group_id: GroupId) -> BoardId | None:
        async with self._session_factory() as session:
            board_id = await session.scalar(
                select(BoardGroupModel.board_id).where(
                    BoardGroupModel.group_id == group_id.value
                )
            )
        return BoardId(value=board_id) if board_id is not None else None

    async def _rewrite_indexes(self, session: AsyncSession, board: Board) -> None:
        await session.execute(
            delete(BoardMemberModel).where(BoardMemberModel.board_id == board.id.value)
        )
        await session.execute(
            delete(BoardGroupModel).where(BoardGroupModel.board_id == board.id.value)
        )
        session.add_all(
            [
                BoardMemberModel(board_id=board.id.value, user_id=member.value)
                for member in board.member_ids
            ]
            + [
                BoardGroupModel(group_id=group.id.value, board_id=board.id.value)
                for group in board.groups
            ]
        )

    def _conflict(
        self,
        board: Board,
        expected_version: int | None,
        actual: int | None,
    ) -> None:
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
