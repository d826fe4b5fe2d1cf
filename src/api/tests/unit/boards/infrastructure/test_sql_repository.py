"""Unit tests for SqlBoardRepository.

The session factory is mocked; these tests verify which statements and
model instances the repository hands to the session.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from boards.domain.aggregates import Board
from boards.domain.exceptions import VersionConflictError
from boards.domain.value_objects import BoardId, GroupId, UserId
from boards.infrastructure.models import BoardGroupModel, BoardMemberModel, BoardModel
from boards.infrastructure.serializer import BoardDocumentSerializer
from boards.infrastructure.sql_repository import SqlBoardRepository, create_tables
from boards.ports.repositories import IBoardRepository

OWNER = UserId(value="owner-1")


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def mock_session_factory(mock_session):
    """Create a session factory whose sessions are async context managers."""
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=mock_session)
    context.__aexit__ = AsyncMock(return_value=None)
    return MagicMock(return_value=context)


@pytest.fixture
def mock_probe():
    return MagicMock()


@pytest.fixture
def repository(mock_session_factory, mock_probe) -> SqlBoardRepository:
    return SqlBoardRepository(session_factory=mock_session_factory, probe=mock_probe)


@pytest.fixture
def board() -> Board:
    board = Board.create(title="Sprint 1", owner_id=OWNER)
    board.add_member(UserId(value="member-1"))
    board.collect_events()
    return board


class TestProtocolCompliance:
    def test_implements_protocol(self, repository):
        assert isinstance(repository, IBoardRepository)


class TestLoad:
    """Tests for load."""

    @pytest.mark.asyncio
    async def test_returns_none_when_missing(self, repository, mock_session, mock_probe):
        mock_session.get.return_value = None
        board_id = BoardId.generate()

        assert await repository.load(board_id) is None
        mock_probe.board_not_found.assert_called_once_with(board_id=board_id.value)

    @pytest.mark.asyncio
    async def test_rebuilds_board_from_document(self, repository, mock_session, board):
        mock_session.get.return_value = MagicMock(
            document=BoardDocumentSerializer().to_document(board)
        )

        loaded = await repository.load(board.id)

        mock_session.get.assert_awaited_once_with(BoardModel, board.id.value)
        assert loaded.id == board.id
        assert loaded.member_ids == {UserId(value="member-1")}
        assert loaded.version == board.version


class TestSave:
    """Tests for save."""

    @pytest.mark.asyncio
    async def test_inserts_new_board_with_indexes(
        self, repository, mock_session, mock_probe, board
    ):
        mock_session.get.return_value = None

        await repository.save(board, expected_version=None)

        added = mock_session.add.call_args[0][0]
        assert isinstance(added, BoardModel)
        assert added.id == board.id.value
        assert added.owner_id == "owner-1"
        assert added.version == board.version
        assert added.document["title"] == "Sprint 1"

        index_rows = mock_session.add_all.call_args[0][0]
        members = [row for row in index_rows if isinstance(row, BoardMemberModel)]
        groups = [row for row in index_rows if isinstance(row, BoardGroupModel)]
        assert [m.user_id for m in members] == ["member-1"]
        assert [g.group_id for g in groups] == [board.groups[0].id.value]
        mock_probe.board_saved.assert_called_once_with(
            board_id=board.id.value, version=board.version
        )

    @pytest.mark.asyncio
    async def test_insert_of_existing_board_conflicts(
        self, repository, mock_session, board
    ):
        mock_session.get.return_value = MagicMock(version=3)

        with pytest.raises(VersionConflictError) as exc_info:
            await repository.save(board, expected_version=None)

        assert exc_info.value.actual == 3
        mock_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_conditional_update(self, repository, mock_session, mock_probe, board):
        mock_session.execute.return_value = MagicMock(rowcount=1)

        await repository.save(board, expected_version=board.version - 1)

        mock_session.add.assert_not_called()
        mock_probe.board_saved.assert_called_once()
        mock_probe.version_conflict.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_matching_no_row_conflicts(
        self, repository, mock_session, mock_probe, board
    ):
        mock_session.execute.return_value = MagicMock(rowcount=0)
        mock_session.scalar.return_value = 5

        with pytest.raises(VersionConflictError) as exc_info:
            await repository.save(board, expected_version=1)

        assert exc_info.value.expected == 1
        assert exc_info.value.actual == 5
        mock_probe.version_conflict.assert_called_once_with(
            board_id=board.id.value, expected=1, actual=5
        )
        mock_probe.board_saved.assert_not_called()

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_version_conflict(
        self, repository, mock_session, board
    ):
        mock_session.get.return_value = None
        mock_session.execute.side_effect = IntegrityError(
            "INSERT INTO boards", {}, Exception("duplicate key")
        )

        with pytest.raises(VersionConflictError) as exc_info:
            await repository.save(board, expected_version=None)

        assert exc_info.value.expected is None


class TestDelete:
    @pytest.mark.asyncio
    async def test_returns_true_when_row_deleted(self, repository, mock_session, mock_probe):
        mock_session.execute.return_value = MagicMock(rowcount=1)
        board_id = BoardId.generate()

        assert await repository.delete(board_id) is True
        assert mock_session.execute.await_count == 3
        mock_probe.board_deleted.assert_called_once_with(board_id=board_id.value)

    @pytest.mark.asyncio
    async def test_returns_false_when_missing(self, repository, mock_session, mock_probe):
        mock_session.execute.return_value = MagicMock(rowcount=0)

        assert await repository.delete(BoardId.generate()) is False
        mock_probe.board_deleted.assert_not_called()


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_for_member(self, repository, mock_session, board):
        result = MagicMock()
        result.scalars.return_value.all.return_value = [
            MagicMock(document=BoardDocumentSerializer().to_document(board))
        ]
        mock_session.execute.return_value = result

        boards = await repository.list_for_member(UserId(value="member-1"))

        assert [b.id for b in boards] == [board.id]

    @pytest.mark.asyncio
    async def test_find_board_id_by_group(self, repository, mock_session, board):
        mock_session.scalar.return_value = board.id.value

        found = await repository.find_board_id_by_group(board.groups[0].id)

        assert found == board.id

    @pytest.mark.asyncio
    async def test_find_board_id_by_unknown_group(self, repository, mock_session):
        mock_session.scalar.return_value = None

        assert await repository.find_board_id_by_group(GroupId.generate()) is None


class TestCreateTables:
    @pytest.mark.asyncio
    async def test_runs_metadata_create_all(self):
        conn = AsyncMock()
        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=conn)
        context.__aexit__ = AsyncMock(return_value=None)
        engine = MagicMock()
        engine.begin.return_value = context

        await create_tables(engine)

        conn.run_sync.assert_awaited_once()
