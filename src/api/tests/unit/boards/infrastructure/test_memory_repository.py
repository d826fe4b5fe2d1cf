"""Unit tests for InMemoryBoardRepository."""

from unittest.mock import create_autospec

import pytest

from boards.domain.aggregates import Board
from boards.domain.exceptions import VersionConflictError
from boards.domain.value_objects import BoardId, GroupId, UserId
from boards.infrastructure.memory_repository import InMemoryBoardRepository
from boards.infrastructure.observability import BoardRepositoryProbe
from boards.ports.repositories import IBoardRepository

OWNER = UserId(value="owner-1")


@pytest.fixture
def mock_probe():
    return create_autospec(BoardRepositoryProbe, instance=True)


@pytest.fixture
def repository(mock_probe) -> InMemoryBoardRepository:
    return InMemoryBoardRepository(probe=mock_probe)


def _new_board(title: str = "Sprint 1", owner: UserId = OWNER) -> Board:
    board = Board.create(title=title, owner_id=owner)
    board.collect_events()
    return board


class TestProtocolCompliance:
    def test_implements_protocol(self, repository):
        assert isinstance(repository, IBoardRepository)


class TestSaveAndLoad:
    """Tests for the version precondition."""

    @pytest.mark.asyncio
    async def test_insert_and_load(self, repository, mock_probe):
        board = _new_board()

        await repository.save(board, expected_version=None)
        loaded = await repository.load(board.id)

        assert loaded is not board
        assert loaded.id == board.id
        assert loaded.version == 1
        mock_probe.board_saved.assert_called_once_with(
            board_id=board.id.value, version=1
        )

    @pytest.mark.asyncio
    async def test_load_missing_returns_none(self, repository, mock_probe):
        board_id = BoardId.generate()

        assert await repository.load(board_id) is None
        mock_probe.board_not_found.assert_called_once_with(board_id=board_id.value)

    @pytest.mark.asyncio
    async def test_insert_of_existing_board_conflicts(self, repository):
        board = _new_board()
        await repository.save(board, expected_version=None)

        with pytest.raises(VersionConflictError) as exc_info:
            await repository.save(board, expected_version=None)

        assert exc_info.value.actual == 1

    @pytest.mark.asyncio
    async def test_update_with_matching_version(self, repository):
        board = _new_board()
        await repository.save(board, expected_version=None)
        board.add_group("Done")

        await repository.save(board, expected_version=1)

        loaded = await repository.load(board.id)
        assert loaded.version == 2
        assert [g.title for g in loaded.groups] == ["Main Group", "Done"]

    @pytest.mark.asyncio
    async def test_stale_writer_conflicts(self, repository, mock_probe):
        board = _new_board()
        await repository.save(board, expected_version=None)
        first = await repository.load(board.id)
        second = await repository.load(board.id)
        first.add_group("First")
        second.add_group("Second")
        await repository.save(first, expected_version=1)

        with pytest.raises(VersionConflictError):
            await repository.save(second, expected_version=1)

        mock_probe.version_conflict.assert_called_once_with(
            board_id=board.id.value, expected=1, actual=2
        )
        loaded = await repository.load(board.id)
        assert [g.title for g in loaded.groups] == ["Main Group", "First"]

    @pytest.mark.asyncio
    async def test_mutating_loaded_board_does_not_touch_store(self, repository):
        board = _new_board()
        await repository.save(board, expected_version=None)

        loaded = await repository.load(board.id)
        loaded.add_group("Unsaved")

        reloaded = await repository.load(board.id)
        assert len(reloaded.groups) == 1


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_existing(self, repository):
        board = _new_board()
        await repository.save(board, expected_version=None)

        assert await repository.delete(board.id) is True
        assert await repository.load(board.id) is None

    @pytest.mark.asyncio
    async def test_delete_missing(self, repository):
        assert await repository.delete(BoardId.generate()) is False


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_for_member_includes_owned_and_shared(self, repository):
        member = UserId(value="member-1")
        owned = _new_board("Owned", owner=member)
        shared = _new_board("Shared")
        shared.add_member(member)
        unrelated = _new_board("Unrelated")
        for board in (shared, owned, unrelated):
            await repository.save(board, expected_version=None)

        boards = await repository.list_for_member(member)

        assert [b.title for b in boards] == ["Owned", "Shared"]

    @pytest.mark.asyncio
    async def test_find_board_id_by_group(self, repository):
        board = _new_board()
        await repository.save(board, expected_version=None)

        assert await repository.find_board_id_by_group(board.groups[0].id) == board.id
        assert await repository.find_board_id_by_group(GroupId.generate()) is None
