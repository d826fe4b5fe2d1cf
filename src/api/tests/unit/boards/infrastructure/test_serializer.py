"""Unit tests for BoardDocumentSerializer."""

import json

import pytest

from boards.domain.aggregates import Board
from boards.domain.value_objects import ColumnType, UserId
from boards.infrastructure.serializer import SCHEMA_VERSION, BoardDocumentSerializer

OWNER = UserId(value="owner-1")


@pytest.fixture
def serializer() -> BoardDocumentSerializer:
    return BoardDocumentSerializer()


@pytest.fixture
def populated_board() -> Board:
    board = Board.create(
        title="Sprint 1",
        owner_id=OWNER,
        description="Two weeks",
        settings={"color": "blue"},
    )
    board.add_member(UserId(value="member-2"))
    board.add_member(UserId(value="member-1"))
    points = board.add_column("Points", ColumnType.NUMBER)
    done = board.add_group("Done")
    board.add_item(board.groups[0].id, "A", OWNER, values={points.id.value: 3})
    board.add_item(done.id, "B", OWNER, description="second")
    board.collect_events()
    return board


class TestToDocument:
    """Tests for document shape."""

    def test_document_is_json_serializable(self, serializer, populated_board):
        document = serializer.to_document(populated_board)

        assert json.loads(json.dumps(document)) == document

    def test_document_shape(self, serializer, populated_board):
        document = serializer.to_document(populated_board)

        assert document["schema_version"] == SCHEMA_VERSION
        assert document["owner_id"] == "owner-1"
        assert document["member_ids"] == ["member-1", "member-2"]
        assert [c["column_type"] for c in document["columns"]] == ["status", "number"]
        assert [g["title"] for g in document["groups"]] == ["Main Group", "Done"]
        assert len(document["items"]) == 2
        assert document["version"] == populated_board.version


class TestFromDocument:
    """Tests for rebuilding boards."""

    def test_restores_equivalent_board(self, serializer, populated_board):
        restored = serializer.from_document(
            json.loads(json.dumps(serializer.to_document(populated_board)))
        )

        assert restored.id == populated_board.id
        assert restored.member_ids == populated_board.member_ids
        assert restored.columns == populated_board.columns
        assert restored.groups == populated_board.groups
        assert restored.items == populated_board.items
        assert restored.settings == {"color": "blue"}
        assert restored.created_at == populated_board.created_at
        assert restored.version == populated_board.version
        restored.verify_integrity()

    def test_restored_board_has_no_pending_events(self, serializer, populated_board):
        restored = serializer.from_document(serializer.to_document(populated_board))

        assert restored.collect_events() == []

    def test_restored_board_is_independent(self, serializer, populated_board):
        document = serializer.to_document(populated_board)
        restored = serializer.from_document(document)

        restored.groups[0].item_ids.clear()

        assert populated_board.groups[0].item_ids != []

    def test_rejects_unknown_schema_version(self, serializer, populated_board):
        document = serializer.to_document(populated_board)
        document["schema_version"] = SCHEMA_VERSION + 1

        with pytest.raises(ValueError, match="Unsupported board document schema"):
            serializer.from_document(document)
