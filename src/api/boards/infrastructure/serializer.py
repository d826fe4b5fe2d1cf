"""Board document serializer.

A board is stored as one JSON-compatible document holding the aggregate
with all of its columns, groups and items. Both repositories use this
format, so a board reads back identically from either backend.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from boards.domain.aggregates import Board
from boards.domain.entities import Column, Group, Item
from boards.domain.observability import BoardProbe, DefaultBoardProbe
from boards.domain.value_objects import (
    BoardId,
    ColumnId,
    ColumnType,
    GroupId,
    ItemId,
    UserId,
)

SCHEMA_VERSION = 1


class BoardDocumentSerializer:
    """Converts Board aggregates to and from stored documents."""

    def to_document(self, board: Board) -> dict[str, Any]:
        """Convert a board to a JSON-serializable dictionary."""
        return {
            "schema_version": SCHEMA_VERSION,
            "id": board.id.value,
            "title": board.title,
            "description": board.description,
            "owner_id": board.owner_id.value,
            "member_ids": sorted(member.value for member in board.member_ids),
            "columns": [
                {
                    "id": column.id.value,
                    "title": column.title,
                    "column_type": column.column_type.value,
                    "settings": column.settings,
                }
                for column in board.columns
            ],
            "groups": [
                {
                    "id": group.id.value,
                    "title": group.title,
                    "item_ids": [item_id.value for item_id in group.item_ids],
                }
                for group in board.groups
            ],
            "items": [self._item_to_dict(item) for item in board.items.values()],
            "settings": board.settings,
            "version": board.version,
            "created_at": board.created_at.isoformat(),
            "updated_at": board.updated_at.isoformat(),
        }

    def from_document(
        self,
        document: dict[str, Any],
        probe: BoardProbe | None = None,
    ) -> Board:
        """Reconstruct a board from a stored document.

        Raises:
            ValueError: If the document has an unsupported schema version
        """
        schema_version = document.get("schema_version", SCHEMA_VERSION)
        if schema_version != SCHEMA_VERSION:
            raise ValueError(f"Unsupported board document schema: {schema_version}")

        items = [self._item_from_dict(raw) for raw in document["items"]]
        return Board(
            id=BoardId(value=document["id"]),
            title=document["title"],
            description=document.get("description"),
            owner_id=UserId(value=document["owner_id"]),
            member_ids={UserId(value=member) for member in document["member_ids"]},
            columns=[
                Column(
                    id=ColumnId(value=raw["id"]),
                    title=raw["title"],
                    column_type=ColumnType(raw["column_type"]),
                    settings=dict(raw.get("settings") or {}),
                )
                for raw in document["columns"]
            ],
            groups=[
                Group(
                    id=GroupId(value=raw["id"]),
                    title=raw["title"],
                    item_ids=[ItemId(value=item_id) for item_id in raw["item_ids"]],
                )
                for raw in document["groups"]
            ],
            items={item.id: item for item in items},
            settings=dict(document.get("settings") or {}),
            version=document["version"],
            created_at=datetime.fromisoformat(document["created_at"]),
            updated_at=datetime.fromisoformat(document["updated_at"]),
            _probe=probe or DefaultBoardProbe(),
        )

    def _item_to_dict(self, item: Item) -> dict[str, Any]:
        return {
            "id": item.id.value,
            "group_id": item.group_id.value,
            "title": item.title,
            "description": item.description,
            "values": item.values,
            "created_by": item.created_by.value,
            "updated_by": item.updated_by.value,
            "created_at": item.created_at.isoformat(),
            "updated_at": item.updated_at.isoformat(),
        }

    def _item_from_dict(self, raw: dict[str, Any]) -> Item:
        return Item(
            id=ItemId(value=raw["id"]),
            group_id=GroupId(value=raw["group_id"]),
            title=raw["title"],
            description=raw.get("description"),
            values=dict(raw.get("values") or {}),
            created_by=UserId(value=raw["created_by"]),
            updated_by=UserId(value=raw["updated_by"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
