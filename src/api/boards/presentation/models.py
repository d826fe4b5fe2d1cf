"""Request and response models for board API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from boards.domain.aggregates import Board
from boards.domain.entities import Column, Group, Item
from boards.domain.value_objects import ColumnType


class CreateBoardRequest(BaseModel):
    """Request to create a board owned by the caller."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Board title",
        examples=["Sprint 1", "Marketing launch"],
    )
    description: str | None = Field(default=None, description="Board description")
    settings: dict[str, Any] | None = Field(
        default=None, description="Opaque board settings"
    )


class UpdateBoardRequest(BaseModel):
    """Request to update board fields. Only supplied fields change.

    ``settings`` replaces the whole settings map.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None)
    settings: dict[str, Any] | None = Field(default=None)


class AddMemberRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="User to grant membership")


class ReorderRequest(BaseModel):
    """Request carrying the complete new order of a sequence.

    The ids must be a permutation of the current ones.
    """

    ids: list[str] = Field(..., description="All ids of the sequence in their new order")


class CreateColumnRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Column title")
    column_type: ColumnType = Field(..., description="Kind of values the column holds")
    settings: dict[str, Any] | None = Field(
        default=None, description="Opaque column settings (e.g. status options)"
    )


class UpdateColumnRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    column_type: ColumnType | None = Field(default=None)
    settings: dict[str, Any] | None = Field(default=None)


class CreateGroupRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Group title")


class UpdateGroupRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Group title")


class CreateItemRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Item title")
    description: str | None = Field(default=None)
    values: dict[str, Any] | None = Field(
        default=None, description="Column values keyed by column id"
    )


class UpdateItemRequest(BaseModel):
    """Request to update an item.

    ``values`` is merged key by key. ``group_id`` is rejected; items change
    group through the move endpoint.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None)
    values: dict[str, Any] | None = Field(default=None)
    group_id: str | None = Field(default=None)


class MoveItemRequest(BaseModel):
    target_group_id: str = Field(..., description="Group to move the item into")
    position: int | None = Field(
        default=None,
        description="0-based index in the target group; appends when omitted",
    )


class ColumnResponse(BaseModel):
    id: str = Field(..., description="Column ID (ULID format)")
    title: str
    column_type: ColumnType
    settings: dict[str, Any]

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_domain(cls, column: Column) -> ColumnResponse:
        return cls(
            id=column.id.value,
            title=column.title,
            column_type=column.column_type,
            settings=column.settings,
        )


class GroupResponse(BaseModel):
    id: str = Field(..., description="Group ID (ULID format)")
    title: str
    item_ids: list[str] = Field(..., description="Item ids in display order")

    @classmethod
    def from_domain(cls, group: Group) -> GroupResponse:
        return cls(
            id=group.id.value,
            title=group.title,
            item_ids=[item_id.value for item_id in group.item_ids],
        )


class ItemResponse(BaseModel):
    """Response containing item details."""

    id: str = Field(..., description="Item ID (ULID format)")
    group_id: str
    title: str
    description: str | None
    values: dict[str, Any]
    created_by: str
    updated_by: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, item: Item) -> ItemResponse:
        return cls(
            id=item.id.value,
            group_id=item.group_id.value,
            title=item.title,
            description=item.description,
            values=item.values,
            created_by=item.created_by.value,
            updated_by=item.updated_by.value,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class ItemListResponse(BaseModel):
    items: list[ItemResponse]
    count: int


class BoardResponse(BaseModel):
    """Response containing a whole board.

    Attributes:
        columns: Column definitions in display order
        groups: Groups in display order, each with its item order
        items: Items in display order (group order, then item order)
        version: Version to pass as expected_version for optimistic writes
    """

    id: str = Field(..., description="Board ID (ULID format)")
    title: str
    description: str | None
    owner_id: str
    member_ids: list[str]
    columns: list[ColumnResponse]
    groups: list[GroupResponse]
    items: list[ItemResponse]
    settings: dict[str, Any]
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, board: Board) -> BoardResponse:
        """Convert domain Board aggregate to API response."""
        return cls(
            id=board.id.value,
            title=board.title,
            description=board.description,
            owner_id=board.owner_id.value,
            member_ids=sorted(member.value for member in board.member_ids),
            columns=[ColumnResponse.from_domain(column) for column in board.columns],
            groups=[GroupResponse.from_domain(group) for group in board.groups],
            items=[ItemResponse.from_domain(item) for item in board.ordered_items()],
            settings=board.settings,
            version=board.version,
            created_at=board.created_at,
            updated_at=board.updated_at,
        )


class BoardSummaryResponse(BaseModel):
    id: str
    title: str
    description: str | None
    owner_id: str
    version: int
    updated_at: datetime

    @classmethod
    def from_domain(cls, board: Board) -> BoardSummaryResponse:
        return cls(
            id=board.id.value,
            title=board.title,
            description=board.description,
            owner_id=board.owner_id.value,
            version=board.version,
            updated_at=board.updated_at,
        )


class BoardListResponse(BaseModel):
    boards: list[BoardSummaryResponse]
    count: int
