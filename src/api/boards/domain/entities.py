"""Entities owned by the Board aggregate.

Columns, groups and items have identity only within their board and are
never persisted or mutated on their own; all changes go through Board.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from boards.domain.value_objects import (
    ColumnId,
    ColumnType,
    GroupId,
    ItemId,
    UserId,
)


@dataclass
class Column:
    """A typed attribute definition shared by all items on a board.

    Columns hold no references to items; items key their values by column id.
    """

    id: ColumnId
    title: str
    column_type: ColumnType
    settings: dict[str, Any] = field(default_factory=dict)


@dataclass
class Group:
    """A named, ordered bucket of items.

    ``item_ids`` is an ordering index derived from ``Item.group_id``;
    the aggregate keeps the two in lockstep.
    """

    id: GroupId
    title: str
    item_ids: list[ItemId] = field(default_factory=list)


@dataclass
class Item:
    """A unit of work belonging to exactly one group."""

    id: ItemId
    group_id: GroupId
    title: str
    created_by: UserId
    updated_by: UserId
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    values: dict[str, Any] = field(default_factory=dict)
