"""Domain events for the Boards bounded context.

Domain events capture facts about things that have happened to a board.
They are immutable value objects carrying primitive identifiers only, so
they can be translated into change notifications without touching the
aggregate again.

Every event carries the board version the mutation produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class BoardCreated:
    """Event raised when a board is created with its default column and group."""

    board_id: str
    owner_id: str
    title: str
    column_ids: tuple[str, ...]
    group_ids: tuple[str, ...]
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class BoardUpdated:
    """Event raised when board-level fields change.

    Attributes:
        fields: Names of the fields that were supplied
    """

    board_id: str
    fields: tuple[str, ...]
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class BoardDeleted:
    """Event raised when a board is marked for deletion.

    Captures everything the deletion cascades to.
    """

    board_id: str
    column_ids: tuple[str, ...]
    group_ids: tuple[str, ...]
    item_ids: tuple[str, ...]
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class BoardMemberAdded:
    """Event raised when a user is granted membership."""

    board_id: str
    user_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class BoardMemberRemoved:
    """Event raised when a user's membership is revoked."""

    board_id: str
    user_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ColumnCreated:
    board_id: str
    column_id: str
    column_type: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ColumnUpdated:
    board_id: str
    column_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ColumnDeleted:
    """Event raised when a column definition is removed.

    Item values keyed by the column are left in place.
    """

    board_id: str
    column_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ColumnsReordered:
    board_id: str
    column_ids: tuple[str, ...]
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class GroupCreated:
    board_id: str
    group_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class GroupUpdated:
    board_id: str
    group_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class GroupDeleted:
    """Event raised when a group is deleted.

    Attributes:
        deleted_item_ids: Items removed by a DeleteItems cascade
        reassigned_item_ids: Items moved by a Reassign cascade
        target_group_id: Receiving group of a Reassign cascade
    """

    board_id: str
    group_id: str
    deleted_item_ids: tuple[str, ...]
    reassigned_item_ids: tuple[str, ...]
    target_group_id: str | None
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class GroupsReordered:
    board_id: str
    group_ids: tuple[str, ...]
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ItemCreated:
    board_id: str
    item_id: str
    group_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ItemUpdated:
    board_id: str
    item_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ItemDeleted:
    board_id: str
    item_id: str
    group_id: str
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ItemMoved:
    """Event raised when an item changes group or position.

    Attributes:
        position: Final index of the item in the target group
    """

    board_id: str
    item_id: str
    source_group_id: str
    target_group_id: str
    position: int
    version: int
    occurred_at: datetime


@dataclass(frozen=True)
class ItemsReordered:
    board_id: str
    group_id: str
    item_ids: tuple[str, ...]
    version: int
    occurred_at: datetime


# Type alias for all domain events in the Boards context
DomainEvent = (
    BoardCreated
    | BoardUpdated
    | BoardDeleted
    | BoardMemberAdded
    | BoardMemberRemoved
    | ColumnCreated
    | ColumnUpdated
    | ColumnDeleted
    | ColumnsReordered
    | GroupCreated
    | GroupUpdated
    | GroupDeleted
    | GroupsReordered
    | ItemCreated
    | ItemUpdated
    | ItemDeleted
    | ItemMoved
    | ItemsReordered
)
