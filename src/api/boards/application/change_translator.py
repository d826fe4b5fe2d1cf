"""Translation of Board domain events into change notifications.

Subscribers receive identifiers only, so each domain event is reduced to
the operation name and the ids of the entities it touched.
"""

from __future__ import annotations

from boards.domain.events import (
    BoardCreated,
    BoardDeleted,
    BoardMemberAdded,
    BoardMemberRemoved,
    BoardUpdated,
    ColumnCreated,
    ColumnDeleted,
    ColumnsReordered,
    ColumnUpdated,
    DomainEvent,
    GroupCreated,
    GroupDeleted,
    GroupsReordered,
    GroupUpdated,
    ItemCreated,
    ItemDeleted,
    ItemMoved,
    ItemsReordered,
    ItemUpdated,
)
from boards.domain.value_objects import BoardOperation
from boards.ports.change_events import ChangeEvent


class ChangeEventTranslator:
    """Translates Board domain events to ChangeEvents."""

    def translate(self, event: DomainEvent) -> ChangeEvent:
        """Convert a domain event to the change event subscribers receive.

        Raises:
            ValueError: If the event type is not supported
        """
        operation, entity_ids = self._describe(event)
        return ChangeEvent(
            board_id=event.board_id,
            operation=operation,
            entity_ids=entity_ids,
            version=event.version,
            occurred_at=event.occurred_at,
        )

    def translate_all(self, events: list[DomainEvent]) -> list[ChangeEvent]:
        return [self.translate(event) for event in events]

    def _describe(self, event: DomainEvent) -> tuple[BoardOperation, tuple[str, ...]]:
        match event:
            case BoardCreated():
                return BoardOperation.CREATE_BOARD, (
                    event.board_id,
                    *event.column_ids,
                    *event.group_ids,
                )
            case BoardUpdated():
                return BoardOperation.UPDATE_BOARD, (event.board_id,)
            case BoardDeleted():
                return BoardOperation.DELETE_BOARD, (
                    event.board_id,
                    *event.column_ids,
                    *event.group_ids,
                    *event.item_ids,
                )
            case BoardMemberAdded():
                return BoardOperation.ADD_MEMBER, (event.user_id,)
            case BoardMemberRemoved():
                return BoardOperation.REMOVE_MEMBER, (event.user_id,)
            case ColumnCreated():
                return BoardOperation.CREATE_COLUMN, (event.column_id,)
            case ColumnUpdated():
                return BoardOperation.UPDATE_COLUMN, (event.column_id,)
            case ColumnDeleted():
                return BoardOperation.DELETE_COLUMN, (event.column_id,)
            case ColumnsReordered():
                return BoardOperation.REORDER_COLUMNS, event.column_ids
            case GroupCreated():
                return BoardOperation.CREATE_GROUP, (event.group_id,)
            case GroupUpdated():
                return BoardOperation.UPDATE_GROUP, (event.group_id,)
            case GroupDeleted():
                target = (event.target_group_id,) if event.target_group_id else ()
                return BoardOperation.DELETE_GROUP, (
                    event.group_id,
                    *target,
                    *event.deleted_item_ids,
                    *event.reassigned_item_ids,
                )
            case GroupsReordered():
                return BoardOperation.REORDER_GROUPS, event.group_ids
            case ItemCreated():
                return BoardOperation.CREATE_ITEM, (event.item_id, event.group_id)
            case ItemUpdated():
                return BoardOperation.UPDATE_ITEM, (event.item_id,)
            case ItemDeleted():
                return BoardOperation.DELETE_ITEM, (event.item_id, event.group_id)
            case ItemMoved():
                groups = (
                    (event.source_group_id,)
                    if event.source_group_id == event.target_group_id
                    else (event.source_group_id, event.target_group_id)
                )
                return BoardOperation.MOVE_ITEM, (event.item_id, *groups)
            case ItemsReordered():
                return BoardOperation.REORDER_ITEMS, (event.group_id, *event.item_ids)
            case _:
                raise ValueError(f"Unsupported event type: {type(event).__name__}")
