"""Board aggregate for the Boards context."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from boards.domain import ordering
from boards.domain.entities import Column, Group, Item
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
from boards.domain.exceptions import InvalidOperationError, NotFoundError
from boards.domain.observability.board_probe import BoardProbe, DefaultBoardProbe
from boards.domain.value_objects import (
    BoardId,
    CascadePolicy,
    ColumnId,
    ColumnType,
    DeleteItems,
    GroupId,
    ItemId,
    Reassign,
    UserId,
)

if TYPE_CHECKING:
    from boards.domain.events import DomainEvent

TITLE_MAX_LENGTH = 255
DEFAULT_COLUMN_TITLE = "Status"
DEFAULT_STATUS_OPTIONS = ("To Do", "In Progress", "Done")
DEFAULT_GROUP_TITLE = "Main Group"


def _validate_title(title: str, entity: str) -> None:
    if not isinstance(title, str) or not title.strip() or len(title) > TITLE_MAX_LENGTH:
        raise InvalidOperationError(
            f"{entity} title must be between 1 and {TITLE_MAX_LENGTH} characters"
        )


def _coerce_column_type(value: ColumnType | str) -> ColumnType:
    try:
        return ColumnType(value)
    except ValueError as e:
        raise InvalidOperationError(f"Unknown column type: {value}") from e


@dataclass
class Board:
    """Board aggregate: a board plus all of its columns, groups and items.

    The board is a single consistency domain. Columns, groups and items are
    only reachable through it, and every structural change goes through one
    of its methods.

    Business rules:
    - Titles must be 1-255 characters
    - The owner is set once and never appears in member_ids
    - Item.group_id is the authoritative relation; each group's item_ids is
      an ordering index that every method updates in the same step
    - Every item id appears in exactly one group sequence
    - Reorders must be permutations; membership changes use add/remove

    Every mutating method validates all of its inputs before touching state,
    increments ``version`` by exactly one and records one domain event.
    """

    id: BoardId
    title: str
    owner_id: UserId
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    member_ids: set[UserId] = field(default_factory=set)
    columns: list[Column] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    items: dict[ItemId, Item] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    version: int = 0
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)
    _probe: BoardProbe = field(default_factory=DefaultBoardProbe, repr=False)

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        _validate_title(self.title, "Board")
        # Stored data may list the owner as a member; it is redundant.
        self.member_ids.discard(self.owner_id)

    @classmethod
    def create(
        cls,
        title: str,
        owner_id: UserId,
        description: str | None = None,
        settings: Mapping[str, Any] | None = None,
        default_column_title: str = DEFAULT_COLUMN_TITLE,
        default_status_options: Sequence[str] = DEFAULT_STATUS_OPTIONS,
        default_group_title: str = DEFAULT_GROUP_TITLE,
        probe: BoardProbe | None = None,
    ) -> Board:
        """Factory method for creating a new board.

        The new board starts at version 1 with one status column and one
        empty group.

        Args:
            title: Board title (1-255 characters)
            owner_id: The creating user, who becomes the immutable owner
            description: Optional description
            settings: Optional opaque settings map
            default_column_title: Title of the seeded status column
            default_status_options: Options of the seeded status column
            default_group_title: Title of the seeded group
            probe: Optional observability probe for domain events

        Returns:
            A new Board aggregate with BoardCreated event recorded

        Raises:
            InvalidOperationError: If a title is invalid
        """
        _validate_title(default_column_title, "Column")
        _validate_title(default_group_title, "Group")

        now = datetime.now(UTC)
        column = Column(
            id=ColumnId.generate(),
            title=default_column_title,
            column_type=ColumnType.STATUS,
            settings={"options": list(default_status_options)},
        )
        group = Group(id=GroupId.generate(), title=default_group_title)
        board = cls(
            id=BoardId.generate(),
            title=title,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            description=description,
            columns=[column],
            groups=[group],
            settings=dict(settings or {}),
            version=1,
            _probe=probe or DefaultBoardProbe(),
        )
        board._pending_events.append(
            BoardCreated(
                board_id=board.id.value,
                owner_id=owner_id.value,
                title=title,
                column_ids=(column.id.value,),
                group_ids=(group.id.value,),
                version=board.version,
                occurred_at=now,
            )
        )
        return board

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def is_owner(self, user_id: UserId) -> bool:
        return user_id == self.owner_id

    def is_member(self, user_id: UserId) -> bool:
        """Check membership; the owner is implicitly a member."""
        return self.is_owner(user_id) or user_id in self.member_ids

    def find_column(self, column_id: ColumnId) -> Column | None:
        return next((c for c in self.columns if c.id == column_id), None)

    def find_group(self, group_id: GroupId) -> Group | None:
        return next((g for g in self.groups if g.id == group_id), None)

    def get_column(self, column_id: ColumnId) -> Column:
        column = self.find_column(column_id)
        if column is None:
            raise NotFoundError("column", column_id)
        return column

    def get_group(self, group_id: GroupId) -> Group:
        group = self.find_group(group_id)
        if group is None:
            raise NotFoundError("group", group_id)
        return group

    def get_item(self, item_id: ItemId) -> Item:
        item = self.items.get(item_id)
        if item is None:
            raise NotFoundError("item", item_id)
        return item

    def ordered_items(self, group_id: GroupId | None = None) -> list[Item]:
        """Return items in display order: group order, then sequence order.

        Raises:
            NotFoundError: If group_id is given and does not exist
        """
        groups = [self.get_group(group_id)] if group_id is not None else self.groups
        return [self.items[item_id] for group in groups for item_id in group.item_ids]

    # ------------------------------------------------------------------
    # Board-level fields and membership
    # ------------------------------------------------------------------

    def update(
        self,
        title: str | None = None,
        description: str | None = None,
        settings: Mapping[str, Any] | None = None,
    ) -> None:
        """Merge the supplied (non-None) board fields.

        ``settings`` replaces the whole settings map.

        Raises:
            InvalidOperationError: If nothing is supplied or the title is invalid
        """
        supplied = {
            name: value
            for name, value in (
                ("title", title),
                ("description", description),
                ("settings", settings),
            )
            if value is not None
        }
        if not supplied:
            raise InvalidOperationError("No board fields supplied")
        if title is not None:
            _validate_title(title, "Board")

        if title is not None:
            self.title = title
        if description is not None:
            self.description = description
        if settings is not None:
            self.settings = dict(settings)

        now = self._advance()
        self._pending_events.append(
            BoardUpdated(
                board_id=self.id.value,
                fields=tuple(supplied),
                version=self.version,
                occurred_at=now,
            )
        )

    def add_member(self, user_id: UserId) -> None:
        """Grant board membership to a user.

        Raises:
            InvalidOperationError: If the user is the owner or already a member
        """
        if self.is_owner(user_id):
            raise InvalidOperationError("The board owner is already a member")
        if user_id in self.member_ids:
            raise InvalidOperationError(f"User {user_id} is already a member")

        self.member_ids.add(user_id)

        now = self._advance()
        self._pending_events.append(
            BoardMemberAdded(
                board_id=self.id.value,
                user_id=user_id.value,
                version=self.version,
                occurred_at=now,
            )
        )
        self._probe.member_added(board_id=self.id.value, user_id=user_id.value)

    def remove_member(self, user_id: UserId) -> None:
        """Revoke a user's membership.

        Raises:
            InvalidOperationError: If the user is the owner
            NotFoundError: If the user is not a member
        """
        if self.is_owner(user_id):
            raise InvalidOperationError("The board owner cannot be removed")
        if user_id not in self.member_ids:
            raise NotFoundError("member", user_id)

        self.member_ids.discard(user_id)

        now = self._advance()
        self._pending_events.append(
            BoardMemberRemoved(
                board_id=self.id.value,
                user_id=user_id.value,
                version=self.version,
                occurred_at=now,
            )
        )
        self._probe.member_removed(board_id=self.id.value, user_id=user_id.value)

    def mark_for_deletion(self) -> None:
        """Record the BoardDeleted event with everything the deletion cascades to."""
        now = self._advance()
        self._pending_events.append(
            BoardDeleted(
                board_id=self.id.value,
                column_ids=tuple(c.id.value for c in self.columns),
                group_ids=tuple(g.id.value for g in self.groups),
                item_ids=tuple(i.value for i in self.items),
                version=self.version,
                occurred_at=now,
            )
        )

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def add_column(
        self,
        title: str,
        column_type: ColumnType | str,
        settings: Mapping[str, Any] | None = None,
    ) -> Column:
        """Append a new column definition.

        Raises:
            InvalidOperationError: If the title or column type is invalid
        """
        _validate_title(title, "Column")
        resolved_type = _coerce_column_type(column_type)

        column = Column(
            id=ColumnId.generate(),
            title=title,
            column_type=resolved_type,
            settings=dict(settings or {}),
        )
        ordering.insert_at([c.id for c in self.columns], column.id)
        self.columns.append(column)

        now = self._advance()
        self._pending_events.append(
            ColumnCreated(
                board_id=self.id.value,
                column_id=column.id.value,
                column_type=resolved_type.value,
                version=self.version,
                occurred_at=now,
            )
        )
        return column

    def update_column(
        self,
        column_id: ColumnId,
        title: str | None = None,
        column_type: ColumnType | str | None = None,
        settings: Mapping[str, Any] | None = None,
    ) -> Column:
        """Merge the supplied (non-None) column fields.

        Raises:
            NotFoundError: If the column does not exist
            InvalidOperationError: If nothing is supplied or a value is invalid
        """
        column = self.get_column(column_id)
        if title is None and column_type is None and settings is None:
            raise InvalidOperationError("No column fields supplied")
        if title is not None:
            _validate_title(title, "Column")
        resolved_type = (
            _coerce_column_type(column_type) if column_type is not None else None
        )

        if title is not None:
            column.title = title
        if resolved_type is not None:
            column.column_type = resolved_type
        if settings is not None:
            column.settings = dict(settings)

        now = self._advance()
        self._pending_events.append(
            ColumnUpdated(
                board_id=self.id.value,
                column_id=column.id.value,
                version=self.version,
                occurred_at=now,
            )
        )
        return column

    def remove_column(self, column_id: ColumnId) -> None:
        """Remove a column definition.

        Item values keyed by the column id are left in place.

        Raises:
            NotFoundError: If the column does not exist
        """
        remaining = ordering.remove([c.id for c in self.columns], column_id, "column")
        self.columns = [c for c in self.columns if c.id in remaining]

        now = self._advance()
        self._pending_events.append(
            ColumnDeleted(
                board_id=self.id.value,
                column_id=column_id.value,
                version=self.version,
                occurred_at=now,
            )
        )

    def reorder_columns(self, new_order: Sequence[ColumnId]) -> None:
        """Reorder columns.

        Raises:
            InvalidReorderError: If new_order is not a permutation of the columns
        """
        ordered_ids = ordering.reorder([c.id for c in self.columns], new_order)
        by_id = {c.id: c for c in self.columns}
        self.columns = [by_id[column_id] for column_id in ordered_ids]

        now = self._advance()
        self._pending_events.append(
            ColumnsReordered(
                board_id=self.id.value,
                column_ids=tuple(c.value for c in ordered_ids),
                version=self.version,
                occurred_at=now,
            )
        )

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def add_group(self, title: str) -> Group:
        """Append a new, empty group.

        Raises:
            InvalidOperationError: If the title is invalid
        """
        _validate_title(title, "Group")

        group = Group(id=GroupId.generate(), title=title)
        ordering.insert_at([g.id for g in self.groups], group.id)
        self.groups.append(group)

        now = self._advance()
        self._pending_events.append(
            GroupCreated(
                board_id=self.id.value,
                group_id=group.id.value,
                version=self.version,
                occurred_at=now,
            )
        )
        return group

    def update_group(self, group_id: GroupId, title: str) -> Group:
        """Rename a group.

        Raises:
            NotFoundError: If the group does not exist
            InvalidOperationError: If the title is invalid
        """
        group = self.get_group(group_id)
        _validate_title(title, "Group")

        group.title = title

        now = self._advance()
        self._pending_events.append(
            GroupUpdated(
                board_id=self.id.value,
                group_id=group.id.value,
                version=self.version,
                occurred_at=now,
            )
        )
        return group

    def remove_group(
        self,
        group_id: GroupId,
        cascade: CascadePolicy,
        actor_id: UserId,
    ) -> None:
        """Delete a group and apply the cascade policy to its items.

        DeleteItems deletes every item in the group. Reassign appends them,
        in their existing relative order, to the target group.

        Args:
            group_id: Group to delete
            cascade: DeleteItems() or Reassign(target_group_id)
            actor_id: User recorded as last modifier of reassigned items

        Raises:
            NotFoundError: If the group does not exist
            InvalidOperationError: If no policy is given, or the reassignment
                target is missing or is the deleted group itself
        """
        group = self.get_group(group_id)
        member_ids = list(group.item_ids)

        target: Group | None = None
        if isinstance(cascade, Reassign):
            if cascade.target_group_id == group_id:
                raise InvalidOperationError(
                    "Cannot reassign items to the group being deleted"
                )
            target = self.find_group(cascade.target_group_id)
            if target is None:
                raise InvalidOperationError(
                    f"Reassignment target group {cascade.target_group_id} does not exist"
                )
        elif not isinstance(cascade, DeleteItems):
            raise InvalidOperationError(
                "A cascade policy (DeleteItems or Reassign) is required"
            )

        remaining = ordering.remove([g.id for g in self.groups], group_id, "group")
        now = self._advance()

        if target is not None:
            target.item_ids = target.item_ids + member_ids
            for item_id in member_ids:
                item = self.items[item_id]
                item.group_id = target.id
                item.updated_by = actor_id
                item.updated_at = now
        else:
            for item_id in member_ids:
                del self.items[item_id]
        self.groups = [g for g in self.groups if g.id in remaining]

        self._pending_events.append(
            GroupDeleted(
                board_id=self.id.value,
                group_id=group_id.value,
                deleted_item_ids=()
                if target is not None
                else tuple(i.value for i in member_ids),
                reassigned_item_ids=tuple(i.value for i in member_ids)
                if target is not None
                else (),
                target_group_id=target.id.value if target is not None else None,
                version=self.version,
                occurred_at=now,
            )
        )
        self._probe.group_deleted(
            board_id=self.id.value,
            group_id=group_id.value,
            policy="reassign" if target is not None else "delete_items",
            affected_items=len(member_ids),
        )

    def reorder_groups(self, new_order: Sequence[GroupId]) -> None:
        """Reorder groups (board display order).

        Raises:
            InvalidReorderError: If new_order is not a permutation of the groups
        """
        ordered_ids = ordering.reorder([g.id for g in self.groups], new_order)
        by_id = {g.id: g for g in self.groups}
        self.groups = [by_id[group_id] for group_id in ordered_ids]

        now = self._advance()
        self._pending_events.append(
            GroupsReordered(
                board_id=self.id.value,
                group_ids=tuple(g.value for g in ordered_ids),
                version=self.version,
                occurred_at=now,
            )
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(
        self,
        group_id: GroupId,
        title: str,
        actor_id: UserId,
        description: str | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> Item:
        """Create an item at the end of a group.

        Raises:
            NotFoundError: If the group does not exist
            InvalidOperationError: If the title is invalid
        """
        group = self.get_group(group_id)
        _validate_title(title, "Item")

        now = datetime.now(UTC)
        item = Item(
            id=ItemId.generate(),
            group_id=group.id,
            title=title,
            created_by=actor_id,
            updated_by=actor_id,
            created_at=now,
            updated_at=now,
            description=description,
            values=dict(values or {}),
        )
        group.item_ids = ordering.insert_at(group.item_ids, item.id)
        self.items[item.id] = item

        now = self._advance()
        self._pending_events.append(
            ItemCreated(
                board_id=self.id.value,
                item_id=item.id.value,
                group_id=group.id.value,
                version=self.version,
                occurred_at=now,
            )
        )
        return item

    def update_item(
        self,
        item_id: ItemId,
        actor_id: UserId,
        title: str | None = None,
        description: str | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> Item:
        """Merge title, description and values into an item.

        ``values`` is merged key by key into the existing values. The group
        of an item can only be changed with move_item.

        Raises:
            NotFoundError: If the item does not exist
            InvalidOperationError: If nothing is supplied or the title is invalid
        """
        item = self.get_item(item_id)
        if title is None and description is None and values is None:
            raise InvalidOperationError("No item fields supplied")
        if title is not None:
            _validate_title(title, "Item")

        if title is not None:
            item.title = title
        if description is not None:
            item.description = description
        if values is not None:
            item.values = {**item.values, **values}

        now = self._advance()
        item.updated_by = actor_id
        item.updated_at = now
        self._pending_events.append(
            ItemUpdated(
                board_id=self.id.value,
                item_id=item.id.value,
                version=self.version,
                occurred_at=now,
            )
        )
        return item

    def remove_item(self, item_id: ItemId) -> None:
        """Delete an item and its entry in its group's sequence.

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self.get_item(item_id)
        group = self.get_group(item.group_id)

        group.item_ids = ordering.remove(group.item_ids, item_id, "item")
        del self.items[item_id]

        now = self._advance()
        self._pending_events.append(
            ItemDeleted(
                board_id=self.id.value,
                item_id=item_id.value,
                group_id=group.id.value,
                version=self.version,
                occurred_at=now,
            )
        )

    def move_item(
        self,
        item_id: ItemId,
        target_group_id: GroupId,
        actor_id: UserId,
        position: int | None = None,
    ) -> int:
        """Move an item to a position in a group of this board.

        Removes the item from its source sequence, inserts it into the target
        sequence at ``position`` (an index into the post-removal sequence,
        clamped; append when omitted) and updates ``group_id``. Moving within
        the same group repositions the item.

        Returns:
            The item's final index in the target group

        Raises:
            NotFoundError: If the item or the target group does not exist
        """
        item = self.get_item(item_id)
        target = self.get_group(target_group_id)
        source = self.get_group(item.group_id)

        source_after = ordering.remove(source.item_ids, item_id, "item")
        base = source_after if source is target else target.item_ids
        target_after = ordering.insert_at(base, item_id, position)

        source.item_ids = source_after
        target.item_ids = target_after
        item.group_id = target.id

        now = self._advance()
        item.updated_by = actor_id
        item.updated_at = now
        final_position = target_after.index(item_id)
        self._pending_events.append(
            ItemMoved(
                board_id=self.id.value,
                item_id=item_id.value,
                source_group_id=source.id.value,
                target_group_id=target.id.value,
                position=final_position,
                version=self.version,
                occurred_at=now,
            )
        )
        self._probe.item_moved(
            board_id=self.id.value,
            item_id=item_id.value,
            source_group_id=source.id.value,
            target_group_id=target.id.value,
            position=final_position,
        )
        return final_position

    def reorder_items(self, group_id: GroupId, new_order: Sequence[ItemId]) -> Group:
        """Reorder the items within one group.

        Raises:
            NotFoundError: If the group does not exist
            InvalidReorderError: If new_order is not a permutation of its items
        """
        group = self.get_group(group_id)
        group.item_ids = ordering.reorder(group.item_ids, new_order)

        now = self._advance()
        self._pending_events.append(
            ItemsReordered(
                board_id=self.id.value,
                group_id=group.id.value,
                item_ids=tuple(i.value for i in group.item_ids),
                version=self.version,
                occurred_at=now,
            )
        )
        return group

    # ------------------------------------------------------------------
    # Integrity and events
    # ------------------------------------------------------------------

    def verify_integrity(self) -> None:
        """Check the structural invariants of the whole aggregate.

        Raises:
            RuntimeError: If any invariant is violated
        """
        column_ids = [c.id for c in self.columns]
        if len(set(column_ids)) != len(column_ids):
            raise RuntimeError(f"Invariant violated: duplicate column ids on {self.id}")

        group_ids = [g.id for g in self.groups]
        if len(set(group_ids)) != len(group_ids):
            raise RuntimeError(f"Invariant violated: duplicate group ids on {self.id}")

        if self.owner_id in self.member_ids:
            raise RuntimeError(f"Invariant violated: owner listed as member on {self.id}")

        seen: dict[ItemId, GroupId] = {}
        for group in self.groups:
            for item_id in group.item_ids:
                if item_id in seen:
                    raise RuntimeError(
                        f"Invariant violated: item {item_id} listed in groups "
                        f"{seen[item_id]} and {group.id}"
                    )
                seen[item_id] = group.id
                item = self.items.get(item_id)
                if item is None:
                    raise RuntimeError(
                        f"Invariant violated: group {group.id} lists missing item {item_id}"
                    )
                if item.group_id != group.id:
                    raise RuntimeError(
                        f"Invariant violated: item {item_id} has group_id "
                        f"{item.group_id} but is listed in {group.id}"
                    )

        unlisted = set(self.items) - set(seen)
        if unlisted:
            raise RuntimeError(
                f"Invariant violated: items {sorted(str(i) for i in unlisted)} "
                f"are not listed in any group"
            )

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events."""
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events

    def _advance(self) -> datetime:
        now = datetime.now(UTC)
        self.version += 1
        self.updated_at = now
        return now
