"""Board aggregate store for the Boards bounded context.

The single entry point for reading and changing boards. Every mutation runs
inside the board's exclusive scope:

    lock -> load -> authorize -> version check -> mutate -> verify
         -> save(expected_version=loaded) -> publish -> release

Nothing is persisted or published unless every step before it succeeded.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from boards.application.change_translator import ChangeEventTranslator
from boards.application.observability import (
    BoardStoreProbe,
    DefaultBoardStoreProbe,
)
from boards.application.value_objects import BoardTemplate
from boards.domain.access import AccessGuard
from boards.domain.aggregates import Board
from boards.domain.entities import Column, Group, Item
from boards.domain.exceptions import (
    BoardError,
    InvalidOperationError,
    NotFoundError,
    VersionConflictError,
)
from boards.domain.value_objects import (
    Actor,
    BoardId,
    BoardOperation,
    CascadePolicy,
    Capability,
    ColumnId,
    ColumnType,
    GroupId,
    ItemId,
    UserId,
)
from boards.ports.change_events import IBoardSubscription, IChangePropagator
from boards.ports.locking import IBoardLockRegistry
from boards.ports.repositories import IBoardRepository

DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0


class BoardAggregateStore:
    """Application service for board management.

    Serializes mutations per board, enforces access control and keeps the
    persisted board and its subscribers in step.
    """

    def __init__(
        self,
        repository: IBoardRepository,
        locks: IBoardLockRegistry,
        propagator: IChangePropagator,
        guard: AccessGuard | None = None,
        translator: ChangeEventTranslator | None = None,
        template: BoardTemplate | None = None,
        default_timeout: float | None = DEFAULT_LOCK_TIMEOUT_SECONDS,
        probe: BoardStoreProbe | None = None,
    ):
        """Initialize BoardAggregateStore with dependencies.

        Args:
            repository: Repository for board persistence
            locks: Registry providing one exclusive scope per board
            propagator: Fan-out of committed changes to subscribers
            guard: Access guard (owner/member rules by default)
            translator: Domain event to change event translator
            template: Default structure for new boards
            default_timeout: Lock timeout used when a call passes none
            probe: Optional domain probe for observability
        """
        self._repository = repository
        self._locks = locks
        self._propagator = propagator
        self._guard = guard or AccessGuard()
        self._translator = translator or ChangeEventTranslator()
        self._template = template or BoardTemplate()
        self._default_timeout = default_timeout
        self._probe = probe or DefaultBoardStoreProbe()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_board(self, actor: Actor, board_id: BoardId) -> Board:
        """Return a committed snapshot of a board.

        Raises:
            NotFoundError: If the board does not exist
            UnauthorizedError: If the actor cannot read the board
        """
        return await self._load_authorized(actor, board_id, Capability.READ)

    async def list_boards(self, actor: Actor) -> list[Board]:
        """List the boards the actor owns or is a member of."""
        boards = await self._repository.list_for_member(actor.user_id)
        self._probe.boards_listed(user_id=actor.user_id.value, count=len(boards))
        return boards

    async def get_item(self, actor: Actor, board_id: BoardId, item_id: ItemId) -> Item:
        board = await self._load_authorized(actor, board_id, Capability.READ)
        return board.get_item(item_id)

    async def list_items(
        self,
        actor: Actor,
        board_id: BoardId,
        group_id: GroupId | None = None,
    ) -> list[Item]:
        """List items in display order, optionally restricted to one group."""
        board = await self._load_authorized(actor, board_id, Capability.READ)
        return board.ordered_items(group_id)

    @asynccontextmanager
    async def with_read_lock(
        self,
        actor: Actor,
        board_id: BoardId,
        timeout: float | None = None,
    ) -> AsyncIterator[Board]:
        """Hold the board's exclusive scope while the caller inspects it.

        No mutation of the board can commit until the context exits.

        Raises:
            BusyError: If the scope is not acquired within timeout
        """
        async with self._locks.hold(board_id.value, self._resolve_timeout(timeout)):
            yield await self._load_authorized(actor, board_id, Capability.READ)

    async def subscribe(
        self,
        actor: Actor,
        board_id: BoardId,
        timeout: float | None = None,
    ) -> IBoardSubscription:
        """Open a change subscription; read access is checked once, here.

        Registration happens inside the board's scope, so a concurrent
        delete_board either ends the new subscription or makes this call
        fail with NotFoundError.

        Raises:
            NotFoundError: If the board does not exist
            UnauthorizedError: If the actor may not read the board
            BusyError: If the scope is not acquired within timeout
        """
        async with self._locks.hold(board_id.value, self._resolve_timeout(timeout)):
            await self._load_authorized(actor, board_id, Capability.READ)
            subscription = self._propagator.subscribe(
                board_id=board_id.value,
                subscriber_id=actor.user_id.value,
            )
        self._probe.subscription_opened(
            board_id=board_id.value,
            user_id=actor.user_id.value,
        )
        return subscription

    # ------------------------------------------------------------------
    # Board lifecycle and membership
    # ------------------------------------------------------------------

    async def create_board(
        self,
        actor: Actor,
        title: str,
        description: str | None = None,
        settings: Mapping[str, Any] | None = None,
    ) -> Board:
        """Create a board owned by the actor, seeded from the template.

        Raises:
            InvalidOperationError: If the title is invalid
        """
        board = Board.create(
            title=title,
            owner_id=actor.user_id,
            description=description,
            settings=settings,
            default_column_title=self._template.column_title,
            default_status_options=self._template.status_options,
            default_group_title=self._template.group_title,
        )
        board.verify_integrity()

        async with self._locks.hold(board.id.value, self._default_timeout):
            await self._repository.save(board, expected_version=None)
            self._publish(board)

        self._probe.board_created(
            board_id=board.id.value,
            owner_id=actor.user_id.value,
            title=title,
        )
        return board

    async def update_board(
        self,
        actor: Actor,
        board_id: BoardId,
        title: str | None = None,
        description: str | None = None,
        settings: Mapping[str, Any] | None = None,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Board:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.UPDATE_BOARD,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.update(title=title, description=description, settings=settings)
        return board

    async def delete_board(
        self,
        actor: Actor,
        board_id: BoardId,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> None:
        """Delete a board with everything it owns and end its subscriptions.

        Raises:
            NotFoundError: If the board does not exist
            UnauthorizedError: If the actor may not delete the board
        """
        try:
            async with self._locks.hold(board_id.value, self._resolve_timeout(timeout)):
                board = await self._load_authorized(
                    actor, board_id, Capability.DELETE_BOARD
                )
                self._check_version(board, expected_version)

                board.mark_for_deletion()
                if not await self._repository.delete(board_id):
                    raise NotFoundError("board", board_id)

                self._publish(board)
                self._propagator.close_board(board_id.value)
        except BoardError as e:
            self._probe.mutation_rejected(
                board_id=board_id.value,
                operation=BoardOperation.DELETE_BOARD.value,
                user_id=actor.user_id.value,
                error=str(e),
            )
            raise

        self._probe.board_deleted(board_id=board_id.value, user_id=actor.user_id.value)

    async def add_member(
        self,
        actor: Actor,
        board_id: BoardId,
        user_id: UserId,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Board:
        async with self._mutation(
            actor,
            board_id,
            Capability.MANAGE_MEMBERS,
            BoardOperation.ADD_MEMBER,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.add_member(user_id)
        return board

    async def remove_member(
        self,
        actor: Actor,
        board_id: BoardId,
        user_id: UserId,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Board:
        async with self._mutation(
            actor,
            board_id,
            Capability.MANAGE_MEMBERS,
            BoardOperation.REMOVE_MEMBER,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.remove_member(user_id)
        return board

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    async def create_column(
        self,
        actor: Actor,
        board_id: BoardId,
        title: str,
        column_type: ColumnType | str,
        settings: Mapping[str, Any] | None = None,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Column:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.CREATE_COLUMN,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            column = board.add_column(title, column_type, settings)
        return column

    async def update_column(
        self,
        actor: Actor,
        board_id: BoardId,
        column_id: ColumnId,
        title: str | None = None,
        column_type: ColumnType | str | None = None,
        settings: Mapping[str, Any] | None = None,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Column:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.UPDATE_COLUMN,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            column = board.update_column(
                column_id, title=title, column_type=column_type, settings=settings
            )
        return column

    async def delete_column(
        self,
        actor: Actor,
        board_id: BoardId,
        column_id: ColumnId,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> None:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.DELETE_COLUMN,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.remove_column(column_id)

    async def reorder_columns(
        self,
        actor: Actor,
        board_id: BoardId,
        new_order: Sequence[ColumnId],
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Board:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.REORDER_COLUMNS,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.reorder_columns(new_order)
        return board

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    async def create_group(
        self,
        actor: Actor,
        board_id: BoardId,
        title: str,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Group:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.CREATE_GROUP,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            group = board.add_group(title)
        return group

    async def update_group(
        self,
        actor: Actor,
        board_id: BoardId,
        group_id: GroupId,
        title: str,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Group:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.UPDATE_GROUP,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            group = board.update_group(group_id, title)
        return group

    async def delete_group(
        self,
        actor: Actor,
        board_id: BoardId,
        group_id: GroupId,
        cascade: CascadePolicy,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Board:
        """Delete a group, deleting or reassigning its items per ``cascade``.

        Raises:
            NotFoundError: If the board or group does not exist
            InvalidOperationError: If the reassignment target is missing or
                is the deleted group
        """
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.DELETE_GROUP,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.remove_group(group_id, cascade, actor.user_id)
        return board

    async def reorder_groups(
        self,
        actor: Actor,
        board_id: BoardId,
        new_order: Sequence[GroupId],
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Board:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.REORDER_GROUPS,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.reorder_groups(new_order)
        return board

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def create_item(
        self,
        actor: Actor,
        board_id: BoardId,
        group_id: GroupId,
        title: str,
        description: str | None = None,
        values: Mapping[str, Any] | None = None,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Item:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.CREATE_ITEM,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            item = board.add_item(
                group_id,
                title,
                actor.user_id,
                description=description,
                values=values,
            )
        return item

    async def update_item(
        self,
        actor: Actor,
        board_id: BoardId,
        item_id: ItemId,
        title: str | None = None,
        description: str | None = None,
        values: Mapping[str, Any] | None = None,
        group_id: GroupId | None = None,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Item:
        """Merge fields into an item.

        Raises:
            InvalidOperationError: If group_id is given; use move_item to
                change an item's group
        """
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.UPDATE_ITEM,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            if group_id is not None:
                raise InvalidOperationError(
                    "An item's group can only be changed with move_item"
                )
            item = board.update_item(
                item_id,
                actor.user_id,
                title=title,
                description=description,
                values=values,
            )
        return item

    async def delete_item(
        self,
        actor: Actor,
        board_id: BoardId,
        item_id: ItemId,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> None:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.DELETE_ITEM,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.remove_item(item_id)

    async def move_item(
        self,
        actor: Actor,
        board_id: BoardId,
        item_id: ItemId,
        target_group_id: GroupId,
        position: int | None = None,
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Item:
        """Move an item to a position in a group of the same board.

        Raises:
            NotFoundError: If the item or target group does not exist
            InvalidOperationError: If the target group belongs to another board
        """
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.MOVE_ITEM,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            if board.find_group(target_group_id) is None:
                await self._reject_foreign_group(board_id, target_group_id)
            board.move_item(item_id, target_group_id, actor.user_id, position)
        return board.get_item(item_id)

    async def reorder_items(
        self,
        actor: Actor,
        board_id: BoardId,
        group_id: GroupId,
        new_order: Sequence[ItemId],
        *,
        expected_version: int | None = None,
        timeout: float | None = None,
    ) -> Board:
        async with self._mutation(
            actor,
            board_id,
            Capability.WRITE,
            BoardOperation.REORDER_ITEMS,
            expected_version=expected_version,
            timeout=timeout,
        ) as board:
            board.reorder_items(group_id, new_order)
        return board

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _mutation(
        self,
        actor: Actor,
        board_id: BoardId,
        capability: Capability,
        operation: BoardOperation,
        *,
        expected_version: int | None,
        timeout: float | None,
    ) -> AsyncIterator[Board]:
        """Run the body against a freshly loaded board and commit it.

        The body mutates the yielded board. If it raises, nothing is saved
        or published.
        """
        try:
            async with self._locks.hold(board_id.value, self._resolve_timeout(timeout)):
                board = await self._load_authorized(actor, board_id, capability)
                self._check_version(board, expected_version)
                loaded_version = board.version

                yield board

                board.verify_integrity()
                await self._repository.save(board, expected_version=loaded_version)
                self._publish(board)
        except BoardError as e:
            self._probe.mutation_rejected(
                board_id=board_id.value,
                operation=operation.value,
                user_id=actor.user_id.value,
                error=str(e),
            )
            raise

        self._probe.mutation_committed(
            board_id=board_id.value,
            operation=operation.value,
            version=board.version,
            user_id=actor.user_id.value,
        )

    async def _load_authorized(
        self,
        actor: Actor,
        board_id: BoardId,
        capability: Capability,
    ) -> Board:
        board = await self._repository.load(board_id)
        if board is None:
            raise NotFoundError("board", board_id)
        self._guard.require(actor, board, capability)
        return board

    def _check_version(self, board: Board, expected_version: int | None) -> None:
        if expected_version is not None and board.version != expected_version:
            raise VersionConflictError(
                board_id=board.id,
                expected=expected_version,
                actual=board.version,
            )

    async def _reject_foreign_group(self, board_id: BoardId, group_id: GroupId) -> None:
        # The error type still tells a writer that the group exists on some
        # board; the message names neither that board nor the group.
        owner = await self._repository.find_board_id_by_group(group_id)
        if owner is not None and owner != board_id:
            raise InvalidOperationError(
                "Target group is not on this board; "
                "items cannot be moved between boards"
            )
        raise NotFoundError("group", group_id)

    def _publish(self, board: Board) -> None:
        for change in self._translator.translate_all(board.collect_events()):
            self._propagator.publish(board.id.value, change)

    def _resolve_timeout(self, timeout: float | None) -> float | None:
        return self._default_timeout if timeout is None else timeout
