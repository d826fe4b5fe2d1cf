"""Board management routes.

Every mutation accepts an optional ``expected_version`` query parameter.
When given, the write only happens if the board is still at that version.
"""

from __future__ import annotations

from typing import Annotated, Literal, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from boards.application.services import BoardAggregateStore
from boards.dependencies import get_board_store, get_current_actor
from boards.domain.exceptions import (
    BoardError,
    BusyError,
    InvalidReorderError,
    NotFoundError,
    UnauthorizedError,
    VersionConflictError,
)
from boards.domain.value_objects import (
    Actor,
    BoardId,
    CascadePolicy,
    ColumnId,
    DeleteItems,
    GroupId,
    ItemId,
    Reassign,
    UserId,
)
from boards.presentation.models import (
    AddMemberRequest,
    BoardListResponse,
    BoardResponse,
    BoardSummaryResponse,
    ColumnResponse,
    CreateBoardRequest,
    CreateColumnRequest,
    CreateGroupRequest,
    CreateItemRequest,
    GroupResponse,
    ItemListResponse,
    ItemResponse,
    MoveItemRequest,
    ReorderRequest,
    UpdateBoardRequest,
    UpdateColumnRequest,
    UpdateGroupRequest,
    UpdateItemRequest,
)

router = APIRouter(
    prefix="/boards",
    tags=["boards"],
)

CurrentActor = Annotated[Actor, Depends(get_current_actor)]
Store = Annotated[BoardAggregateStore, Depends(get_board_store)]
ExpectedVersion = Annotated[
    int | None,
    Query(ge=1, description="Only write if the board is at this version"),
]

IdT = TypeVar("IdT", BoardId, ColumnId, GroupId, ItemId)


def _parse_id(id_type: type[IdT], value: str, label: str) -> IdT:
    try:
        return id_type.from_string(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} ID format",
        )


def _parse_user_id(value: str) -> UserId:
    try:
        return UserId.from_string(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID",
        )


def _to_http_exception(error: BoardError) -> HTTPException:
    """Map an engine error to its HTTP response.

    Concealed denials get the same 404 as a missing board.
    """
    match error:
        case NotFoundError() | UnauthorizedError(concealed=True):
            return HTTPException(status.HTTP_404_NOT_FOUND, detail=str(error))
        case UnauthorizedError():
            return HTTPException(status.HTTP_403_FORBIDDEN, detail=str(error))
        case VersionConflictError():
            return HTTPException(status.HTTP_409_CONFLICT, detail=str(error))
        case BusyError():
            return HTTPException(
                status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=str(error),
                headers={"Retry-After": "1"},
            )
        case InvalidReorderError():
            return HTTPException(
                status.HTTP_422_UNPROCESSABLE_CONTENT,
                detail={
                    "message": str(error),
                    "missing": list(error.missing),
                    "unexpected": list(error.unexpected),
                },
            )
        case _:
            return HTTPException(status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(error))


# ----------------------------------------------------------------------
# Boards
# ----------------------------------------------------------------------


@router.post(
    "",
    response_model=BoardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a board",
    description="""
Create a board owned by the caller. The board starts with one status column
and one empty group.
""",
    responses={
        201: {"description": "Board created successfully"},
        401: {"description": "Missing actor"},
        422: {"description": "Invalid title"},
    },
)
async def create_board(
    request: CreateBoardRequest,
    actor: CurrentActor,
    store: Store,
) -> BoardResponse:
    try:
        board = await store.create_board(
            actor,
            title=request.title,
            description=request.description,
            settings=request.settings,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return BoardResponse.from_domain(board)


@router.get(
    "",
    response_model=BoardListResponse,
    summary="List boards",
    description="List the boards the caller owns or is a member of.",
)
async def list_boards(actor: CurrentActor, store: Store) -> BoardListResponse:
    boards = await store.list_boards(actor)
    return BoardListResponse(
        boards=[BoardSummaryResponse.from_domain(board) for board in boards],
        count=len(boards),
    )


@router.get(
    "/{board_id}",
    response_model=BoardResponse,
    summary="Get board by ID",
    description="""
Retrieve a whole board. Returns 404 both when the board does not exist and
when the caller is not a member, so board existence is not revealed.
""",
    responses={
        200: {"description": "Board found and returned"},
        400: {"description": "Invalid board ID format"},
        404: {"description": "Board not found"},
    },
)
async def get_board(board_id: str, actor: CurrentActor, store: Store) -> BoardResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    try:
        board = await store.get_board(actor, board_id_obj)
    except BoardError as e:
        raise _to_http_exception(e) from e
    return BoardResponse.from_domain(board)


@router.patch("/{board_id}", response_model=BoardResponse, summary="Update a board")
async def update_board(
    board_id: str,
    request: UpdateBoardRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> BoardResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    try:
        board = await store.update_board(
            actor,
            board_id_obj,
            title=request.title,
            description=request.description,
            settings=request.settings,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return BoardResponse.from_domain(board)


@router.delete(
    "/{board_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a board",
    description="Delete a board with all its columns, groups and items.",
    responses={
        204: {"description": "Board deleted"},
        403: {"description": "Caller may not delete this board"},
        404: {"description": "Board not found"},
    },
)
async def delete_board(
    board_id: str,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> Response:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    try:
        await store.delete_board(actor, board_id_obj, expected_version=expected_version)
    except BoardError as e:
        raise _to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{board_id}/members",
    response_model=BoardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a board member",
)
async def add_member(
    board_id: str,
    request: AddMemberRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> BoardResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    user_id = _parse_user_id(request.user_id)
    try:
        board = await store.add_member(
            actor, board_id_obj, user_id, expected_version=expected_version
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return BoardResponse.from_domain(board)


@router.delete(
    "/{board_id}/members/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a board member",
)
async def remove_member(
    board_id: str,
    user_id: str,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> Response:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    user_id_obj = _parse_user_id(user_id)
    try:
        await store.remove_member(
            actor,
            board_id_obj,
            user_id_obj,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Columns
# ----------------------------------------------------------------------


@router.post(
    "/{board_id}/columns",
    response_model=ColumnResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a column",
)
async def create_column(
    board_id: str,
    request: CreateColumnRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> ColumnResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    try:
        column = await store.create_column(
            actor,
            board_id_obj,
            title=request.title,
            column_type=request.column_type,
            settings=request.settings,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return ColumnResponse.from_domain(column)


@router.put(
    "/{board_id}/columns/order",
    response_model=BoardResponse,
    summary="Reorder columns",
    description="Replace the column order. The ids must be a permutation of the current columns.",
)
async def reorder_columns(
    board_id: str,
    request: ReorderRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> BoardResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    new_order = [_parse_id(ColumnId, value, "column") for value in request.ids]
    try:
        board = await store.reorder_columns(
            actor, board_id_obj, new_order, expected_version=expected_version
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return BoardResponse.from_domain(board)


@router.patch(
    "/{board_id}/columns/{column_id}",
    response_model=ColumnResponse,
    summary="Update a column",
)
async def update_column(
    board_id: str,
    column_id: str,
    request: UpdateColumnRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> ColumnResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    column_id_obj = _parse_id(ColumnId, column_id, "column")
    try:
        column = await store.update_column(
            actor,
            board_id_obj,
            column_id_obj,
            title=request.title,
            column_type=request.column_type,
            settings=request.settings,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return ColumnResponse.from_domain(column)


@router.delete(
    "/{board_id}/columns/{column_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a column",
    description="Delete a column definition. Item values for the column are kept.",
)
async def delete_column(
    board_id: str,
    column_id: str,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> Response:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    column_id_obj = _parse_id(ColumnId, column_id, "column")
    try:
        await store.delete_column(
            actor, board_id_obj, column_id_obj, expected_version=expected_version
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Groups
# ----------------------------------------------------------------------


@router.post(
    "/{board_id}/groups",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a group",
)
async def create_group(
    board_id: str,
    request: CreateGroupRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> GroupResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    try:
        group = await store.create_group(
            actor, board_id_obj, title=request.title, expected_version=expected_version
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return GroupResponse.from_domain(group)


@router.put(
    "/{board_id}/groups/order",
    response_model=BoardResponse,
    summary="Reorder groups",
)
async def reorder_groups(
    board_id: str,
    request: ReorderRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> BoardResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    new_order = [_parse_id(GroupId, value, "group") for value in request.ids]
    try:
        board = await store.reorder_groups(
            actor, board_id_obj, new_order, expected_version=expected_version
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return BoardResponse.from_domain(board)


@router.patch(
    "/{board_id}/groups/{group_id}",
    response_model=GroupResponse,
    summary="Rename a group",
)
async def update_group(
    board_id: str,
    group_id: str,
    request: UpdateGroupRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> GroupResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    group_id_obj = _parse_id(GroupId, group_id, "group")
    try:
        group = await store.update_group(
            actor,
            board_id_obj,
            group_id_obj,
            title=request.title,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return GroupResponse.from_domain(group)


@router.delete(
    "/{board_id}/groups/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a group",
    description="""
Delete a group. The cascade policy is required: `delete_items` deletes the
group's items, `reassign` appends them to `target_group_id`.
""",
)
async def delete_group(
    board_id: str,
    group_id: str,
    actor: CurrentActor,
    store: Store,
    cascade: Annotated[Literal["delete_items", "reassign"], Query()],
    target_group_id: Annotated[str | None, Query()] = None,
    expected_version: ExpectedVersion = None,
) -> Response:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    group_id_obj = _parse_id(GroupId, group_id, "group")

    policy: CascadePolicy
    if cascade == "reassign":
        if target_group_id is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
                detail="target_group_id is required when cascade is reassign",
            )
        policy = Reassign(target_group_id=_parse_id(GroupId, target_group_id, "group"))
    else:
        policy = DeleteItems()

    try:
        await store.delete_group(
            actor,
            board_id_obj,
            group_id_obj,
            policy,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Items
# ----------------------------------------------------------------------


@router.post(
    "/{board_id}/groups/{group_id}/items",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an item",
    description="Create an item at the end of a group.",
)
async def create_item(
    board_id: str,
    group_id: str,
    request: CreateItemRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> ItemResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    group_id_obj = _parse_id(GroupId, group_id, "group")
    try:
        item = await store.create_item(
            actor,
            board_id_obj,
            group_id_obj,
            title=request.title,
            description=request.description,
            values=request.values,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return ItemResponse.from_domain(item)


@router.put(
    "/{board_id}/groups/{group_id}/items/order",
    response_model=BoardResponse,
    summary="Reorder the items of a group",
)
async def reorder_items(
    board_id: str,
    group_id: str,
    request: ReorderRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> BoardResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    group_id_obj = _parse_id(GroupId, group_id, "group")
    new_order = [_parse_id(ItemId, value, "item") for value in request.ids]
    try:
        board = await store.reorder_items(
            actor,
            board_id_obj,
            group_id_obj,
            new_order,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return BoardResponse.from_domain(board)


@router.get(
    "/{board_id}/items",
    response_model=ItemListResponse,
    summary="List items",
    description="List items in display order, optionally only those of one group.",
)
async def list_items(
    board_id: str,
    actor: CurrentActor,
    store: Store,
    group_id: Annotated[str | None, Query()] = None,
) -> ItemListResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    group_id_obj = _parse_id(GroupId, group_id, "group") if group_id else None
    try:
        items = await store.list_items(actor, board_id_obj, group_id=group_id_obj)
    except BoardError as e:
        raise _to_http_exception(e) from e
    return ItemListResponse(
        items=[ItemResponse.from_domain(item) for item in items],
        count=len(items),
    )


@router.get(
    "/{board_id}/items/{item_id}",
    response_model=ItemResponse,
    summary="Get item by ID",
)
async def get_item(
    board_id: str,
    item_id: str,
    actor: CurrentActor,
    store: Store,
) -> ItemResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    item_id_obj = _parse_id(ItemId, item_id, "item")
    try:
        item = await store.get_item(actor, board_id_obj, item_id_obj)
    except BoardError as e:
        raise _to_http_exception(e) from e
    return ItemResponse.from_domain(item)


@router.patch(
    "/{board_id}/items/{item_id}",
    response_model=ItemResponse,
    summary="Update an item",
    description="""
Update an item's title, description or values. Values are merged key by key.
Changing `group_id` here is rejected; use the move endpoint.
""",
)
async def update_item(
    board_id: str,
    item_id: str,
    request: UpdateItemRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> ItemResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    item_id_obj = _parse_id(ItemId, item_id, "item")
    # Any supplied group_id is refused by the store, whatever its format
    group_id_obj = (
        GroupId(value=request.group_id) if request.group_id is not None else None
    )
    try:
        item = await store.update_item(
            actor,
            board_id_obj,
            item_id_obj,
            title=request.title,
            description=request.description,
            values=request.values,
            group_id=group_id_obj,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return ItemResponse.from_domain(item)


@router.delete(
    "/{board_id}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an item",
)
async def delete_item(
    board_id: str,
    item_id: str,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> Response:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    item_id_obj = _parse_id(ItemId, item_id, "item")
    try:
        await store.delete_item(
            actor, board_id_obj, item_id_obj, expected_version=expected_version
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{board_id}/items/{item_id}/move",
    response_model=ItemResponse,
    summary="Move an item",
    description="""
Move an item to a position in a group of the same board. The position is an
index into the target group after the item has been taken out; it is
clamped, and the item is appended when it is omitted.
""",
)
async def move_item(
    board_id: str,
    item_id: str,
    request: MoveItemRequest,
    actor: CurrentActor,
    store: Store,
    expected_version: ExpectedVersion = None,
) -> ItemResponse:
    board_id_obj = _parse_id(BoardId, board_id, "board")
    item_id_obj = _parse_id(ItemId, item_id, "item")
    target_group_id = _parse_id(GroupId, request.target_group_id, "group")
    try:
        item = await store.move_item(
            actor,
            board_id_obj,
            item_id_obj,
            target_group_id,
            position=request.position,
            expected_version=expected_version,
        )
    except BoardError as e:
        raise _to_http_exception(e) from e
    return ItemResponse.from_domain(item)
