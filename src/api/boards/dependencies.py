"""FastAPI dependency injection for the Boards context.

Provides the acting user and the application-wide BoardAggregateStore for
route handlers using FastAPI's dependency injection system.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Header, HTTPException, status

from boards.application.services import BoardAggregateStore
from boards.application.value_objects import BoardTemplate
from boards.domain.access import AccessGuard, role_elevation
from boards.domain.value_objects import Actor, UserId
from boards.infrastructure.change_propagator import InMemoryChangePropagator
from boards.infrastructure.locking import BoardLockRegistry
from boards.infrastructure.memory_repository import InMemoryBoardRepository
from boards.infrastructure.sql_repository import SqlBoardRepository
from boards.ports.repositories import IBoardRepository
from infrastructure.database.dependencies import get_session_factory
from infrastructure.settings import get_board_settings


def get_current_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_roles: Annotated[str | None, Header()] = None,
) -> Actor:
    """Build the acting user from headers set by the authenticating gateway.

    Args:
        x_actor_id: Verified user id (X-Actor-Id)
        x_actor_roles: Comma-separated role tags (X-Actor-Roles)

    Returns:
        The Actor for this request

    Raises:
        HTTPException: 401 if no actor id was supplied
    """
    if x_actor_id is None or not x_actor_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Actor-Id header",
        )

    roles = frozenset(
        role.strip() for role in (x_actor_roles or "").split(",") if role.strip()
    )
    return Actor(user_id=UserId.from_string(x_actor_id), roles=roles)


def get_board_repository() -> IBoardRepository:
    """Get the repository for the configured storage backend."""
    settings = get_board_settings()
    if settings.storage_backend == "postgres":
        return SqlBoardRepository(session_factory=get_session_factory())
    return InMemoryBoardRepository()


@lru_cache
def get_board_store() -> BoardAggregateStore:
    """Get the application-wide BoardAggregateStore (singleton).

    Locks and subscriptions live in this instance, so every request must
    share it.
    """
    settings = get_board_settings()
    elevation = (
        role_elevation(settings.elevated_member_role)
        if settings.elevated_member_role
        else None
    )
    return BoardAggregateStore(
        repository=get_board_repository(),
        locks=BoardLockRegistry(),
        propagator=InMemoryChangePropagator(
            queue_size=settings.subscriber_queue_size
        ),
        guard=AccessGuard(elevation=elevation),
        template=BoardTemplate(
            column_title=settings.default_column_title,
            status_options=tuple(settings.default_status_options),
            group_title=settings.default_group_title,
        ),
        default_timeout=settings.lock_timeout_seconds,
    )
