"""Shared fixtures for Boards unit tests."""

import pytest

from boards.application.services import BoardAggregateStore
from boards.domain.access import AccessGuard, role_elevation
from boards.domain.value_objects import Actor, UserId
from boards.infrastructure.change_propagator import InMemoryChangePropagator
from boards.infrastructure.locking import BoardLockRegistry
from boards.infrastructure.memory_repository import InMemoryBoardRepository


@pytest.fixture
def owner() -> Actor:
    return Actor(user_id=UserId(value="owner-1"))


@pytest.fixture
def member() -> Actor:
    return Actor(user_id=UserId(value="member-1"))


@pytest.fixture
def board_admin() -> Actor:
    return Actor(user_id=UserId(value="admin-1"), roles=frozenset({"board_admin"}))


@pytest.fixture
def stranger() -> Actor:
    return Actor(user_id=UserId(value="stranger-1"))


@pytest.fixture
def repository() -> InMemoryBoardRepository:
    return InMemoryBoardRepository()


@pytest.fixture
def locks() -> BoardLockRegistry:
    return BoardLockRegistry()


@pytest.fixture
def propagator() -> InMemoryChangePropagator:
    return InMemoryChangePropagator(queue_size=50)


@pytest.fixture
def store(repository, locks, propagator) -> BoardAggregateStore:
    """Store wired to in-memory infrastructure."""
    return BoardAggregateStore(
        repository=repository,
        locks=locks,
        propagator=propagator,
        guard=AccessGuard(elevation=role_elevation("board_admin")),
        default_timeout=1.0,
    )
