"""Database infrastructure - shared engine and ORM primitives."""

from infrastructure.database.dependencies import (
    close_database_connections,
    get_session_factory,
    get_write_engine,
)

__all__ = [
    "close_database_connections",
    "get_session_factory",
    "get_write_engine",
]
