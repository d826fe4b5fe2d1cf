"""Async SQLAlchemy engine for board storage.

Board saves rely on ``UPDATE ... WHERE version = :expected`` and therefore
run at READ COMMITTED, where a concurrent writer's committed version is
visible to the conditional update.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "build_database_url",
    "create_write_engine",
    "engine_options",
]

DRIVER = "postgresql+asyncpg"


def build_database_url(settings: DatabaseSettings) -> URL:
    """Build the asyncpg URL; credentials are escaped by ``URL`` itself."""
    return URL.create(
        drivername=DRIVER,
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )


def engine_options(
    settings: DatabaseSettings, application_name: str = "tablero-api"
) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    The pool is capped at ``pool_max_connections`` with no overflow, and
    each connection reports ``application_name`` to PostgreSQL.
    """
    return {
        "pool_size": settings.pool_max_connections,
        "max_overflow": 0,
        "pool_pre_ping": True,
        "isolation_level": "READ COMMITTED",
        "connect_args": {"server_settings": {"application_name": application_name}},
    }


def create_write_engine(
    settings: DatabaseSettings, application_name: str = "tablero-api"
) -> AsyncEngine:
    """Create the engine used for board reads and writes."""
    return create_async_engine(
        build_database_url(settings),
        **engine_options(settings, application_name),
    )
