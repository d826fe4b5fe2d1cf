"""Database engine and session factory singletons.

The board repository opens a session per operation, so the application
shares one engine and one sessionmaker for its whole lifetime.
"""

from __future__ import annotations

import threading

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings, get_settings

_probe = DefaultConnectionProbe()

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None
_engine_lock = threading.Lock()


def get_write_engine() -> AsyncEngine:
    """Return the shared engine, building it and its sessionmaker on first use."""
    global _engine, _sessionmaker
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                db_settings = get_database_settings()
                engine = create_write_engine(
                    db_settings, application_name=get_settings().app_name
                )
                _sessionmaker = async_sessionmaker(
                    engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _engine = engine
                _probe.engine_created(
                    host=db_settings.host,
                    database=db_settings.database,
                    pool_size=db_settings.pool_max_connections,
                )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the shared sessionmaker, creating the engine if needed."""
    get_write_engine()
    assert _sessionmaker is not None
    return _sessionmaker


async def close_database_connections() -> None:
    """Dispose of the pool; the next get_write_engine() call starts a new one."""
    global _engine, _sessionmaker
    if _engine is None:
        return

    engine, _engine, _sessionmaker = _engine, None, None
    await engine.dispose()
    _probe.pool_closed()
