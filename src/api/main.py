"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from boards.infrastructure.sql_repository import create_tables
from boards.presentation import router as boards_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_write_engine,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_board_settings, get_settings
from infrastructure.version import __version__


@asynccontextmanager
async def tablero_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Board table bootstrap when boards are stored in PostgreSQL
    - Connection pool lifecycle (created lazily, closed on shutdown)
    """
    settings = get_settings()
    board_settings = get_board_settings()
    probe = DefaultStartupProbe()

    configure_logging(
        settings.log_level,
        log_format=settings.log_format,
        service=settings.app_name,
        version=__version__,
    )

    if board_settings.storage_backend == "postgres":
        await create_tables(get_write_engine())
        probe.board_tables_ensured()

    probe.application_started(
        app_name=settings.app_name,
        version=__version__,
        storage_backend=board_settings.storage_backend,
    )

    yield

    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="Tablero API",
    description="Collaborative boards with consistent structure and live change feeds",
    version=__version__,
    lifespan=tablero_lifespan,
)

# Include Boards bounded context routes
app.include_router(boards_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
