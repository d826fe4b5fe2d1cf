"""Domain probes for database connectivity.

Following Domain-Oriented Observability, these probes record the life of the
connection pools used by the PostgreSQL board repository.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class ConnectionProbe(Protocol):
    """Domain probe for database connection pool events."""

    def engine_created(self, host: str, database: str, pool_size: int) -> None:
        """Record that an engine and its pool were created."""
        ...

    def pool_closed(self) -> None:
        """Record that a connection pool was disposed."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger()

    def engine_created(self, host: str, database: str, pool_size: int) -> None:
        self._logger.info(
            "database_engine_created",
            host=host,
            database=database,
            pool_size=pool_size,
        )

    def pool_closed(self) -> None:
        self._logger.info("database_pool_closed")
