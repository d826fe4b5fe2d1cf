"""Domain probe for application lifecycle events."""

from __future__ import annotations

from typing import Protocol

import structlog


class StartupProbe(Protocol):
    """Domain probe for application startup and shutdown."""

    def application_started(
        self,
        app_name: str,
        version: str,
        storage_backend: str,
    ) -> None:
        """Record that the application finished starting."""
        ...

    def board_tables_ensured(self) -> None:
        """Record that the board tables were created or already existed."""
        ...

    def application_stopped(self) -> None:
        """Record that the application shut down."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._logger = logger or structlog.get_logger()

    def application_started(
        self,
        app_name: str,
        version: str,
        storage_backend: str,
    ) -> None:
        self._logger.info(
            "application_started",
            app_name=app_name,
            version=version,
            storage_backend=storage_backend,
        )

    def board_tables_ensured(self) -> None:
        self._logger.info("board_tables_ensured")

    def application_stopped(self) -> None:
        self._logger.info("application_stopped")
