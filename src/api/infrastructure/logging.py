"""Structlog configuration for the application.

Console output for development, JSON for production, with the service
name and version stamped on every record.
"""

import logging
import os
import sys
from typing import Literal

import structlog

LogFormat = Literal["auto", "console", "json"]


def _wants_console(log_format: LogFormat) -> bool:
    if log_format != "auto":
        return log_format == "console"
    # FORCE_COLOR=1 enables colors even in non-TTY environments (like Docker)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return force_color or sys.stdout.isatty()


def configure_logging(
    level: str = "INFO",
    log_format: LogFormat = "auto",
    service: str | None = None,
    version: str | None = None,
) -> None:
    """Configure structlog processors and renderer.

    Args:
        level: Minimum level name (e.g. "DEBUG", "INFO")
        log_format: "console", "json", or "auto" to choose by terminal
        service: Service name added to every record when given
        version: Service version added to every record when given
    """
    service_context = {
        key: value
        for key, value in (("service", service), ("version", version))
        if value is not None
    }

    def add_service_context(
        logger: structlog.types.WrappedLogger,
        method_name: str,
        event_dict: structlog.types.EventDict,
    ) -> structlog.types.EventDict:
        for key, value in service_context.items():
            event_dict.setdefault(key, value)
        return event_dict

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if _wants_console(log_format):
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [
                structlog.processors.dict_tracebacks,
                structlog.processors.JSONRenderer(),
            ]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
