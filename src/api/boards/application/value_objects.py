"""Application-layer value objects for the Boards bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from boards.domain.aggregates.board import (
    DEFAULT_COLUMN_TITLE,
    DEFAULT_GROUP_TITLE,
    DEFAULT_STATUS_OPTIONS,
)


@dataclass(frozen=True)
class BoardTemplate:
    """Structure every new board is seeded with.

    Attributes:
        column_title: Title of the default status column
        status_options: Options of the default status column
        group_title: Title of the default group
    """

    column_title: str = DEFAULT_COLUMN_TITLE
    status_options: tuple[str, ...] = DEFAULT_STATUS_OPTIONS
    group_title: str = DEFAULT_GROUP_TITLE
