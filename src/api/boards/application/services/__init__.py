"""Application services for the Boards bounded context.

Application services orchestrate the Board aggregate, its repository, the
per-board locks and change propagation to fulfill use cases.
"""

from boards.application.services.board_aggregate_store import BoardAggregateStore

__all__ = [
    "BoardAggregateStore",
]
