"""Domain-Oriented Observability for Boards infrastructure.

Probes for persistence, locking and change propagation.
"""

from boards.infrastructure.observability.change_propagator_probe import (
    ChangePropagatorProbe,
    DefaultChangePropagatorProbe,
)
from boards.infrastructure.observability.lock_probe import (
    BoardLockProbe,
    DefaultBoardLockProbe,
)
from boards.infrastructure.observability.repository_probe import (
    BoardRepositoryProbe,
    DefaultBoardRepositoryProbe,
)

__all__ = [
    "BoardLockProbe",
    "DefaultBoardLockProbe",
    "BoardRepositoryProbe",
    "DefaultBoardRepositoryProbe",
    "ChangePropagatorProbe",
    "DefaultChangePropagatorProbe",
]
