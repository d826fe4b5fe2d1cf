"""Probes for process-level events: database pools and application lifecycle.

Board-specific probes live with the layer they observe under ``boards``.
"""

from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)
from infrastructure.observability.startup_probe import (
    DefaultStartupProbe,
    StartupProbe,
)

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "DefaultStartupProbe",
    "StartupProbe",
]
