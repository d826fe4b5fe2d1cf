"""Boards presentation layer.

Exposes the board engine over HTTP. The acting user is taken from headers
set by the authenticating gateway in front of this service.
"""

from __future__ import annotations

from boards.presentation.routes import router

__all__ = ["router"]
