"""Access control for boards.

Decides whether an actor may exercise a capability on a board, based only
on the board's owner and member set. The owner holds every capability,
members hold read and write, and anyone else holds nothing (not even read).

Members can be elevated to manage members or delete the board through a
pluggable predicate, so that role-based policies stay outside the aggregate.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from boards.domain.exceptions import UnauthorizedError
from boards.domain.observability import BoardProbe, DefaultBoardProbe
from boards.domain.value_objects import AccessDecision, Actor, Capability

if TYPE_CHECKING:
    from boards.domain.aggregates import Board

ElevationPredicate = Callable[[Actor, "Board", Capability], bool]

MEMBER_CAPABILITIES = frozenset({Capability.READ, Capability.WRITE})


def role_elevation(role: str) -> ElevationPredicate:
    """Build a predicate that elevates members carrying ``role``."""

    def _predicate(actor: Actor, board: Board, capability: Capability) -> bool:
        return actor.has_role(role)

    return _predicate


class AccessGuard:
    """Stateless capability check for board operations."""

    def __init__(
        self,
        elevation: ElevationPredicate | None = None,
        probe: BoardProbe | None = None,
    ) -> None:
        """Initialize the guard.

        Args:
            elevation: Optional predicate consulted for members requesting
                manage_members or delete_board. It is never consulted for
                non-members.
            probe: Optional domain probe for observability
        """
        self._elevation = elevation
        self._probe = probe or DefaultBoardProbe()

    def authorize(
        self,
        actor: Actor,
        board: Board,
        capability: Capability,
    ) -> AccessDecision:
        """Decide whether the actor holds the capability on the board."""
        if board.is_owner(actor.user_id):
            return AccessDecision.ALLOWED

        if not board.is_member(actor.user_id):
            return AccessDecision.DENIED

        if capability in MEMBER_CAPABILITIES:
            return AccessDecision.ALLOWED

        if self._elevation is not None and self._elevation(actor, board, capability):
            return AccessDecision.ALLOWED

        return AccessDecision.DENIED

    def require(self, actor: Actor, board: Board, capability: Capability) -> None:
        """Raise unless the actor holds the capability.

        Raises:
            UnauthorizedError: If denied. The error is concealed (reads like
                "board not found") when the actor cannot read the board.
        """
        if self.authorize(actor, board, capability) is AccessDecision.ALLOWED:
            return

        self._probe.access_denied(
            board_id=board.id.value,
            user_id=actor.user_id.value,
            capability=capability.value,
        )
        raise UnauthorizedError(
            board_id=board.id,
            capability=capability.value,
            concealed=not board.is_member(actor.user_id),
        )
