"""The claim state machine.

``Submitted`` exists only while a submission is being created, so the persisted
table starts at ``pending``. Terminal states have no outgoing transitions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from venue_claims.domain.errors import AlreadyProcessedError, InvalidTransitionError
from venue_claims.domain.model import ClaimStatus

if TYPE_CHECKING:
    from uuid import UUID

CLAIM_TRANSITIONS: Final[dict[ClaimStatus, frozenset[ClaimStatus]]] = {
    ClaimStatus.PENDING: frozenset({ClaimStatus.APPROVED, ClaimStatus.REJECTED}),
    ClaimStatus.APPROVED: frozenset(),
    ClaimStatus.REJECTED: frozenset(),
}


def allowed_transitions(current: ClaimStatus) -> frozenset[ClaimStatus]:
    return CLAIM_TRANSITIONS[current]


def ensure_transition(claim_id: UUID, current: ClaimStatus, requested: ClaimStatus) -> None:
    """Raise unless ``current -> requested`` is in the transition table."""

    if current.is_terminal:
        raise AlreadyProcessedError(claim_id, current)
    if requested not in CLAIM_TRANSITIONS[current]:
        raise InvalidTransitionError(current, requested)
