from __future__ import annotations

from uuid import uuid4

import pytest

from venue_claims.domain.claims import CLAIM_TRANSITIONS, allowed_transitions, ensure_transition
from venue_claims.domain.errors import AlreadyProcessedError, InvalidTransitionError
from venue_claims.domain.model import ClaimStatus


def test_pending_claims_can_be_approved_or_rejected() -> None:
    assert allowed_transitions(ClaimStatus.PENDING) == {
        ClaimStatus.APPROVED,
        ClaimStatus.REJECTED,
    }


@pytest.mark.parametrize("status", [ClaimStatus.APPROVED, ClaimStatus.REJECTED])
def test_terminal_states_have_no_exits(status: ClaimStatus) -> None:
    assert CLAIM_TRANSITIONS[status] == frozenset()
    assert status.is_terminal

    with pytest.raises(AlreadyProcessedError) as exc_info:
        ensure_transition(uuid4(), status, ClaimStatus.APPROVED)
    assert exc_info.value.status is status


def test_pending_to_pending_is_invalid() -> None:
    with pytest.raises(InvalidTransitionError):
        ensure_transition(uuid4(), ClaimStatus.PENDING, ClaimStatus.PENDING)


def test_pending_to_terminal_is_allowed() -> None:
    ensure_transition(uuid4(), ClaimStatus.PENDING, ClaimStatus.REJECTED)


def test_only_active_claims_block_new_ones() -> None:
    assert ClaimStatus.PENDING.blocks_new_claim
    assert ClaimStatus.APPROVED.blocks_new_claim
    assert not ClaimStatus.REJECTED.blocks_new_claim
