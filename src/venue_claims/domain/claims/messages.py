"""Builders for claim lifecycle notification messages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from venue_claims.domain.model import NotificationMessage, NotificationTemplate

if TYPE_CHECKING:
    from datetime import datetime

    from venue_claims.domain.model import Claim


def _base_params(claim: Claim) -> dict[str, object]:
    return {
        "claim_id": str(claim.id),
        "claimant_name": claim.claimant_name,
        "venue_name": claim.venue_name,
    }


def claim_received(claim: Claim, *, at: datetime) -> NotificationMessage:
    return NotificationMessage(
        claim_id=claim.id,
        template=NotificationTemplate.RECEIVED,
        recipient=claim.claimant_email,
        params=_base_params(claim),
        created_at=at,
    )


def claim_approved(claim: Claim, *, venue_url: str, at: datetime) -> NotificationMessage:
    return NotificationMessage(
        claim_id=claim.id,
        template=NotificationTemplate.APPROVED,
        recipient=claim.claimant_email,
        params={**_base_params(claim), "venue_url": venue_url},
        created_at=at,
    )


def claim_rejected(claim: Claim, *, reason: str, at: datetime) -> NotificationMessage:
    return NotificationMessage(
        claim_id=claim.id,
        template=NotificationTemplate.REJECTED,
        recipient=claim.claimant_email,
        params={**_base_params(claim), "reason": reason},
        created_at=at,
    )


def documents_requested(claim: Claim, *, requested: str, at: datetime) -> NotificationMessage:
    return NotificationMessage(
        claim_id=claim.id,
        template=NotificationTemplate.DOCUMENTS_REQUESTED,
        recipient=claim.claimant_email,
        params={**_base_params(claim), "requested_documents": requested},
        created_at=at,
    )
