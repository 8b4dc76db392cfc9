"""Public domain model surface."""

from __future__ import annotations

from venue_claims.domain.model.claim import Claim, EvidenceDocument
from venue_claims.domain.model.entity import Entity, new_id, utcnow
from venue_claims.domain.model.enums import (
    BusinessRole,
    ClaimStatus,
    NotificationTemplate,
    RelationshipType,
    VenueClaimStatus,
    VerificationMethod,
)
from venue_claims.domain.model.outbox import NotificationMessage
from venue_claims.domain.model.ownership import OwnershipRelationship
from venue_claims.domain.model.reconciliation import ReconciliationEntry
from venue_claims.domain.model.venue import BusinessDetails, Venue

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "utcnow",
    # claims
    "Claim",
    "EvidenceDocument",
    # venues
    "Venue",
    "BusinessDetails",
    # ownership
    "OwnershipRelationship",
    # notifications
    "NotificationMessage",
    # reconciliation
    "ReconciliationEntry",
    # enums
    "BusinessRole",
    "ClaimStatus",
    "NotificationTemplate",
    "RelationshipType",
    "VenueClaimStatus",
    "VerificationMethod",
]
