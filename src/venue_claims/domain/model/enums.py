"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ClaimStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not ClaimStatus.PENDING

    @property
    def blocks_new_claim(self) -> bool:
        """Pending and approved claims keep the same claimant from claiming again."""
        return self in {ClaimStatus.PENDING, ClaimStatus.APPROVED}


class VenueClaimStatus(StrEnum):
    UNCLAIMED = "unclaimed"
    PENDING_CLAIM = "pending_claim"
    VERIFIED = "verified"


class BusinessRole(StrEnum):
    OWNER = "owner"
    MANAGER = "manager"
    AUTHORIZED_REPRESENTATIVE = "authorized_representative"


class RelationshipType(StrEnum):
    OWNER = "owner"


class VerificationMethod(StrEnum):
    ADMIN_APPROVAL = "admin_approval"


class NotificationTemplate(StrEnum):
    RECEIVED = "received"
    APPROVED = "approved"
    REJECTED = "rejected"
    DOCUMENTS_REQUESTED = "documentsRequested"
