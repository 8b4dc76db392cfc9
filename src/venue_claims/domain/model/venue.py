"""The ownership slice of a venue listing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from venue_claims.domain.model.entity import Entity
from venue_claims.domain.model.enums import VenueClaimStatus, VerificationMethod

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class BusinessDetails:
    """Business identity echoed onto a venue once its owner is verified."""

    legal_name: str
    verified_email: str = ""
    verified_phone: str = ""


@dataclass(eq=False, kw_only=True)
class Venue(Entity):
    """Venue listing; only the claim-related fields are managed here.

    ``pending_claims_count`` is maintained by atomic increments at the
    repository boundary and must always match the number of pending claims.
    """

    name: str
    category: str | None = None

    claim_status: VenueClaimStatus = VenueClaimStatus.UNCLAIMED
    pending_claims_count: int = 0

    verified_owner_id: str | None = None
    is_business_verified: bool = False
    verification_date: datetime | None = None
    verification_method: VerificationMethod | None = None
    business_details: BusinessDetails | None = None

    last_claim_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def is_verified(self) -> bool:
        return self.claim_status is VenueClaimStatus.VERIFIED

    def is_owned_by(self, user_id: str) -> bool:
        return self.is_verified and self.verified_owner_id == user_id
