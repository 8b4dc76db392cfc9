"""Claims and the evidence that backs them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from venue_claims.domain.model.entity import Entity
from venue_claims.domain.model.enums import BusinessRole, ClaimStatus

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class EvidenceDocument:
    """A stored evidence file referenced by a claim."""

    name: str
    url: str
    uploaded_at: datetime


@dataclass(eq=False, kw_only=True)
class Claim(Entity):
    """A claimant's assertion of authority over a venue.

    Claimant and venue fields are snapshots taken at submission and are never
    re-synced. Evidence is fixed once the claim exists. ``processed_at`` and
    ``processed_by`` are written exactly once, by the terminal transition.
    """

    venue_id: UUID
    claimant_id: str

    claimant_name: str
    claimant_email: str
    venue_name: str
    venue_category: str | None = None

    business_name: str
    business_email: str
    business_phone: str
    business_role: BusinessRole
    business_address: str = ""
    claim_reason: str
    additional_info: str = ""

    evidence_documents: tuple[EvidenceDocument, ...] = field(default_factory=tuple)

    status: ClaimStatus = ClaimStatus.PENDING
    submitted_at: datetime
    processed_at: datetime | None = None
    processed_by: str | None = None
    admin_notes: str = ""
    rejection_reason: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal
