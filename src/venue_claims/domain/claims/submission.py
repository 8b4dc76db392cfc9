"""Inputs of a claim submission."""

from __future__ import annotations

from dataclasses import dataclass

from venue_claims.domain.model import BusinessRole


@dataclass(frozen=True, slots=True)
class ClaimDetails:
    """Claimant-supplied fields, copied onto the claim as submitted.

    Length and format rules belong to the submission form; the workflow stores
    whatever it is given.
    """

    claimant_name: str
    claimant_email: str
    business_name: str
    business_email: str
    business_phone: str
    business_role: BusinessRole
    claim_reason: str
    additional_info: str = ""
    business_address: str = ""


@dataclass(frozen=True, slots=True)
class EvidenceFile:
    name: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)
