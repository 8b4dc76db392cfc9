"""Error taxonomy of the claim workflow.

Every error carries ``retryable`` so callers can tell a transient storage
problem from a decision that will never succeed as submitted.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from uuid import UUID

    from venue_claims.domain.model import ClaimStatus


class SubmissionStep(StrEnum):
    """Stage of a submission that failed, reported back to the claimant."""

    DUPLICATE_CHECK = "duplicate_check"
    VENUE_LOOKUP = "venue_lookup"
    EVIDENCE_UPLOAD = "evidence_upload"
    PERSISTENCE = "persistence"


class ClaimWorkflowError(Exception):
    """Base class for all workflow failures."""

    retryable: ClassVar[bool] = False
    step: ClassVar[SubmissionStep | None] = None


class StorageError(ClaimWorkflowError):
    """Raised when a repository cannot read or write its records."""

    retryable = True
    step = SubmissionStep.PERSISTENCE


class VenueNotFoundError(ClaimWorkflowError):
    step = SubmissionStep.VENUE_LOOKUP

    def __init__(self, venue_id: UUID) -> None:
        super().__init__(f"Venue {venue_id} does not exist")
        self.venue_id = venue_id


class ClaimNotFoundError(ClaimWorkflowError):
    def __init__(self, claim_id: UUID) -> None:
        super().__init__(f"Claim {claim_id} does not exist")
        self.claim_id = claim_id


class DuplicateClaimError(ClaimWorkflowError):
    """Raised when the claimant already has a pending or approved claim for the venue."""

    step = SubmissionStep.DUPLICATE_CHECK

    def __init__(self, claimant_id: str, venue_id: UUID) -> None:
        super().__init__(f"Claimant {claimant_id} already has an active claim for venue {venue_id}")
        self.claimant_id = claimant_id
        self.venue_id = venue_id


class EvidenceUploadError(ClaimWorkflowError):
    """Raised when an evidence file cannot be stored; the submission is abandoned."""

    retryable = True
    step = SubmissionStep.EVIDENCE_UPLOAD

    def __init__(self, file_name: str | None, reason: str) -> None:
        target = f"'{file_name}'" if file_name else "evidence"
        super().__init__(f"Upload of {target} failed: {reason}")
        self.file_name = file_name
        self.reason = reason


class AlreadyProcessedError(ClaimWorkflowError):
    """Raised when a decision targets a claim that is no longer pending."""

    def __init__(self, claim_id: UUID, status: ClaimStatus) -> None:
        super().__init__(f"Claim {claim_id} was already processed (status: {status})")
        self.claim_id = claim_id
        self.status = status


class ValidationError(ClaimWorkflowError):
    """Raised when a request is rejected before anything is mutated."""


class InvalidTransitionError(ValidationError):
    def __init__(self, current: ClaimStatus, requested: ClaimStatus) -> None:
        super().__init__(f"Cannot move a claim from {current} to {requested}")
        self.current = current
        self.requested = requested


class OwnershipConflictError(ValidationError):
    """Raised when approving a claim would give a venue a second owner."""

    def __init__(self, venue_id: UUID, owner_id: str | None) -> None:
        super().__init__(f"Venue {venue_id} already has a verified owner ({owner_id})")
        self.venue_id = venue_id
        self.owner_id = owner_id


class PartialTransitionError(ClaimWorkflowError):
    """Raised when the venue or ownership update failed after the claim transition.

    The whole decision is rolled back, so the claim is still pending, and a
    reconciliation entry is recorded. The decision is never retried inside the
    same call.
    """

    def __init__(
        self,
        *,
        claim_id: UUID,
        venue_id: UUID,
        outcome: ClaimStatus,
        reason: str,
    ) -> None:
        super().__init__(
            f"Decision {outcome} on claim {claim_id} was rolled back because venue "
            f"{venue_id} could not be updated: {reason}"
        )
        self.claim_id = claim_id
        self.venue_id = venue_id
        self.outcome = outcome
        self.reason = reason
