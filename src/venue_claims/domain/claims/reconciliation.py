"""Repair of venue ownership state after a partial transition.

Venue fields are derived again from the claims themselves: an approved claim makes
the venue verified, otherwise the pending claims decide between ``pending_claim``
and ``unclaimed``. The counter is recounted rather than adjusted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from venue_claims.domain.errors import VenueNotFoundError
from venue_claims.domain.model import (
    BusinessDetails,
    ClaimStatus,
    OwnershipRelationship,
    VenueClaimStatus,
    utcnow,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from uuid import UUID

    from venue_claims.domain.model import Claim
    from venue_claims.domain.ports import ClaimUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class ReconciliationReport:
    venue_id: UUID
    claim_status: VenueClaimStatus
    pending_claims_count: int
    owner_id: str | None = None
    relationship_created: bool = False
    entries_resolved: int = 0
    changed: bool = False


@dataclass(slots=True)
class QueueReport:
    reports: list[ReconciliationReport] = field(default_factory=list[ReconciliationReport])
    missing_venues: list[UUID] = field(default_factory=list)

    @property
    def changed_count(self) -> int:
        return sum(1 for report in self.reports if report.changed)


def _approved_claim(claims: Sequence[Claim]) -> Claim | None:
    approved = [claim for claim in claims if claim.status is ClaimStatus.APPROVED]
    if not approved:
        return None
    return min(approved, key=lambda claim: claim.processed_at or claim.submitted_at)


def reconcile_venue(
    venue_id: UUID,
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
    clock: Callable[[], datetime] = utcnow,
) -> ReconciliationReport:
    """Recompute the ownership slice of one venue and close its queue entries."""

    now = clock()
    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        venue = repositories.venues.get(venue_id)
        if venue is None:
            raise VenueNotFoundError(venue_id)

        claims = repositories.claims.list_by_venue(venue_id)
        pending = sum(1 for claim in claims if claim.status is ClaimStatus.PENDING)
        approved = _approved_claim(claims)

        relationship_created = False
        if approved is not None:
            claim_status = VenueClaimStatus.VERIFIED
            owner_id: str | None = approved.claimant_id
            details: BusinessDetails | None = BusinessDetails(
                legal_name=approved.business_name,
                verified_email=approved.business_email,
                verified_phone=approved.business_phone,
            )
            verified_at = approved.processed_at or now
            if repositories.relationships.get_owner(venue_id) is None:
                repositories.relationships.add(
                    OwnershipRelationship(
                        user_id=approved.claimant_id,
                        venue_id=venue_id,
                        claim_id=approved.id,
                        created_at=verified_at,
                    )
                )
                relationship_created = True
        else:
            claim_status = (
                VenueClaimStatus.PENDING_CLAIM if pending > 0 else VenueClaimStatus.UNCLAIMED
            )
            owner_id, details, verified_at = None, None, None

        changed = relationship_created or (
            venue.claim_status is not claim_status
            or venue.pending_claims_count != pending
            or venue.verified_owner_id != owner_id
        )
        if changed:
            repositories.venues.restore_claim_state(
                venue_id,
                claim_status=claim_status,
                pending_claims_count=pending,
                owner_id=owner_id,
                business_details=details,
                verified_at=verified_at,
            )
        resolved = repositories.reconciliation.resolve_for_venue(venue_id, at=now)
        uow.commit()

    if changed:
        log.warning(
            "Venue %s reconciled to %s (pending=%s, owner=%s)",
            venue_id,
            claim_status,
            pending,
            owner_id,
        )
    return ReconciliationReport(
        venue_id=venue_id,
        claim_status=claim_status,
        pending_claims_count=pending,
        owner_id=owner_id,
        relationship_created=relationship_created,
        entries_resolved=resolved,
        changed=changed,
    )


def process_reconciliation_queue(
    *,
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
    clock: Callable[[], datetime] = utcnow,
    limit: int = 100,
) -> QueueReport:
    """Reconcile every venue with an open queue entry."""

    with unit_of_work_factory() as uow:
        entries = uow.repositories.reconciliation.list_open(limit)
        venue_ids = list(dict.fromkeys(entry.venue_id for entry in entries))

    queue_report = QueueReport()
    for venue_id in venue_ids:
        try:
            report = reconcile_venue(
                venue_id, unit_of_work_factory=unit_of_work_factory, clock=clock
            )
        except VenueNotFoundError:
            log.warning("Reconciliation entry references missing venue %s", venue_id)
            queue_report.missing_venues.append(venue_id)
            continue
        queue_report.reports.append(report)
    return queue_report
