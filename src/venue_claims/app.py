"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from venue_claims.adapters.evidence import build_evidence_store
from venue_claims.adapters.notifications import build_notification_dispatcher
from venue_claims.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    is_started,
    startup,
)
from venue_claims.config import (
    get_evidence_store_config,
    get_notification_config,
    get_workflow_settings,
)
from venue_claims.domain.claims import (
    ClaimWorkflow,
    DeliveryReport,
    NotificationRelay,
    QueueReport,
    ReconciliationReport,
    process_reconciliation_queue,
    reconcile_venue,
)
from venue_claims.domain.claims import queries as claim_queries
from venue_claims.domain.model import ClaimStatus, Venue, utcnow
from venue_claims.domain.ports.unit_of_work import ClaimUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from venue_claims.config import WorkflowSettings
    from venue_claims.domain.claims import ClaimDetails, EvidenceFile
    from venue_claims.domain.model import Claim
    from venue_claims.domain.ports import EvidenceStore, NotificationDispatcher

UnitOfWorkFactory = Callable[[], ClaimUnitOfWork]


log = getLogger(__name__)


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyClaimUnitOfWork


def build_notification_relay(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> NotificationRelay:
    return NotificationRelay(
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        dispatcher=dispatcher or build_notification_dispatcher(get_notification_config()),
    )


def build_claim_workflow(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    evidence_store: EvidenceStore | None = None,
    dispatcher: NotificationDispatcher | None = None,
    settings: WorkflowSettings | None = None,
) -> ClaimWorkflow:
    """Wire the workflow to the configured database, evidence store and dispatcher."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    return ClaimWorkflow(
        unit_of_work_factory=effective_uow,
        evidence_store=evidence_store or build_evidence_store(get_evidence_store_config()),
        relay=build_notification_relay(unit_of_work_factory=effective_uow, dispatcher=dispatcher),
        settings=settings or get_workflow_settings(),
    )


def register_venue(
    *,
    name: str,
    category: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Venue:
    """Create an unclaimed venue listing."""

    venue = Venue(name=name, category=category, created_at=utcnow())
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        uow.repositories.venues.add(venue)
        uow.commit()
    log.info("Registered venue %s (%s)", venue.id, name)
    return venue


def submit_claim(
    *,
    venue_id: UUID,
    claimant_id: str,
    details: ClaimDetails,
    evidence: Sequence[EvidenceFile] = (),
    workflow: ClaimWorkflow | None = None,
) -> UUID:
    effective_workflow = workflow or build_claim_workflow()
    return effective_workflow.submit(
        venue_id=venue_id, claimant_id=claimant_id, details=details, evidence=evidence
    )


def decide_claim(
    claim_id: UUID,
    outcome: ClaimStatus,
    *,
    admin_id: str,
    notes: str | None = None,
    workflow: ClaimWorkflow | None = None,
) -> Claim:
    effective_workflow = workflow or build_claim_workflow()
    return effective_workflow.decide(claim_id, outcome, admin_id=admin_id, notes=notes)


def request_claim_documents(
    claim_id: UUID,
    *,
    admin_id: str,
    requested: str,
    workflow: ClaimWorkflow | None = None,
) -> None:
    effective_workflow = workflow or build_claim_workflow()
    effective_workflow.request_documents(claim_id, admin_id=admin_id, requested=requested)


def list_claims(
    *,
    status: ClaimStatus | None = ClaimStatus.PENDING,
    limit: int = 50,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[Claim]:
    return claim_queries.list_claims(
        _unit_of_work_factory(unit_of_work_factory), status=status, limit=limit
    )


def get_claim(claim_id: UUID, *, unit_of_work_factory: UnitOfWorkFactory | None = None) -> Claim:
    return claim_queries.get_claim(_unit_of_work_factory(unit_of_work_factory), claim_id)


def flush_notifications(
    *,
    limit: int = 100,
    relay: NotificationRelay | None = None,
) -> DeliveryReport:
    """Retry queued notifications that have not been delivered yet."""

    effective_relay = relay or build_notification_relay()
    return effective_relay.flush(limit=limit)


def reconcile(
    venue_id: UUID | None = None,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReconciliationReport | QueueReport:
    """Reconcile one venue, or every venue with an open reconciliation entry."""

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    if venue_id is not None:
        return reconcile_venue(venue_id, unit_of_work_factory=effective_uow)

    report = process_reconciliation_queue(unit_of_work_factory=effective_uow)
    log.info(
        "Reconciliation finished: venues=%s, changed=%s, missing=%s",
        len(report.reports),
        report.changed_count,
        len(report.missing_venues),
    )
    return report
