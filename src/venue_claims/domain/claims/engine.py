"""Claim workflow engine: submission and administrator decisions."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from venue_claims.config.workflow import WorkflowSettings
from venue_claims.domain.claims import messages
from venue_claims.domain.claims.transitions import ensure_transition
from venue_claims.domain.errors import (
    ClaimNotFoundError,
    DuplicateClaimError,
    EvidenceUploadError,
    OwnershipConflictError,
    PartialTransitionError,
    StorageError,
    ValidationError,
    VenueNotFoundError,
)
from venue_claims.domain.model import (
    BusinessDetails,
    Claim,
    ClaimStatus,
    EvidenceDocument,
    OwnershipRelationship,
    ReconciliationEntry,
    new_id,
    utcnow,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from uuid import UUID

    from venue_claims.domain.claims.relay import NotificationRelay
    from venue_claims.domain.claims.submission import ClaimDetails, EvidenceFile
    from venue_claims.domain.model import NotificationMessage
    from venue_claims.domain.ports import ClaimUnitOfWork, EvidenceStore

log = getLogger(__name__)


class ClaimWorkflow:
    """Orchestrates claim submission and decisioning across the repositories.

    Every mutation of claims, venues and ownership edges happens inside one unit
    of work per call. Notifications are queued in that same unit of work and
    handed to the relay only after commit, so a delivery problem can never undo
    or block the change it reports.
    """

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], ClaimUnitOfWork],
        evidence_store: EvidenceStore,
        relay: NotificationRelay | None = None,
        settings: WorkflowSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._evidence_store = evidence_store
        self._relay = relay
        self._settings = settings or WorkflowSettings()
        self._clock = clock

    # Submission -----------------------------------------------------------------

    def submit(
        self,
        *,
        venue_id: UUID,
        claimant_id: str,
        details: ClaimDetails,
        evidence: Sequence[EvidenceFile] = (),
    ) -> UUID:
        """Submit a claim and return its id.

        Evidence is stored before the claim exists; if any upload fails nothing is
        written. The claim insert precedes the venue counter update, and both commit
        together.
        """

        claim_id = new_id()

        with self._uow_factory() as uow:
            repositories = uow.repositories
            existing = repositories.claims.list_by_claimant(claimant_id)
            if any(
                claim.venue_id == venue_id and claim.status.blocks_new_claim for claim in existing
            ):
                raise DuplicateClaimError(claimant_id, venue_id)
            venue = repositories.venues.get(venue_id)
            if venue is None:
                raise VenueNotFoundError(venue_id)
            venue_name, venue_category = venue.name, venue.category

        documents = self._store_evidence(claim_id, evidence)

        submitted_at = self._clock()
        claim = Claim(
            id=claim_id,
            venue_id=venue_id,
            claimant_id=claimant_id,
            claimant_name=details.claimant_name,
            claimant_email=details.claimant_email,
            venue_name=venue_name,
            venue_category=venue_category,
            business_name=details.business_name,
            business_email=details.business_email,
            business_phone=details.business_phone,
            business_role=details.business_role,
            business_address=details.business_address,
            claim_reason=details.claim_reason,
            additional_info=details.additional_info,
            evidence_documents=documents,
            submitted_at=submitted_at,
        )
        message = messages.claim_received(claim, at=submitted_at)

        with self._uow_factory() as uow:
            repositories = uow.repositories
            repositories.claims.add(claim)
            repositories.venues.mark_pending_claim(venue_id, at=submitted_at)
            repositories.outbox.add(message)
            uow.commit()

        log.info(
            "Claim %s submitted by %s for venue %s with %s evidence file(s)",
            claim_id,
            claimant_id,
            venue_id,
            len(documents),
        )
        self._dispatch(claim_id, [message])
        return claim_id

    def _store_evidence(
        self, claim_id: UUID, files: Sequence[EvidenceFile]
    ) -> tuple[EvidenceDocument, ...]:
        if not files:
            return ()
        try:
            return asyncio.run(self._upload_all(str(claim_id), files))
        except TimeoutError as exc:
            raise EvidenceUploadError(
                None,
                f"uploads did not finish within {self._settings.upload_timeout_seconds}s",
            ) from exc
        except ExceptionGroup as group:
            # Store-reported failures first; anything else a store raises is wrapped too.
            failures = group.subgroup(EvidenceUploadError) or group
            first = failures.exceptions[0]
            if isinstance(first, EvidenceUploadError):
                file_name, reason = first.file_name, first.reason
            else:
                file_name, reason = None, f"{type(first).__name__}: {first}"
            log.warning(
                "Evidence upload for claim %s failed (%s of %s file(s))",
                claim_id,
                len(group.exceptions),
                len(files),
            )
            raise EvidenceUploadError(file_name, reason) from group

    async def _upload_all(
        self, scope_key: str, files: Sequence[EvidenceFile]
    ) -> tuple[EvidenceDocument, ...]:
        async with asyncio.timeout(self._settings.upload_timeout_seconds):
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(self._upload_one(scope_key, item)) for item in files]
        return tuple(task.result() for task in tasks)

    async def _upload_one(self, scope_key: str, item: EvidenceFile) -> EvidenceDocument:
        url = await self._evidence_store.put(scope_key, item.content, item.name)
        return EvidenceDocument(name=item.name, url=url, uploaded_at=self._clock())

    # Decisions ------------------------------------------------------------------

    def approve(self, claim_id: UUID, *, admin_id: str, notes: str = "") -> Claim:
        return self.decide(claim_id, ClaimStatus.APPROVED, admin_id=admin_id, notes=notes)

    def reject(self, claim_id: UUID, *, admin_id: str, reason: str) -> Claim:
        return self.decide(claim_id, ClaimStatus.REJECTED, admin_id=admin_id, notes=reason)

    def decide(
        self,
        claim_id: UUID,
        outcome: ClaimStatus,
        *,
        admin_id: str,
        notes: str | None = None,
    ) -> Claim:
        """Move a pending claim to ``outcome`` and apply the venue side effects.

        A second decision on the same claim fails with ``AlreadyProcessedError``
        and changes nothing.
        """

        try:
            decided, message = self._apply_decision(
                claim_id, ClaimStatus(outcome), admin_id=admin_id, notes=(notes or "").strip()
            )
        except PartialTransitionError as exc:
            self._record_partial_transition(exc)
            raise

        log.info("Claim %s %s by %s", claim_id, decided.status, admin_id)
        self._dispatch(claim_id, [message])
        return decided

    def _apply_decision(
        self,
        claim_id: UUID,
        outcome: ClaimStatus,
        *,
        admin_id: str,
        notes: str,
    ) -> tuple[Claim, NotificationMessage]:
        decided_at = self._clock()
        with self._uow_factory() as uow:
            repositories = uow.repositories
            claim = repositories.claims.get(claim_id)
            if claim is None:
                raise ClaimNotFoundError(claim_id)
            ensure_transition(claim_id, claim.status, outcome)
            if outcome is ClaimStatus.REJECTED and not notes:
                raise ValidationError("A rejection requires a reason")
            if outcome is ClaimStatus.APPROVED:
                venue = repositories.venues.get(claim.venue_id)
                if venue is not None and venue.is_verified:
                    raise OwnershipConflictError(claim.venue_id, venue.verified_owner_id)

            decided = repositories.claims.transition_to_terminal(
                claim_id, outcome, admin_id=admin_id, notes=notes, at=decided_at
            )

            try:
                if outcome is ClaimStatus.APPROVED:
                    repositories.venues.resolve_claim(
                        decided.venue_id,
                        outcome,
                        owner_id=decided.claimant_id,
                        business_details=BusinessDetails(
                            legal_name=decided.business_name,
                            verified_email=decided.business_email,
                            verified_phone=decided.business_phone,
                        ),
                        at=decided_at,
                    )
                    repositories.relationships.add(
                        OwnershipRelationship(
                            user_id=decided.claimant_id,
                            venue_id=decided.venue_id,
                            claim_id=decided.id,
                            created_at=decided_at,
                        )
                    )
                else:
                    repositories.venues.resolve_claim(decided.venue_id, outcome, at=decided_at)
            except (StorageError, VenueNotFoundError) as exc:
                raise PartialTransitionError(
                    claim_id=claim_id,
                    venue_id=decided.venue_id,
                    outcome=outcome,
                    reason=str(exc),
                ) from exc

            if outcome is ClaimStatus.APPROVED:
                message = messages.claim_approved(
                    decided, venue_url=self._settings.venue_url(decided.venue_id), at=decided_at
                )
            else:
                message = messages.claim_rejected(decided, reason=notes, at=decided_at)
            repositories.outbox.add(message)
            uow.commit()
        return decided, message

    def _record_partial_transition(self, error: PartialTransitionError) -> None:
        log.error(
            "Partial transition for claim %s (venue %s, outcome %s): %s",
            error.claim_id,
            error.venue_id,
            error.outcome,
            error.reason,
        )
        entry = ReconciliationEntry(
            claim_id=error.claim_id,
            venue_id=error.venue_id,
            outcome=error.outcome,
            reason=error.reason,
            created_at=self._clock(),
        )
        try:
            with self._uow_factory() as uow:
                uow.repositories.reconciliation.add(entry)
                uow.commit()
        except StorageError:
            log.exception("Could not queue claim %s for reconciliation", error.claim_id)

    # Additional admin actions -----------------------------------------------------

    def request_documents(self, claim_id: UUID, *, admin_id: str, requested: str) -> None:
        """Ask the claimant for more evidence; the claim stays pending."""

        requested = requested.strip()
        if not requested:
            raise ValidationError("Describe which documents are needed")

        with self._uow_factory() as uow:
            repositories = uow.repositories
            claim = repositories.claims.get(claim_id)
            if claim is None:
                raise ClaimNotFoundError(claim_id)
            ensure_transition(claim_id, claim.status, ClaimStatus.APPROVED)
            message = messages.documents_requested(claim, requested=requested, at=self._clock())
            repositories.outbox.add(message)
            uow.commit()

        log.info("Additional documents requested for claim %s by %s", claim_id, admin_id)
        self._dispatch(claim_id, [message])

    # Notifications ----------------------------------------------------------------

    def _dispatch(self, claim_id: UUID, queued: Sequence[NotificationMessage]) -> None:
        if self._relay is None:
            return
        try:
            self._relay.deliver([message.id for message in queued])
        except Exception:  # noqa: BLE001
            log.exception("Notification delivery for claim %s failed; left in outbox", claim_id)
