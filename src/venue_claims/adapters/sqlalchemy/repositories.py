"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from venue_claims.adapters.sqlalchemy.mappings import (
    ACTIVE_CLAIM_INDEX,
    claim_reconciliation_table,
    notification_outbox_table,
    ownership_relationship_table,
    venue_claim_table,
    venue_table,
)
from venue_claims.domain.errors import (
    AlreadyProcessedError,
    ClaimNotFoundError,
    DuplicateClaimError,
    StorageError,
    VenueNotFoundError,
)
from venue_claims.domain.model import (
    Claim,
    ClaimStatus,
    NotificationMessage,
    OwnershipRelationship,
    ReconciliationEntry,
    RelationshipType,
    Venue,
    VenueClaimStatus,
    VerificationMethod,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy import CursorResult, Executable
    from sqlalchemy.orm import Session

    from venue_claims.domain.model import BusinessDetails


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate driver failures into ``StorageError``."""

    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"Could not {action}: {exc}") from exc


def _is_active_claim_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return ACTIVE_CLAIM_INDEX in message or "venue_claim.claimant_id" in message


class _SessionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def _execute_update(self, stmt: Executable, action: str) -> int:
        with storage_errors(action):
            self.session.flush()
            result = cast("CursorResult[Any]", self.session.execute(stmt))
        return result.rowcount


class SqlAlchemyClaimRepository(_SessionRepository):
    def add(self, entity: Claim) -> None:
        self.session.add(entity)
        try:
            self.session.flush()
        except IntegrityError as exc:
            if _is_active_claim_violation(exc):
                raise DuplicateClaimError(entity.claimant_id, entity.venue_id) from exc
            raise StorageError(f"Could not store claim {entity.id}: {exc}") from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not store claim {entity.id}: {exc}") from exc

    def get(self, claim_id: UUID) -> Claim | None:
        with storage_errors(f"load claim {claim_id}"):
            return self.session.get(Claim, claim_id)

    def list_by_status(self, status: ClaimStatus, limit: int = 50) -> Sequence[Claim]:
        stmt = (
            select(Claim)
            .where(venue_claim_table.c.status == status)
            .order_by(venue_claim_table.c.submitted_at.desc())
            .limit(limit)
        )
        with storage_errors(f"list {status} claims"):
            return self.session.scalars(stmt).all()

    def list_by_venue(self, venue_id: UUID) -> Sequence[Claim]:
        stmt = (
            select(Claim)
            .where(venue_claim_table.c.venue_id == venue_id)
            .order_by(venue_claim_table.c.submitted_at.desc())
        )
        with storage_errors(f"list claims for venue {venue_id}"):
            return self.session.scalars(stmt).all()

    def list_by_claimant(self, claimant_id: str) -> Sequence[Claim]:
        stmt = (
            select(Claim)
            .where(venue_claim_table.c.claimant_id == claimant_id)
            .order_by(venue_claim_table.c.submitted_at.desc())
        )
        with storage_errors(f"list claims of {claimant_id}"):
            return self.session.scalars(stmt).all()

    def list_recent(self, limit: int = 10) -> Sequence[Claim]:
        stmt = select(Claim).order_by(venue_claim_table.c.submitted_at.desc()).limit(limit)
        with storage_errors("list recent claims"):
            return self.session.scalars(stmt).all()

    def count_by_status(self, status: ClaimStatus) -> int:
        stmt = (
            select(func.count())
            .select_from(venue_claim_table)
            .where(venue_claim_table.c.status == status)
        )
        with storage_errors(f"count {status} claims"):
            return self.session.execute(stmt).scalar_one()

    def transition_to_terminal(
        self,
        claim_id: UUID,
        new_status: ClaimStatus,
        *,
        admin_id: str,
        notes: str,
        at: datetime,
    ) -> Claim:
        values: dict[str, object] = {
            "status": new_status,
            "processed_at": at,
            "processed_by": admin_id,
            "admin_notes": notes,
        }
        if new_status is ClaimStatus.REJECTED:
            values["rejection_reason"] = notes
        stmt = (
            update(venue_claim_table)
            .where(venue_claim_table.c.id == claim_id)
            .where(venue_claim_table.c.status == ClaimStatus.PENDING)
            .values(**values)
        )
        updated = self._execute_update(stmt, f"update claim {claim_id}")
        with storage_errors(f"reload claim {claim_id}"):
            claim = self.session.get(Claim, claim_id, populate_existing=True)
        if claim is None:
            raise ClaimNotFoundError(claim_id)
        if updated == 0:
            raise AlreadyProcessedError(claim_id, claim.status)
        return claim


class SqlAlchemyVenueRepository(_SessionRepository):
    """Venue persistence; counters change only through single UPDATE statements."""

    def add(self, entity: Venue) -> None:
        with storage_errors(f"store venue {entity.id}"):
            self.session.add(entity)
            self.session.flush()

    def get(self, venue_id: UUID) -> Venue | None:
        with storage_errors(f"load venue {venue_id}"):
            return self.session.get(Venue, venue_id)

    def mark_pending_claim(self, venue_id: UUID, *, at: datetime) -> None:
        status = venue_table.c.claim_status
        stmt = (
            update(venue_table)
            .where(venue_table.c.id == venue_id)
            .values(
                pending_claims_count=venue_table.c.pending_claims_count + 1,
                claim_status=case(
                    (status == VenueClaimStatus.UNCLAIMED, VenueClaimStatus.PENDING_CLAIM.value),
                    else_=status,
                ),
                last_claim_at=at,
            )
        )
        self._apply(venue_id, stmt)

    def resolve_claim(
        self,
        venue_id: UUID,
        outcome: ClaimStatus,
        *,
        owner_id: str | None = None,
        business_details: BusinessDetails | None = None,
        at: datetime,
    ) -> None:
        count = venue_table.c.pending_claims_count
        status = venue_table.c.claim_status
        decremented = case((count > 0, count - 1), else_=0)

        if outcome is ClaimStatus.APPROVED:
            values: dict[str, object] = {
                "claim_status": VenueClaimStatus.VERIFIED,
                "verified_owner_id": owner_id,
                "is_business_verified": True,
                "verification_date": at,
                "verification_method": VerificationMethod.ADMIN_APPROVAL,
                "business_details": business_details,
                "pending_claims_count": decremented,
            }
        else:
            # Rejection of the last pending claim releases the venue; a verified
            # venue keeps its owner.
            values = {
                "claim_status": case(
                    (status == VenueClaimStatus.VERIFIED, status),
                    (count > 1, VenueClaimStatus.PENDING_CLAIM.value),
                    else_=VenueClaimStatus.UNCLAIMED.value,
                ),
                "pending_claims_count": decremented,
            }
        stmt = update(venue_table).where(venue_table.c.id == venue_id).values(**values)
        self._apply(venue_id, stmt)

    def restore_claim_state(
        self,
        venue_id: UUID,
        *,
        claim_status: VenueClaimStatus,
        pending_claims_count: int,
        owner_id: str | None,
        business_details: BusinessDetails | None,
        verified_at: datetime | None,
    ) -> None:
        verified = claim_status is VenueClaimStatus.VERIFIED
        stmt = (
            update(venue_table)
            .where(venue_table.c.id == venue_id)
            .values(
                claim_status=claim_status,
                pending_claims_count=pending_claims_count,
                verified_owner_id=owner_id if verified else None,
                is_business_verified=verified,
                verification_date=verified_at if verified else None,
                verification_method=VerificationMethod.ADMIN_APPROVAL if verified else None,
                business_details=business_details if verified else None,
            )
        )
        self._apply(venue_id, stmt)

    def list_verified_for_owner(self, user_id: str) -> Sequence[Venue]:
        stmt = (
            select(Venue)
            .where(venue_table.c.verified_owner_id == user_id)
            .where(venue_table.c.claim_status == VenueClaimStatus.VERIFIED)
            .order_by(venue_table.c.name)
        )
        with storage_errors(f"list venues owned by {user_id}"):
            return self.session.scalars(stmt).all()

    def _apply(self, venue_id: UUID, stmt: Executable) -> None:
        if self._execute_update(stmt, f"update venue {venue_id}") == 0:
            raise VenueNotFoundError(venue_id)
        with storage_errors(f"reload venue {venue_id}"):
            self.session.get(Venue, venue_id, populate_existing=True)


class SqlAlchemyOwnershipRelationshipRepository(_SessionRepository):
    def add(self, entity: OwnershipRelationship) -> None:
        with storage_errors(f"store ownership of venue {entity.venue_id}"):
            self.session.add(entity)
            self.session.flush()

    def get_owner(self, venue_id: UUID) -> OwnershipRelationship | None:
        stmt = (
            select(OwnershipRelationship)
            .where(ownership_relationship_table.c.venue_id == venue_id)
            .where(ownership_relationship_table.c.relationship_type == RelationshipType.OWNER)
            .limit(1)
        )
        with storage_errors(f"load owner of venue {venue_id}"):
            return self.session.scalars(stmt).one_or_none()

    def list_for_user(self, user_id: str) -> Sequence[OwnershipRelationship]:
        stmt = (
            select(OwnershipRelationship)
            .where(ownership_relationship_table.c.user_id == user_id)
            .order_by(ownership_relationship_table.c.created_at.desc())
        )
        with storage_errors(f"list relationships of {user_id}"):
            return self.session.scalars(stmt).all()


class SqlAlchemyNotificationOutboxRepository(_SessionRepository):
    def add(self, entity: NotificationMessage) -> None:
        with storage_errors(f"queue {entity.template} notification"):
            self.session.add(entity)
            self.session.flush()

    def get(self, message_id: UUID) -> NotificationMessage | None:
        with storage_errors(f"load notification {message_id}"):
            return self.session.get(NotificationMessage, message_id)

    def list_undelivered(
        self, *, max_attempts: int, limit: int = 100
    ) -> Sequence[NotificationMessage]:
        outbox = notification_outbox_table.c
        stmt = (
            select(NotificationMessage)
            .where(outbox.delivered_at.is_(None))
            .where(outbox.attempts < max_attempts)
            .order_by(outbox.created_at)
            .limit(limit)
        )
        with storage_errors("list undelivered notifications"):
            return self.session.scalars(stmt).all()

    def list_for_claim(self, claim_id: UUID) -> Sequence[NotificationMessage]:
        stmt = (
            select(NotificationMessage)
            .where(notification_outbox_table.c.claim_id == claim_id)
            .order_by(notification_outbox_table.c.created_at)
        )
        with storage_errors(f"list notifications of claim {claim_id}"):
            return self.session.scalars(stmt).all()


class SqlAlchemyReconciliationRepository(_SessionRepository):
    def add(self, entity: ReconciliationEntry) -> None:
        with storage_errors(f"queue reconciliation of claim {entity.claim_id}"):
            self.session.add(entity)
            self.session.flush()

    def list_open(self, limit: int = 100) -> Sequence[ReconciliationEntry]:
        stmt = (
            select(ReconciliationEntry)
            .where(claim_reconciliation_table.c.resolved_at.is_(None))
            .order_by(claim_reconciliation_table.c.created_at)
            .limit(limit)
        )
        with storage_errors("list open reconciliation entries"):
            return self.session.scalars(stmt).all()

    def resolve_for_venue(self, venue_id: UUID, *, at: datetime) -> int:
        stmt = (
            update(claim_reconciliation_table)
            .where(claim_reconciliation_table.c.venue_id == venue_id)
            .where(claim_reconciliation_table.c.resolved_at.is_(None))
            .values(resolved_at=at)
        )
        return self._execute_update(stmt, f"resolve reconciliation entries of venue {venue_id}")


if TYPE_CHECKING:
    from venue_claims.domain.ports import (
        ClaimRepository,
        NotificationOutboxRepository,
        OwnershipRelationshipRepository,
        ReconciliationRepository,
        VenueRepository,
    )

    def _check_claims(session: Session) -> ClaimRepository:
        return SqlAlchemyClaimRepository(session)

    def _check_venues(session: Session) -> VenueRepository:
        return SqlAlchemyVenueRepository(session)

    def _check_relationships(session: Session) -> OwnershipRelationshipRepository:
        return SqlAlchemyOwnershipRelationshipRepository(session)

    def _check_outbox(session: Session) -> NotificationOutboxRepository:
        return SqlAlchemyNotificationOutboxRepository(session)

    def _check_reconciliation(session: Session) -> ReconciliationRepository:
        return SqlAlchemyReconciliationRepository(session)
