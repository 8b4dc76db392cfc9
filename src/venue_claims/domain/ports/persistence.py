"""Ports for persisting claim workflow records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from venue_claims.domain.model import (
    Claim,
    ClaimStatus,
    NotificationMessage,
    OwnershipRelationship,
    ReconciliationEntry,
    Venue,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from venue_claims.domain.model import BusinessDetails, VenueClaimStatus

TEntity = TypeVar("TEntity")


@runtime_checkable
class Repository(Protocol[TEntity]):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ClaimRepository(Repository[Claim], Protocol):
    """Persistence contract for claims.

    ``add`` raises ``DuplicateClaimError`` when the storage-level uniqueness rule on
    active (claimant, venue) pairs is violated and ``StorageError`` on other failures.
    """

    def get(self, claim_id: UUID) -> Claim | None: ...

    def list_by_status(self, status: ClaimStatus, limit: int = 50) -> Sequence[Claim]: ...

    def list_by_venue(self, venue_id: UUID) -> Sequence[Claim]: ...

    def list_by_claimant(self, claimant_id: str) -> Sequence[Claim]: ...

    def list_recent(self, limit: int = 10) -> Sequence[Claim]: ...

    def count_by_status(self, status: ClaimStatus) -> int: ...

    def transition_to_terminal(
        self,
        claim_id: UUID,
        new_status: ClaimStatus,
        *,
        admin_id: str,
        notes: str,
        at: datetime,
    ) -> Claim:
        """Move a pending claim to ``new_status``; ``AlreadyProcessedError`` otherwise."""
        ...


@runtime_checkable
class VenueRepository(Repository[Venue], Protocol):
    """Persistence contract for the ownership slice of venues.

    Counter updates are applied as single read-modify-write statements.
    """

    def get(self, venue_id: UUID) -> Venue | None: ...

    def mark_pending_claim(self, venue_id: UUID, *, at: datetime) -> None: ...

    def resolve_claim(
        self,
        venue_id: UUID,
        outcome: ClaimStatus,
        *,
        owner_id: str | None = None,
        business_details: BusinessDetails | None = None,
        at: datetime,
    ) -> None: ...

    def restore_claim_state(
        self,
        venue_id: UUID,
        *,
        claim_status: VenueClaimStatus,
        pending_claims_count: int,
        owner_id: str | None,
        business_details: BusinessDetails | None,
        verified_at: datetime | None,
    ) -> None: ...

    def list_verified_for_owner(self, user_id: str) -> Sequence[Venue]: ...


@runtime_checkable
class OwnershipRelationshipRepository(Repository[OwnershipRelationship], Protocol):
    def get_owner(self, venue_id: UUID) -> OwnershipRelationship | None: ...

    def list_for_user(self, user_id: str) -> Sequence[OwnershipRelationship]: ...


@runtime_checkable
class NotificationOutboxRepository(Repository[NotificationMessage], Protocol):
    def get(self, message_id: UUID) -> NotificationMessage | None: ...

    def list_undelivered(
        self, *, max_attempts: int, limit: int = 100
    ) -> Sequence[NotificationMessage]: ...

    def list_for_claim(self, claim_id: UUID) -> Sequence[NotificationMessage]: ...


@runtime_checkable
class ReconciliationRepository(Repository[ReconciliationEntry], Protocol):
    def list_open(self, limit: int = 100) -> Sequence[ReconciliationEntry]: ...

    def resolve_for_venue(self, venue_id: UUID, *, at: datetime) -> int: ...
