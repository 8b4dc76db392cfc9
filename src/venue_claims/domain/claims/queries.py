"""Read-side helpers for admin dashboards and claimant pages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from venue_claims.domain.errors import ClaimNotFoundError
from venue_claims.domain.model import ClaimStatus

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from venue_claims.domain.model import Claim, Venue
    from venue_claims.domain.ports import ClaimUnitOfWork


def get_claim(unit_of_work_factory: Callable[[], ClaimUnitOfWork], claim_id: UUID) -> Claim:
    with unit_of_work_factory() as uow:
        claim = uow.repositories.claims.get(claim_id)
    if claim is None:
        raise ClaimNotFoundError(claim_id)
    return claim


def list_claims(
    unit_of_work_factory: Callable[[], ClaimUnitOfWork],
    *,
    status: ClaimStatus | None = ClaimStatus.PENDING,
    limit: int = 50,
) -> list[Claim]:
    """Claims with ``status``, most recent first; all statuses when ``status`` is None."""

    with unit_of_work_factory() as uow:
        claims = uow.repositories.claims
        if status is None:
            return list(claims.list_recent(limit))
        return list(claims.list_by_status(status, limit))


def list_claims_for_venue(
    unit_of_work_factory: Callable[[], ClaimUnitOfWork], venue_id: UUID
) -> list[Claim]:
    with unit_of_work_factory() as uow:
        return list(uow.repositories.claims.list_by_venue(venue_id))


def list_claims_for_claimant(
    unit_of_work_factory: Callable[[], ClaimUnitOfWork], claimant_id: str
) -> list[Claim]:
    with unit_of_work_factory() as uow:
        return list(uow.repositories.claims.list_by_claimant(claimant_id))


def count_pending_claims(unit_of_work_factory: Callable[[], ClaimUnitOfWork]) -> int:
    with unit_of_work_factory() as uow:
        return uow.repositories.claims.count_by_status(ClaimStatus.PENDING)


def is_verified_owner(
    unit_of_work_factory: Callable[[], ClaimUnitOfWork], user_id: str, venue_id: UUID
) -> bool:
    with unit_of_work_factory() as uow:
        venue = uow.repositories.venues.get(venue_id)
    return venue is not None and venue.is_owned_by(user_id)


def list_verified_venues(
    unit_of_work_factory: Callable[[], ClaimUnitOfWork], user_id: str
) -> list[Venue]:
    with unit_of_work_factory() as uow:
        return list(uow.repositories.venues.list_verified_for_owner(user_id))
