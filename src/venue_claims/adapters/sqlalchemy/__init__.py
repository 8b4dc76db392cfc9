"""SQLAlchemy adapter package for the claim workflow."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyClaimRepository,
    SqlAlchemyNotificationOutboxRepository,
    SqlAlchemyOwnershipRelationshipRepository,
    SqlAlchemyReconciliationRepository,
    SqlAlchemyVenueRepository,
)
from .unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyClaimRepository",
    "SqlAlchemyClaimUnitOfWork",
    "SqlAlchemyNotificationOutboxRepository",
    "SqlAlchemyOwnershipRelationshipRepository",
    "SqlAlchemyReconciliationRepository",
    "SqlAlchemyVenueRepository",
    "StartupError",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
