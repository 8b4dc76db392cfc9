"""Domain port definitions for adapters."""

from __future__ import annotations

from .evidence import EvidenceStore
from .notifications import NotificationDispatcher
from .persistence import (
    ClaimRepository,
    NotificationOutboxRepository,
    OwnershipRelationshipRepository,
    ReconciliationRepository,
    Repository,
    VenueRepository,
)
from .unit_of_work import (
    ClaimRepositories,
    ClaimUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ClaimRepositories",
    "ClaimRepository",
    "ClaimUnitOfWork",
    "EvidenceStore",
    "NotificationDispatcher",
    "NotificationOutboxRepository",
    "OwnershipRelationshipRepository",
    "ReconciliationRepository",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
    "VenueRepository",
]
