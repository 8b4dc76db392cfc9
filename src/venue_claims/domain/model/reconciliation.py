"""Operator-visible records of decisions that could not be fully applied."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from venue_claims.domain.model.entity import Entity, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from venue_claims.domain.model.enums import ClaimStatus


@dataclass(eq=False, kw_only=True)
class ReconciliationEntry(Entity):
    claim_id: UUID
    venue_id: UUID
    outcome: ClaimStatus
    reason: str
    created_at: datetime = field(default_factory=utcnow)
    resolved_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.resolved_at is None
