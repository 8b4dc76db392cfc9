"""Outbox records for claim lifecycle notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from venue_claims.domain.model.entity import Entity, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from venue_claims.domain.model.enums import NotificationTemplate


@dataclass(eq=False, kw_only=True)
class NotificationMessage(Entity):
    """A message queued in the same unit of work as the change it announces.

    Delivery happens after commit; undelivered rows stay queued for a later flush.
    """

    claim_id: UUID | None = None
    template: NotificationTemplate
    recipient: str
    params: dict[str, Any] = field(default_factory=dict[str, Any])
    created_at: datetime = field(default_factory=utcnow)
    delivered_at: datetime | None = None
    attempts: int = 0
    last_error: str | None = None

    @property
    def is_delivered(self) -> bool:
        return self.delivered_at is not None
