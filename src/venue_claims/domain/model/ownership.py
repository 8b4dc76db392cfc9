"""User/venue ownership edges."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from venue_claims.domain.model.entity import Entity, utcnow
from venue_claims.domain.model.enums import RelationshipType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class OwnershipRelationship(Entity):
    """Edge linking a user to a venue; written once, when a claim is approved."""

    user_id: str
    venue_id: UUID
    relationship_type: RelationshipType = RelationshipType.OWNER
    claim_id: UUID | None = None
    created_at: datetime = field(default_factory=utcnow)
