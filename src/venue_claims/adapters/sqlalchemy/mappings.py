"""SQLAlchemy mapping metadata for the claim workflow model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import Any, Final, cast

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
    orm,
    text,
)
from sqlalchemy.orm import configure_mappers

from venue_claims.domain.model import (
    BusinessDetails,
    BusinessRole,
    Claim,
    ClaimStatus,
    EvidenceDocument,
    NotificationMessage,
    NotificationTemplate,
    OwnershipRelationship,
    ReconciliationEntry,
    RelationshipType,
    Venue,
    VenueClaimStatus,
    VerificationMethod,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

ACTIVE_CLAIM_INDEX: Final[str] = "uq_venue_claim_active_claimant"
VENUE_OWNER_INDEX: Final[str] = "uq_ownership_relationship_venue_owner"

_ACTIVE_CLAIM_PREDICATE: Final[str] = "status IN ('pending', 'approved')"
_OWNER_PREDICATE: Final[str] = "relationship_type = 'owner'"


def _enum_column_type(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
        length=32,
    )


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class EvidenceDocumentsType(TypeDecorator[tuple[EvidenceDocument, ...]]):
    """Evidence references stored as a JSON array on the claim row."""

    impl = Text
    cache_ok = True

    def process_bind_param(
        self, value: tuple[EvidenceDocument, ...] | None, dialect: Dialect
    ) -> str:
        _ = dialect
        payload = [
            {"name": doc.name, "url": doc.url, "uploaded_at": doc.uploaded_at.isoformat()}
            for doc in value or ()
        ]
        return json.dumps(payload)

    def process_result_value(
        self, value: str | None, dialect: Dialect
    ) -> tuple[EvidenceDocument, ...]:
        _ = dialect
        if not value:
            return ()
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return ()
        documents: list[EvidenceDocument] = []
        for item in cast(list[Any], loaded):
            if not isinstance(item, dict):
                continue
            entry = cast(dict[str, Any], item)
            uploaded_at = datetime.fromisoformat(str(entry["uploaded_at"]))
            if uploaded_at.tzinfo is None:
                uploaded_at = uploaded_at.replace(tzinfo=UTC)
            documents.append(
                EvidenceDocument(
                    name=str(entry["name"]), url=str(entry["url"]), uploaded_at=uploaded_at
                )
            )
        return tuple(documents)


class BusinessDetailsType(TypeDecorator[BusinessDetails]):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value: BusinessDetails | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(
            {
                "legal_name": value.legal_name,
                "verified_email": value.verified_email,
                "verified_phone": value.verified_phone,
            }
        )

    def process_result_value(self, value: str | None, dialect: Dialect) -> BusinessDetails | None:
        _ = dialect
        if not value:
            return None
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return None
        payload = cast(dict[str, Any], loaded)
        return BusinessDetails(
            legal_name=str(payload.get("legal_name", "")),
            verified_email=str(payload.get("verified_email", "")),
            verified_phone=str(payload.get("verified_phone", "")),
        )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Venues ----------------------------------------------------------------------

venue_table = Table(
    "venue",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("category", String(64), nullable=True),
    Column(
        "claim_status",
        _enum_column_type(VenueClaimStatus),
        nullable=False,
        default=VenueClaimStatus.UNCLAIMED,
    ),
    Column("pending_claims_count", Integer, nullable=False, default=0, server_default="0"),
    Column("verified_owner_id", String(128), nullable=True),
    Column("is_business_verified", Boolean, nullable=False, default=False),
    Column("verification_date", UTCDateTime(), nullable=True),
    Column("verification_method", _enum_column_type(VerificationMethod), nullable=True),
    Column("business_details", BusinessDetailsType(), nullable=True),
    Column("last_claim_at", UTCDateTime(), nullable=True),
    Column("created_at", UTCDateTime(), nullable=True),
    CheckConstraint("pending_claims_count >= 0", name="pending_claims_non_negative"),
    Index("ix_venue_claim_status", "claim_status"),
    Index("ix_venue_verified_owner_id", "verified_owner_id"),
)

# Claims ----------------------------------------------------------------------

venue_claim_table = Table(
    "venue_claim",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("venue_id", UUIDColumnType, ForeignKey("venue.id"), nullable=False),
    Column("claimant_id", String(128), nullable=False),
    Column("claimant_name", String(255), nullable=False),
    Column("claimant_email", String(320), nullable=False),
    Column("venue_name", String(255), nullable=False),
    Column("venue_category", String(64), nullable=True),
    Column("business_name", String(255), nullable=False),
    Column("business_email", String(320), nullable=False),
    Column("business_phone", String(64), nullable=False),
    Column("business_role", _enum_column_type(BusinessRole), nullable=False),
    Column("business_address", Text, nullable=False, default=""),
    Column("claim_reason", Text, nullable=False),
    Column("additional_info", Text, nullable=False, default=""),
    Column("evidence_documents", EvidenceDocumentsType(), nullable=False),
    Column(
        "status",
        _enum_column_type(ClaimStatus),
        nullable=False,
        default=ClaimStatus.PENDING,
    ),
    Column("submitted_at", UTCDateTime(), nullable=False),
    Column("processed_at", UTCDateTime(), nullable=True),
    Column("processed_by", String(128), nullable=True),
    Column("admin_notes", Text, nullable=False, default=""),
    Column("rejection_reason", Text, nullable=False, default=""),
    Index("ix_venue_claim_venue_id", "venue_id"),
    Index("ix_venue_claim_claimant_id", "claimant_id"),
    Index("ix_venue_claim_status_submitted_at", "status", "submitted_at"),
    Index(
        ACTIVE_CLAIM_INDEX,
        "claimant_id",
        "venue_id",
        unique=True,
        sqlite_where=text(_ACTIVE_CLAIM_PREDICATE),
        postgresql_where=text(_ACTIVE_CLAIM_PREDICATE),
    ),
)

# Ownership -------------------------------------------------------------------

ownership_relationship_table = Table(
    "ownership_relationship",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("user_id", String(128), nullable=False),
    Column("venue_id", UUIDColumnType, ForeignKey("venue.id"), nullable=False),
    Column(
        "relationship_type",
        _enum_column_type(RelationshipType),
        nullable=False,
        default=RelationshipType.OWNER,
    ),
    Column("claim_id", UUIDColumnType, ForeignKey("venue_claim.id"), nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_ownership_relationship_user_id", "user_id"),
    Index(
        VENUE_OWNER_INDEX,
        "venue_id",
        unique=True,
        sqlite_where=text(_OWNER_PREDICATE),
        postgresql_where=text(_OWNER_PREDICATE),
    ),
)

# Notification outbox ---------------------------------------------------------

notification_outbox_table = Table(
    "notification_outbox",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("claim_id", UUIDColumnType, ForeignKey("venue_claim.id"), nullable=True),
    Column("template", _enum_column_type(NotificationTemplate), nullable=False),
    Column("recipient", String(320), nullable=False),
    Column("params", JSON, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("delivered_at", UTCDateTime(), nullable=True),
    Column("attempts", Integer, nullable=False, default=0),
    Column("last_error", Text, nullable=True),
    Index("ix_notification_outbox_delivered_at", "delivered_at"),
    Index("ix_notification_outbox_claim_id", "claim_id"),
)

# Reconciliation queue --------------------------------------------------------

claim_reconciliation_table = Table(
    "claim_reconciliation",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("claim_id", UUIDColumnType, nullable=False),
    Column("venue_id", UUIDColumnType, nullable=False),
    Column("outcome", _enum_column_type(ClaimStatus), nullable=False),
    Column("reason", Text, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("resolved_at", UTCDateTime(), nullable=True),
    Index("ix_claim_reconciliation_venue_id", "venue_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables. Idempotent."""

    log.debug("Mapping claim workflow model")

    mapper_registry.map_imperatively(Venue, venue_table)
    mapper_registry.map_imperatively(Claim, venue_claim_table)
    mapper_registry.map_imperatively(OwnershipRelationship, ownership_relationship_table)
    mapper_registry.map_imperatively(NotificationMessage, notification_outbox_table)
    mapper_registry.map_imperatively(ReconciliationEntry, claim_reconciliation_table)

    configure_mappers()
    return mapper_registry

