"""Claim workflow schema

Revision ID: 0001_claim_workflow_schema
Revises:
Create Date: 2026-10-18

Venues, claims, ownership edges, the notification outbox and the
reconciliation queue.
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_claim_workflow_schema"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ACTIVE_CLAIM_PREDICATE = "status IN ('pending', 'approved')"
OWNER_PREDICATE = "relationship_type = 'owner'"


def _timestamp(name: str, *, nullable: bool = True) -> sa.Column[object]:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    """Create the claim workflow tables and their indexes."""
    op.create_table(
        "venue",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("claim_status", sa.String(32), nullable=False),
        sa.Column("pending_claims_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("verified_owner_id", sa.String(128), nullable=True),
        sa.Column("is_business_verified", sa.Boolean(), nullable=False),
        _timestamp("verification_date"),
        sa.Column("verification_method", sa.String(32), nullable=True),
        sa.Column("business_details", sa.Text(), nullable=True),
        _timestamp("last_claim_at"),
        _timestamp("created_at"),
        sa.CheckConstraint(
            "pending_claims_count >= 0", name="ck_venue_pending_claims_non_negative"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_venue"),
    )
    op.create_index("ix_venue_claim_status", "venue", ["claim_status"])
    op.create_index("ix_venue_verified_owner_id", "venue", ["verified_owner_id"])

    op.create_table(
        "venue_claim",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("venue_id", sa.Uuid(), nullable=False),
        sa.Column("claimant_id", sa.String(128), nullable=False),
        sa.Column("claimant_name", sa.String(255), nullable=False),
        sa.Column("claimant_email", sa.String(320), nullable=False),
        sa.Column("venue_name", sa.String(255), nullable=False),
        sa.Column("venue_category", sa.String(64), nullable=True),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("business_email", sa.String(320), nullable=False),
        sa.Column("business_phone", sa.String(64), nullable=False),
        sa.Column("business_role", sa.String(32), nullable=False),
        sa.Column("business_address", sa.Text(), nullable=False),
        sa.Column("claim_reason", sa.Text(), nullable=False),
        sa.Column("additional_info", sa.Text(), nullable=False),
        sa.Column("evidence_documents", sa.Text(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        _timestamp("submitted_at", nullable=False),
        _timestamp("processed_at"),
        sa.Column("processed_by", sa.String(128), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=False),
        sa.Column("rejection_reason", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["venue_id"], ["venue.id"], name="fk_venue_claim_venue_id_venue"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_venue_claim"),
    )
    op.create_index("ix_venue_claim_venue_id", "venue_claim", ["venue_id"])
    op.create_index("ix_venue_claim_claimant_id", "venue_claim", ["claimant_id"])
    op.create_index(
        "ix_venue_claim_status_submitted_at", "venue_claim", ["status", "submitted_at"]
    )
    op.create_index(
        "uq_venue_claim_active_claimant",
        "venue_claim",
        ["claimant_id", "venue_id"],
        unique=True,
        sqlite_where=sa.text(ACTIVE_CLAIM_PREDICATE),
        postgresql_where=sa.text(ACTIVE_CLAIM_PREDICATE),
    )

    op.create_table(
        "ownership_relationship",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("venue_id", sa.Uuid(), nullable=False),
        sa.Column("relationship_type", sa.String(32), nullable=False),
        sa.Column("claim_id", sa.Uuid(), nullable=True),
        _timestamp("created_at", nullable=False),
        sa.ForeignKeyConstraint(
            ["venue_id"], ["venue.id"], name="fk_ownership_relationship_venue_id_venue"
        ),
        sa.ForeignKeyConstraint(
            ["claim_id"],
            ["venue_claim.id"],
            name="fk_ownership_relationship_claim_id_venue_claim",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_ownership_relationship"),
    )
    op.create_index("ix_ownership_relationship_user_id", "ownership_relationship", ["user_id"])
    op.create_index(
        "uq_ownership_relationship_venue_owner",
        "ownership_relationship",
        ["venue_id"],
        unique=True,
        sqlite_where=sa.text(OWNER_PREDICATE),
        postgresql_where=sa.text(OWNER_PREDICATE),
    )

    op.create_table(
        "notification_outbox",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("claim_id", sa.Uuid(), nullable=True),
        sa.Column("template", sa.String(32), nullable=False),
        sa.Column("recipient", sa.String(320), nullable=False),
        sa.Column("params", sa.JSON(), nullable=False),
        _timestamp("created_at", nullable=False),
        _timestamp("delivered_at"),
        sa.Column("attempts", sa.Integer(), nullable=False),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["claim_id"], ["venue_claim.id"], name="fk_notification_outbox_claim_id_venue_claim"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_notification_outbox"),
    )
    op.create_index(
        "ix_notification_outbox_delivered_at", "notification_outbox", ["delivered_at"]
    )
    op.create_index("ix_notification_outbox_claim_id", "notification_outbox", ["claim_id"])

    op.create_table(
        "claim_reconciliation",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("claim_id", sa.Uuid(), nullable=False),
        sa.Column("venue_id", sa.Uuid(), nullable=False),
        sa.Column("outcome", sa.String(32), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        _timestamp("created_at", nullable=False),
        _timestamp("resolved_at"),
        sa.PrimaryKeyConstraint("id", name="pk_claim_reconciliation"),
    )
    op.create_index("ix_claim_reconciliation_venue_id", "claim_reconciliation", ["venue_id"])


def downgrade() -> None:
    """Drop the claim workflow tables."""
    op.drop_index("ix_claim_reconciliation_venue_id", table_name="claim_reconciliation")
    op.drop_table("claim_reconciliation")
    op.drop_index("ix_notification_outbox_claim_id", table_name="notification_outbox")
    op.drop_index("ix_notification_outbox_delivered_at", table_name="notification_outbox")
    op.drop_table("notification_outbox")
    op.drop_index("uq_ownership_relationship_venue_owner", table_name="ownership_relationship")
    op.drop_index("ix_ownership_relationship_user_id", table_name="ownership_relationship")
    op.drop_table("ownership_relationship")
    op.drop_index("uq_venue_claim_active_claimant", table_name="venue_claim")
    op.drop_index("ix_venue_claim_status_submitted_at", table_name="venue_claim")
    op.drop_index("ix_venue_claim_claimant_id", table_name="venue_claim")
    op.drop_index("ix_venue_claim_venue_id", table_name="venue_claim")
    op.drop_table("venue_claim")
    op.drop_index("ix_venue_verified_owner_id", table_name="venue")
    op.drop_index("ix_venue_claim_status", table_name="venue")
    op.drop_table("venue")
