"""Claim verification and ownership transfer workflow."""

from __future__ import annotations

from .engine import ClaimWorkflow
from .queries import (
    count_pending_claims,
    get_claim,
    is_verified_owner,
    list_claims,
    list_claims_for_claimant,
    list_claims_for_venue,
    list_verified_venues,
)
from .reconciliation import (
    QueueReport,
    ReconciliationReport,
    process_reconciliation_queue,
    reconcile_venue,
)
from .relay import DEFAULT_MAX_ATTEMPTS, DeliveryReport, NotificationRelay
from .submission import ClaimDetails, EvidenceFile
from .transitions import CLAIM_TRANSITIONS, allowed_transitions, ensure_transition

__all__ = [
    "CLAIM_TRANSITIONS",
    "DEFAULT_MAX_ATTEMPTS",
    "ClaimDetails",
    "ClaimWorkflow",
    "DeliveryReport",
    "EvidenceFile",
    "NotificationRelay",
    "QueueReport",
    "ReconciliationReport",
    "allowed_transitions",
    "count_pending_claims",
    "ensure_transition",
    "get_claim",
    "is_verified_owner",
    "list_claims",
    "list_claims_for_claimant",
    "list_claims_for_venue",
    "list_verified_venues",
    "process_reconciliation_queue",
    "reconcile_venue",
]
