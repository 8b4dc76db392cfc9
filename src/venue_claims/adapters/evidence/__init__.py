"""Evidence store adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .http import HttpEvidenceStore
from .local import LocalEvidenceStore

if TYPE_CHECKING:
    from venue_claims.config.evidence import EvidenceStoreConfig
    from venue_claims.domain.ports import EvidenceStore

__all__ = ["HttpEvidenceStore", "LocalEvidenceStore", "build_evidence_store"]


def build_evidence_store(config: EvidenceStoreConfig) -> EvidenceStore:
    if config.backend == "http":
        if config.resilience is None:
            raise ValueError("HTTP evidence store requires a resilience configuration")
        return HttpEvidenceStore(config.resilience)
    if config.local_root is None:
        raise ValueError("Local evidence store requires a root directory")
    return LocalEvidenceStore(config.local_root)
