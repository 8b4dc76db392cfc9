"""Evidence store configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

if TYPE_CHECKING:
    from pathlib import Path

    from .storage import StorageConfig

EVIDENCE_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class EvidenceStoreConfig:
    backend: Literal["local", "http"]
    local_root: Path | None = None
    resilience: ResilienceConfig | None = None


def get_evidence_store_config(*, storage: StorageConfig | None = None) -> EvidenceStoreConfig:
    base_url = optional_env_var("EVIDENCE_STORE_URL")
    if base_url is None:
        storage_config = storage or get_storage_config()
        return EvidenceStoreConfig(backend="local", local_root=storage_config.evidence_path())

    token = require_env_vars(["EVIDENCE_STORE_TOKEN"])["EVIDENCE_STORE_TOKEN"]
    headers = {"Authorization": f"Bearer {token.strip()}"}
    return EvidenceStoreConfig(
        backend="http",
        resilience=ResilienceConfig(
            name="evidence-store",
            base_url=base_url.rstrip("/") + "/",
            timeout_seconds=EVIDENCE_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers=headers,
        ),
    )
