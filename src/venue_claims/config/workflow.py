"""Claim workflow settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .env import float_env_var, optional_env_var

if TYPE_CHECKING:
    from uuid import UUID

DEFAULT_SITE_BASE_URL = "https://mythirdplace.com"
DEFAULT_UPLOAD_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class WorkflowSettings:
    site_base_url: str = DEFAULT_SITE_BASE_URL
    upload_timeout_seconds: float = DEFAULT_UPLOAD_TIMEOUT_SECONDS

    def venue_url(self, venue_id: UUID) -> str:
        """Return the management link included in approval messages."""
        return f"{self.site_base_url.rstrip('/')}/venues/{venue_id}"


def get_workflow_settings() -> WorkflowSettings:
    return WorkflowSettings(
        site_base_url=optional_env_var("SITE_BASE_URL") or DEFAULT_SITE_BASE_URL,
        upload_timeout_seconds=float_env_var(
            "EVIDENCE_UPLOAD_TIMEOUT_SECONDS", DEFAULT_UPLOAD_TIMEOUT_SECONDS
        ),
    )
