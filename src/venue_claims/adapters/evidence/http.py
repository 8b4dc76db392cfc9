"""Evidence store backed by an HTTP object storage service."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from venue_claims.adapters.http_resilience import ResilientClient
from venue_claims.domain.errors import EvidenceUploadError

from .local import content_key, safe_file_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from venue_claims.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


class EvidenceUploadResponse(BaseModel):
    """Body returned by the storage service for a stored object."""

    model_config = ConfigDict(extra="ignore")

    url: str


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpEvidenceStore:
    """PUTs each file to ``claims/<scope>/<key>`` and returns the URL the service reports."""

    resilience: ResilienceConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def put(self, scope_key: str, content: bytes, file_name: str) -> str:
        path = f"claims/{safe_file_name(scope_key)}/{content_key(content, file_name)}"
        try:
            async with self.client_factory(self.resilience) as client:
                response = await client.put(
                    path,
                    content=content,
                    headers={"Content-Type": "application/octet-stream"},
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("Evidence upload of %s failed: %s", file_name, exc)
            raise EvidenceUploadError(file_name, str(exc)) from exc

        try:
            payload = EvidenceUploadResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise EvidenceUploadError(file_name, "storage service returned no URL") from exc
        return payload.url
