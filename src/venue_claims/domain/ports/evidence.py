"""Port for durable evidence storage."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EvidenceStore(Protocol):
    """Durable binary storage scoped per claim.

    ``put`` returns a stable retrieval URL. Keys must not collide within a scope,
    and failures are reported as ``EvidenceUploadError``.
    """

    async def put(self, scope_key: str, content: bytes, file_name: str) -> str: ...
