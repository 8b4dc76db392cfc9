"""Filesystem-backed evidence store."""

from __future__ import annotations

import asyncio
import hashlib
import re
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from uuid import uuid4

from venue_claims.domain.errors import EvidenceUploadError

log = getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_MAX_NAME_LENGTH = 100


def safe_file_name(file_name: str) -> str:
    """Reduce a client-supplied file name to a single safe path segment."""

    base = Path(file_name.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return (cleaned or "evidence")[-_MAX_NAME_LENGTH:]


def content_key(content: bytes, file_name: str) -> str:
    digest = hashlib.sha256(content).hexdigest()[:16]
    return f"{digest}-{safe_file_name(file_name)}"


@dataclass(slots=True)
class LocalEvidenceStore:
    """Stores evidence under ``<root>/claims/<scope>/`` and returns ``file://`` URLs.

    Keys are derived from the content hash, so the same bytes under the same name
    land on the same path and distinct uploads never overwrite each other.
    """

    root: Path

    async def put(self, scope_key: str, content: bytes, file_name: str) -> str:
        target = self.root / "claims" / safe_file_name(scope_key) / content_key(content, file_name)
        try:
            await asyncio.to_thread(self._write, target, content)
        except OSError as exc:
            raise EvidenceUploadError(file_name, str(exc)) from exc
        log.debug("Stored evidence %s (%s bytes)", target, len(content))
        return target.resolve().as_uri()

    @staticmethod
    def _write(target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists():
            return
        # Concurrent writers of the same key each get their own temp file;
        # whichever replace lands last leaves identical bytes behind.
        partial = target.with_name(f".{target.name}.{uuid4().hex}.part")
        try:
            partial.write_bytes(content)
            partial.replace(target)
        finally:
            partial.unlink(missing_ok=True)
