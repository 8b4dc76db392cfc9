from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Self

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import RetryTransport

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from venue_claims.config.http_resilience import RateLimit, ResilienceConfig

log = getLogger(__name__)

__all__ = ["ResilientClient", "shared_limiter"]

_limiters: dict[tuple[str, int, float], AsyncLimiter] = {}


def shared_limiter(name: str, limit: RateLimit) -> AsyncLimiter:
    """Return the process-wide limiter for service ``name``.

    Clients are created per upload or e-mail; every client of one service
    draws from this single budget.
    """

    key = (name, limit.max_calls, limit.per_seconds)
    limiter = _limiters.get(key)
    if limiter is None:
        limiter = _limiters[key] = AsyncLimiter(limit.max_calls, limit.per_seconds)
    return limiter


class ResilientClient:
    """Async HTTP client for one outbound service.

    Requests are retried by ``httpx_retries`` and, when the config names a rate
    limit, throttled by the ``AsyncLimiter`` shared by every client of that service.
    ``transport`` sits underneath the retry layer, so a ``httpx.MockTransport``
    still sees every retried attempt.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        limit = config.ratelimit
        self.limiter = shared_limiter(config.name, limit) if limit else None
        self._client = httpx.AsyncClient(
            base_url=config.base_url or "",
            headers=dict(config.default_headers or {}),
            timeout=config.timeout_seconds,
            transport=RetryTransport(transport=transport, retry=config.retry.to_retry()),
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None = None,
        json: object = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        if self.limiter is not None:
            await self.limiter.acquire()
        log.debug("%s %s %s", self.config.name, method, url)
        return await self._client.request(
            method, url, content=content, json=json, headers=headers
        )

    async def post(self, url: str, *, json: object = None) -> httpx.Response:
        return await self.request("POST", url, json=json)

    async def put(
        self,
        url: str,
        *,
        content: bytes,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("PUT", url, content=content, headers=headers)
