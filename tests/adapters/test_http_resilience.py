from __future__ import annotations

import asyncio

import httpx

from venue_claims.adapters.http_resilience import ResilientClient
from venue_claims.config import RateLimit, ResilienceConfig, RetryPolicy


def test_retries_transient_status_then_succeeds() -> None:
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        status = 503 if len(attempts) == 1 else 200
        return httpx.Response(status, json={"ok": status == 200})

    config = ResilienceConfig(
        name="retry-test",
        base_url="https://storage.test/",
        retry=RetryPolicy(total=2, backoff_factor=0.0),
    )

    async def call() -> httpx.Response:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            return await client.put("claims/abc", content=b"data")

    response = asyncio.run(call())

    assert response.status_code == 200
    assert len(attempts) == 2
    assert attempts[0].url == "https://storage.test/claims/abc"


def test_default_headers_and_rate_limit_apply_to_every_request() -> None:
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(202)

    config = ResilienceConfig(
        name="headers-test",
        retry=RetryPolicy(total=0),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"Authorization": "Bearer secret"},
    )

    async def call() -> list[int]:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            first = await client.post("https://mail.test/send", json={"to": "dana@example.com"})
            second = await client.post("https://mail.test/send", json={"to": "lee@example.com"})
        return [first.status_code, second.status_code]

    assert asyncio.run(call()) == [202, 202]
    assert seen == ["Bearer secret", "Bearer secret"]


def test_clients_of_one_service_share_a_rate_limit() -> None:
    limit = RateLimit(max_calls=3, per_seconds=1.0)
    storage = ResilienceConfig(name="shared-storage", ratelimit=limit)
    mail = ResilienceConfig(name="shared-mail", ratelimit=limit)

    first, second = ResilientClient(storage), ResilientClient(storage)
    other = ResilientClient(mail)

    assert first.limiter is not None
    assert first.limiter is second.limiter
    assert other.limiter is not first.limiter
    assert ResilientClient(ResilienceConfig(name="unlimited")).limiter is None
