from __future__ import annotations

import json
import logging
from uuid import uuid4

import httpx
import pytest

from venue_claims.adapters.http_resilience import ResilientClient
from venue_claims.adapters.notifications import (
    SUBJECTS,
    LoggingNotificationDispatcher,
    UnknownTemplateError,
    WebhookNotificationDispatcher,
    build_notification_dispatcher,
    render,
)
from venue_claims.config import NotificationConfig, ResilienceConfig, RetryPolicy
from venue_claims.domain.model import NotificationTemplate
from venue_claims.domain.ports import NotificationDispatcher

WEBHOOK_CONFIG = ResilienceConfig(name="notifications-test", retry=RetryPolicy(total=0))
WEBHOOK_URL = "https://mail.test/v1/send"

PARAMS = {
    "claim_id": str(uuid4()),
    "claimant_name": "Dana Brown",
    "venue_name": "The Brown Bag",
}


def _webhook(handler: httpx.MockTransport) -> WebhookNotificationDispatcher:
    return WebhookNotificationDispatcher(
        WEBHOOK_URL,
        WEBHOOK_CONFIG,
        sender="claims@example.test",
        client_factory=lambda config: ResilientClient(config, transport=handler),
    )


@pytest.mark.parametrize("template", list(NotificationTemplate))
def test_every_template_renders(template: NotificationTemplate) -> None:
    message = render(template, PARAMS)

    assert message.subject == SUBJECTS[template]
    assert "Dana Brown" in message.html
    assert "The Brown Bag" in message.html


def test_render_escapes_parameters() -> None:
    message = render(
        NotificationTemplate.REJECTED,
        {**PARAMS, "venue_name": "<script>alert(1)</script>", "reason": "Bad & blurry"},
    )

    assert "<script>" not in message.html
    assert "&lt;script&gt;" in message.html
    assert "Bad &amp; blurry" in message.html


def test_rejection_without_reason_omits_reason_block() -> None:
    assert "Reason:" not in render(NotificationTemplate.REJECTED, PARAMS).html


def test_approval_links_to_venue() -> None:
    message = render(
        NotificationTemplate.APPROVED, {**PARAMS, "venue_url": "https://example.test/venues/1"}
    )

    assert 'href="https://example.test/venues/1"' in message.html


def test_unknown_template_raises() -> None:
    with pytest.raises(UnknownTemplateError):
        render("welcome", PARAMS)


def test_logging_dispatcher_logs_subject(caplog: pytest.LogCaptureFixture) -> None:
    dispatcher = LoggingNotificationDispatcher(sender="claims@example.test")

    with caplog.at_level(logging.INFO, logger="venue_claims.adapters.notifications.console"):
        delivered = dispatcher.send(NotificationTemplate.RECEIVED, "dana@example.com", PARAMS)

    assert delivered is True
    assert "dana@example.com" in caplog.text
    assert SUBJECTS[NotificationTemplate.RECEIVED] in caplog.text


def test_webhook_posts_rendered_message() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(202)

    delivered = _webhook(httpx.MockTransport(handler)).send(
        NotificationTemplate.RECEIVED, "dana@example.com", PARAMS
    )

    assert delivered is True
    assert str(seen[0].url) == WEBHOOK_URL
    body = json.loads(seen[0].content)
    assert body["to"] == "dana@example.com"
    assert body["from"] == "claims@example.test"
    assert body["subject"] == SUBJECTS[NotificationTemplate.RECEIVED]
    assert body["template"] == "received"
    assert body["params"]["venue_name"] == "The Brown Bag"


def test_webhook_failure_returns_false(caplog: pytest.LogCaptureFixture) -> None:
    dispatcher = _webhook(httpx.MockTransport(lambda _request: httpx.Response(500)))

    with caplog.at_level(logging.WARNING):
        delivered = dispatcher.send(NotificationTemplate.APPROVED, "dana@example.com", PARAMS)

    assert delivered is False
    assert "dana@example.com" in caplog.text


def test_webhook_network_error_returns_false() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    delivered = _webhook(httpx.MockTransport(handler)).send(
        NotificationTemplate.REJECTED, "dana@example.com", PARAMS
    )

    assert delivered is False


def test_build_notification_dispatcher() -> None:
    log_dispatcher = build_notification_dispatcher(NotificationConfig(backend="log"))
    webhook = build_notification_dispatcher(
        NotificationConfig(backend="webhook", webhook_url=WEBHOOK_URL, resilience=WEBHOOK_CONFIG)
    )

    assert isinstance(log_dispatcher, LoggingNotificationDispatcher)
    assert isinstance(webhook, WebhookNotificationDispatcher)
    assert isinstance(webhook, NotificationDispatcher)
    with pytest.raises(ValueError, match="URL"):
        build_notification_dispatcher(NotificationConfig(backend="webhook"))
