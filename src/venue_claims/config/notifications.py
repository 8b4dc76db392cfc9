"""Notification dispatcher configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SENDER = "noreply@mythirdplace.com"
WEBHOOK_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class NotificationConfig:
    backend: Literal["log", "webhook"]
    sender: str = DEFAULT_SENDER
    webhook_url: str | None = None
    resilience: ResilienceConfig | None = None


def get_notification_config() -> NotificationConfig:
    sender = optional_env_var("NOTIFICATION_SENDER") or DEFAULT_SENDER
    webhook_url = optional_env_var("NOTIFICATION_WEBHOOK_URL")
    if webhook_url is None:
        return NotificationConfig(backend="log", sender=sender)

    api_key = optional_env_var("NOTIFICATION_API_KEY")
    headers = {"Authorization": f"Bearer {api_key}"} if api_key else None
    return NotificationConfig(
        backend="webhook",
        sender=sender,
        webhook_url=webhook_url,
        resilience=ResilienceConfig(
            name="notifications",
            timeout_seconds=WEBHOOK_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            default_headers=headers,
        ),
    )
