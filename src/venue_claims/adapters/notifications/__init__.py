"""Notification dispatcher adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .console import LoggingNotificationDispatcher
from .templates import SUBJECTS, RenderedMessage, UnknownTemplateError, render
from .webhook import WebhookNotificationDispatcher

if TYPE_CHECKING:
    from venue_claims.config.notifications import NotificationConfig
    from venue_claims.domain.ports import NotificationDispatcher

__all__ = [
    "SUBJECTS",
    "LoggingNotificationDispatcher",
    "RenderedMessage",
    "UnknownTemplateError",
    "WebhookNotificationDispatcher",
    "build_notification_dispatcher",
    "render",
]


def build_notification_dispatcher(config: NotificationConfig) -> NotificationDispatcher:
    if config.backend == "webhook":
        if config.webhook_url is None or config.resilience is None:
            raise ValueError("Webhook dispatcher requires a URL and a resilience configuration")
        return WebhookNotificationDispatcher(
            config.webhook_url, config.resilience, sender=config.sender
        )
    return LoggingNotificationDispatcher(sender=config.sender)
