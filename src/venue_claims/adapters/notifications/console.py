"""Dispatcher that writes rendered notifications to the log."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from venue_claims.config.notifications import DEFAULT_SENDER

from .templates import render

if TYPE_CHECKING:
    from collections.abc import Mapping

    from venue_claims.domain.model import NotificationTemplate

log = getLogger(__name__)


@dataclass(slots=True)
class LoggingNotificationDispatcher:
    """Stands in for an email provider in development; every message counts as sent."""

    sender: str = DEFAULT_SENDER

    def send(
        self,
        template: NotificationTemplate,
        recipient: str,
        params: Mapping[str, object],
    ) -> bool:
        message = render(template, params)
        log.info("Email from %s to %s: %s", self.sender, recipient, message.subject)
        log.debug("Email body for %s:\n%s", recipient, message.html)
        return True
