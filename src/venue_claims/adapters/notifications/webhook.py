"""Dispatcher that posts rendered notifications to an email delivery webhook."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from venue_claims.adapters.http_resilience import ResilientClient
from venue_claims.config.notifications import DEFAULT_SENDER

from .templates import render

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from venue_claims.config.http_resilience import ResilienceConfig
    from venue_claims.domain.model import NotificationTemplate

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class WebhookNotificationDispatcher:
    """POSTs ``{to, from, subject, html, template, params}`` to the configured URL.

    Failures are logged and reported as ``False``; nothing is raised to the caller.
    """

    url: str
    resilience: ResilienceConfig
    sender: str = DEFAULT_SENDER
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def send(
        self,
        template: NotificationTemplate,
        recipient: str,
        params: Mapping[str, object],
    ) -> bool:
        message = render(template, params)
        payload = {
            "to": recipient,
            "from": self.sender,
            "subject": message.subject,
            "html": message.html,
            "template": str(template),
            "params": {key: str(value) for key, value in params.items()},
        }
        try:
            asyncio.run(self._post(payload))
        except httpx.HTTPError as exc:
            log.warning("Email webhook rejected %s message to %s: %s", template, recipient, exc)
            return False
        log.info("Email %r handed to webhook for %s", message.subject, recipient)
        return True

    async def _post(self, payload: dict[str, object]) -> None:
        async with self.client_factory(self.resilience) as client:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()
