"""Delivery of queued notification messages."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from venue_claims.domain.model import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime
    from uuid import UUID

    from venue_claims.domain.model import NotificationMessage
    from venue_claims.domain.ports import ClaimUnitOfWork, NotificationDispatcher

DEFAULT_MAX_ATTEMPTS = 5

log = getLogger(__name__)


@dataclass(slots=True)
class DeliveryReport:
    delivered: int = 0
    failed: int = 0
    skipped: int = 0


class NotificationRelay:
    """Hands outbox messages to the dispatcher and records the outcome on each row."""

    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], ClaimUnitOfWork],
        dispatcher: NotificationDispatcher,
        clock: Callable[[], datetime] = utcnow,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._dispatcher = dispatcher
        self._clock = clock
        self._max_attempts = max_attempts

    def deliver(self, message_ids: Iterable[UUID]) -> DeliveryReport:
        """Send the given messages right after the change they announce was committed."""

        report = DeliveryReport()
        with self._uow_factory() as uow:
            outbox = uow.repositories.outbox
            for message_id in message_ids:
                message = outbox.get(message_id)
                if message is None or message.is_delivered:
                    report.skipped += 1
                    continue
                self._send(message, report)
            uow.commit()
        return report

    def flush(self, *, limit: int = 100) -> DeliveryReport:
        """Retry messages that are still undelivered and below the attempt limit."""

        report = DeliveryReport()
        with self._uow_factory() as uow:
            pending = uow.repositories.outbox.list_undelivered(
                max_attempts=self._max_attempts, limit=limit
            )
            for message in pending:
                self._send(message, report)
            uow.commit()
        log.info("Outbox flush: delivered=%s, failed=%s", report.delivered, report.failed)
        return report

    def _send(self, message: NotificationMessage, report: DeliveryReport) -> None:
        message.attempts += 1
        error: str | None = None
        try:
            delivered = self._dispatcher.send(message.template, message.recipient, message.params)
        except Exception as exc:  # noqa: BLE001
            log.exception(
                "Dispatcher raised while sending %s message %s", message.template, message.id
            )
            delivered = False
            error = str(exc) or type(exc).__name__

        if delivered:
            message.delivered_at = self._clock()
            message.last_error = None
            report.delivered += 1
            return

        message.last_error = error or "dispatcher reported failure"
        report.failed += 1
        log.warning(
            "Notification %s (%s) to %s not delivered, attempt %s",
            message.id,
            message.template,
            message.recipient,
            message.attempts,
        )
