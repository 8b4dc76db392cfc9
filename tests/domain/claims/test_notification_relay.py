from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from venue_claims.domain.claims import NotificationRelay
from venue_claims.domain.model import NotificationMessage, NotificationTemplate
from tests.helpers.claims import RecordingDispatcher

if TYPE_CHECKING:
    from collections.abc import Callable

    from venue_claims.adapters.sqlalchemy.unit_of_work import SqlAlchemyClaimUnitOfWork

    UowFactory = Callable[[], SqlAlchemyClaimUnitOfWork]

DELIVERED_AT = datetime(2025, 6, 1, 9, 30, tzinfo=UTC)


def _queue(uow_factory: UowFactory, count: int = 1) -> list[NotificationMessage]:
    messages = [
        NotificationMessage(
            template=NotificationTemplate.RECEIVED,
            recipient=f"claimant{index}@example.com",
            params={"claimant_name": f"Claimant {index}", "venue_name": "The Brown Bag"},
            created_at=datetime(2025, 6, 1, 9, index, tzinfo=UTC),
        )
        for index in range(count)
    ]
    with uow_factory() as uow:
        for message in messages:
            uow.repositories.outbox.add(message)
        uow.commit()
    return messages


def _relay(
    uow_factory: UowFactory, dispatcher: RecordingDispatcher, *, max_attempts: int = 5
) -> NotificationRelay:
    return NotificationRelay(
        unit_of_work_factory=uow_factory,
        dispatcher=dispatcher,
        clock=lambda: DELIVERED_AT,
        max_attempts=max_attempts,
    )


def _reload(uow_factory: UowFactory, message: NotificationMessage) -> NotificationMessage:
    with uow_factory() as uow:
        stored = uow.repositories.outbox.get(message.id)
    assert stored is not None
    return stored


def test_deliver_marks_messages_delivered(sqlite_unit_of_work: UowFactory) -> None:
    (message,) = _queue(sqlite_unit_of_work)
    dispatcher = RecordingDispatcher()

    report = _relay(sqlite_unit_of_work, dispatcher).deliver([message.id])

    assert (report.delivered, report.failed, report.skipped) == (1, 0, 0)
    stored = _reload(sqlite_unit_of_work, message)
    assert stored.delivered_at == DELIVERED_AT
    assert stored.attempts == 1
    assert stored.last_error is None
    assert dispatcher.sent[0].recipient == "claimant0@example.com"
    assert dispatcher.sent[0].params["venue_name"] == "The Brown Bag"


def test_deliver_skips_unknown_and_delivered_messages(sqlite_unit_of_work: UowFactory) -> None:
    (message,) = _queue(sqlite_unit_of_work)
    dispatcher = RecordingDispatcher()
    relay = _relay(sqlite_unit_of_work, dispatcher)
    relay.deliver([message.id])

    report = relay.deliver([message.id, uuid4()])

    assert report.skipped == 2
    assert len(dispatcher.sent) == 1


def test_dispatcher_refusal_is_recorded(sqlite_unit_of_work: UowFactory) -> None:
    (message,) = _queue(sqlite_unit_of_work)

    report = _relay(sqlite_unit_of_work, RecordingDispatcher(succeed=False)).deliver([message.id])

    assert report.failed == 1
    stored = _reload(sqlite_unit_of_work, message)
    assert stored.delivered_at is None
    assert stored.last_error == "dispatcher reported failure"


def test_dispatcher_exception_is_contained(sqlite_unit_of_work: UowFactory) -> None:
    (message,) = _queue(sqlite_unit_of_work)
    dispatcher = RecordingDispatcher(error=ConnectionError("mail relay refused connection"))

    report = _relay(sqlite_unit_of_work, dispatcher).deliver([message.id])

    assert report.failed == 1
    stored = _reload(sqlite_unit_of_work, message)
    assert stored.attempts == 1
    assert stored.last_error == "mail relay refused connection"


def test_flush_retries_undelivered_until_attempt_limit(sqlite_unit_of_work: UowFactory) -> None:
    first, second = _queue(sqlite_unit_of_work, count=2)
    failing = _relay(sqlite_unit_of_work, RecordingDispatcher(succeed=False), max_attempts=2)

    assert failing.flush().failed == 2
    assert failing.flush().failed == 2
    assert failing.flush().failed == 0

    dispatcher = RecordingDispatcher()
    report = _relay(sqlite_unit_of_work, dispatcher, max_attempts=3).flush()

    assert report.delivered == 2
    assert [message.recipient for message in dispatcher.sent] == [
        first.recipient,
        second.recipient,
    ]
    assert _reload(sqlite_unit_of_work, first).attempts == 3


def test_flush_honours_limit(sqlite_unit_of_work: UowFactory) -> None:
    _queue(sqlite_unit_of_work, count=3)
    dispatcher = RecordingDispatcher()

    report = _relay(sqlite_unit_of_work, dispatcher).flush(limit=2)

    assert report.delivered == 2
    assert _relay(sqlite_unit_of_work, dispatcher).flush().delivered == 1
