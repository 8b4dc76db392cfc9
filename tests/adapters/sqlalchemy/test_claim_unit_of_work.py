from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import inspect

from venue_claims.adapters.sqlalchemy.migrations import current_revision
from venue_claims.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tests.helpers.claims import make_venue

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    UowFactory = Callable[[], SqlAlchemyClaimUnitOfWork]

CLAIMED_AT = datetime(2025, 2, 1, tzinfo=UTC)


def test_migrations_create_schema_at_head(sqlite_engine: Engine) -> None:
    tables = set(inspect(sqlite_engine).get_table_names())

    assert {
        "venue",
        "venue_claim",
        "ownership_relationship",
        "notification_outbox",
        "claim_reconciliation",
    } <= tables
    assert current_revision(sqlite_engine) == "0001_claim_workflow_schema"


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    with pytest.raises(StartupError):
        SqlAlchemyClaimUnitOfWork()


def test_startup_twice_requires_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    try:
        assert is_started()
        assert configured_engine() is sqlite_engine
        with pytest.raises(StartupError):
            startup(engine=sqlite_engine)
    finally:
        shutdown()
    assert not is_started()


def test_commit_persists_changes(sqlite_unit_of_work: UowFactory) -> None:
    venue = make_venue()

    with sqlite_unit_of_work() as uow:
        uow.repositories.venues.add(venue)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.venues.get(venue.id) is not None


def test_leaving_without_commit_discards_changes(sqlite_unit_of_work: UowFactory) -> None:
    venue = make_venue()

    with sqlite_unit_of_work() as uow:
        uow.repositories.venues.add(venue)

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.venues.get(venue.id) is None


def test_exception_rolls_back(sqlite_unit_of_work: UowFactory) -> None:
    venue = make_venue()

    with pytest.raises(RuntimeError, match="boom"), sqlite_unit_of_work() as uow:
        uow.repositories.venues.add(venue)
        uow.repositories.venues.mark_pending_claim(venue.id, at=CLAIMED_AT)
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.venues.get(venue.id) is None


def test_repositories_unavailable_outside_block(sqlite_unit_of_work: UowFactory) -> None:
    uow = sqlite_unit_of_work()

    with pytest.raises(StartupError):
        _ = uow.repositories
