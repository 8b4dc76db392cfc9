from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from venue_claims.adapters.sqlalchemy import start_mappers
from venue_claims.adapters.sqlalchemy.migrations import upgrade_head
from venue_claims.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClaimUnitOfWork,
    shutdown,
    startup,
)
from venue_claims.config import WorkflowSettings
from venue_claims.domain.claims import ClaimWorkflow, NotificationRelay
from tests.helpers.claims import InMemoryEvidenceStore, RecordingDispatcher

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyClaimUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyClaimUnitOfWork:
        return SqlAlchemyClaimUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def evidence_store() -> InMemoryEvidenceStore:
    return InMemoryEvidenceStore()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def workflow_settings() -> WorkflowSettings:
    return WorkflowSettings(site_base_url="https://example.test", upload_timeout_seconds=5.0)


@pytest.fixture
def relay(
    sqlite_unit_of_work: Callable[[], SqlAlchemyClaimUnitOfWork],
    dispatcher: RecordingDispatcher,
) -> NotificationRelay:
    return NotificationRelay(unit_of_work_factory=sqlite_unit_of_work, dispatcher=dispatcher)


@pytest.fixture
def workflow(
    sqlite_unit_of_work: Callable[[], SqlAlchemyClaimUnitOfWork],
    evidence_store: InMemoryEvidenceStore,
    relay: NotificationRelay,
    workflow_settings: WorkflowSettings,
) -> ClaimWorkflow:
    return ClaimWorkflow(
        unit_of_work_factory=sqlite_unit_of_work,
        evidence_store=evidence_store,
        relay=relay,
        settings=workflow_settings,
    )
