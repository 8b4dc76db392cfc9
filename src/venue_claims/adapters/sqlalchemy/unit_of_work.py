"""Transaction boundaries for the claim workflow.

``startup()`` binds the process to one database: it maps the domain classes,
upgrades the schema to the latest migration and prepares a session factory.
Every ``SqlAlchemyClaimUnitOfWork`` created afterwards opens its own session on
that database and only persists what was explicitly committed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from logging import getLogger
from typing import TYPE_CHECKING, Generic, Literal, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from venue_claims.adapters.sqlalchemy.mappings import start_mappers
from venue_claims.adapters.sqlalchemy.migrations import upgrade_head
from venue_claims.adapters.sqlalchemy.repositories import (
    SqlAlchemyClaimRepository,
    SqlAlchemyNotificationOutboxRepository,
    SqlAlchemyOwnershipRelationshipRepository,
    SqlAlchemyReconciliationRepository,
    SqlAlchemyVenueRepository,
    storage_errors,
)
from venue_claims.config.storage import get_database_uri
from venue_claims.domain.ports.unit_of_work import ClaimRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The database binding is missing, already present, or a session is misused."""


class _Database:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine) -> None:
        self.engine = engine
        self.sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def release(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.sessions = None

    def open_session(self) -> Session:
        if self.sessions is None:
            raise StartupError(
                "No claim database configured; call "
                "venue_claims.adapters.sqlalchemy.unit_of_work.startup() first."
            )
        return self.sessions()


_database = _Database()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new engine for ``database_uri``).

    Raises ``StartupError`` when a database is already bound, unless ``force``.
    """

    if is_started() and not force:
        raise StartupError("Claim database already configured; pass force=True to rebind.")

    if engine is None:
        engine = create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    upgrade_head(engine=engine)
    _database.bind(engine)
    log.info("Claim database ready at %s", engine.url.render_as_string())


def configured_engine() -> Engine | None:
    return _database.engine


def is_started() -> bool:
    return _database.engine is not None


def shutdown() -> None:
    """Dispose the bound engine, if any. Safe to call repeatedly."""

    _database.release()


TRepositories = TypeVar("TRepositories", bound=RepositoryCollection)


class BaseSqlAlchemyUnitOfWork(ABC, Generic[TRepositories]):
    """One session per ``with`` block, exposing a typed repository collection.

    Leaving the block without ``commit()`` discards every change.
    """

    def __init__(self) -> None:
        if not is_started():
            raise StartupError("Claim database not configured")
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = _database.open_session()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        with storage_errors("commit unit of work"):
            self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemyClaimUnitOfWork(BaseSqlAlchemyUnitOfWork[ClaimRepositories]):
    """Claims, venues, ownership edges, the outbox and reconciliation entries."""

    def _build_repositories(self, session: Session) -> ClaimRepositories:
        return ClaimRepositories(
            claims=SqlAlchemyClaimRepository(session),
            venues=SqlAlchemyVenueRepository(session),
            relationships=SqlAlchemyOwnershipRelationshipRepository(session),
            outbox=SqlAlchemyNotificationOutboxRepository(session),
            reconciliation=SqlAlchemyReconciliationRepository(session),
        )


if TYPE_CHECKING:
    from venue_claims.domain.ports.unit_of_work import ClaimUnitOfWork

    _uow_check: ClaimUnitOfWork = SqlAlchemyClaimUnitOfWork()
