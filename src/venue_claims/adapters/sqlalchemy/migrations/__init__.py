"""Alembic migrations shipped inside the package."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext

from venue_claims.config.storage import get_database_uri

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

SCRIPT_LOCATION: Final[Path] = Path(__file__).resolve().parent
HEAD: Final[str] = "head"


def alembic_config(database_uri: str | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(SCRIPT_LOCATION))
    config.set_main_option("path_separator", "os")
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Apply every pending migration.

    With ``engine`` the upgrade runs on one of its connections inside a single
    transaction, which also keeps in-memory SQLite databases intact.
    """

    if engine is None:
        command.upgrade(alembic_config(database_uri or get_database_uri()), HEAD)
        return
    config = alembic_config()
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, HEAD)


def current_revision(engine: Engine) -> str | None:
    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()
