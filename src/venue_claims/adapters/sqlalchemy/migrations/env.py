"""Alembic entry point for the claim database.

Migrations normally run through ``upgrade_head()``, which hands over an open
connection via ``config.attributes["connection"]``. Running the ``alembic`` CLI
against this directory falls back to ``sqlalchemy.url`` or ``DATABASE_URI``.
"""

from __future__ import annotations

from logging.config import fileConfig
from pathlib import Path
from typing import Any

from alembic import context
from sqlalchemy import create_engine, pool

from venue_claims.adapters.sqlalchemy.mappings import mapper_registry, start_mappers
from venue_claims.config import get_database_config

config = context.config

if config.config_file_name and Path(config.config_file_name).suffix == ".ini":
    fileConfig(config.config_file_name, disable_existing_loggers=False)

start_mappers()

MIGRATION_OPTIONS: dict[str, Any] = {
    "target_metadata": mapper_registry.metadata,
    # SQLite cannot ALTER constraints in place.
    "render_as_batch": True,
    "compare_type": True,
    "compare_server_default": True,
}


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _run(**options: Any) -> None:
    context.configure(**MIGRATION_OPTIONS, **options)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    _run(url=_database_url(), literal_binds=True)


def run_migrations_online() -> None:
    handed_over = config.attributes.get("connection")
    if handed_over is not None:
        _run(connection=handed_over)
        return

    engine = create_engine(_database_url(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _run(connection=connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
