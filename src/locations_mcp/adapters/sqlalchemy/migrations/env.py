"""Alembic entry point for the location store revisions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

from locations_mcp.adapters.sqlalchemy.mappings import metadata
from locations_mcp.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

# sqlite cannot ALTER most columns in place, so every revision goes through batch mode
_SHARED_OPTIONS = {
    "target_metadata": metadata,
    "render_as_batch": True,
    "compare_type": True,
}


def _url() -> str:
    return context.config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _migrate_on(connection: Connection) -> None:
    context.configure(connection=connection, **_SHARED_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def _emit_sql() -> None:
    context.configure(url=_url(), literal_binds=True, **_SHARED_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def _migrate() -> None:
    borrowed = context.config.attributes.get("connection")
    if borrowed is not None:
        _migrate_on(borrowed)
        return

    engine = create_engine(_url(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _migrate_on(connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    _emit_sql()
else:
    _migrate()
