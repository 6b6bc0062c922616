"""Schema revisions for the location store, applied with Alembic."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Bring the store to the newest revision.

    With an ``engine`` the upgrade runs on one of its connections inside a single
    transaction; otherwise ``env.py`` opens its own from ``database_uri`` (or the
    configured default when that is ``None`` too).
    """

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(MIGRATIONS_PATH))
    if database_uri is not None:
        alembic_cfg.set_main_option("sqlalchemy.url", database_uri)

    if engine is None:
        command.upgrade(alembic_cfg, "head")
        return
    with engine.begin() as connection:
        alembic_cfg.attributes["connection"] = connection
        command.upgrade(alembic_cfg, "head")
