from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from locations_mcp.adapters.sqlalchemy.migrations import upgrade_head
from locations_mcp.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLocationUnitOfWork,
    shutdown,
    startup,
)
from locations_mcp.config.http_resilience import ResilienceConfig
from locations_mcp.config.overpass import OverpassConfig, SearchRegion
from locations_mcp.config.wikidata import WIKIDATA_RETRY, WikidataConfig
from locations_mcp.config.wikipedia import WikipediaConfig

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyLocationUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyLocationUnitOfWork:
        return SqlAlchemyLocationUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def overpass_config() -> OverpassConfig:
    return OverpassConfig(
        resilience=ResilienceConfig(name="overpass", cache=None),
        url="https://overpass.test/api/interpreter",
        region=SearchRegion(),
    )


@pytest.fixture
def wikipedia_config() -> WikipediaConfig:
    return WikipediaConfig(resilience=ResilienceConfig(name="wikipedia", cache=None))


@pytest.fixture
def wikidata_config() -> WikidataConfig:
    return WikidataConfig(
        resilience=ResilienceConfig(name="wikidata", retry=WIKIDATA_RETRY, cache=None)
    )
