"""Process-wide store lifecycle and the SQLAlchemy unit of work for location records."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from alembic.util.exc import CommandError
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from locations_mcp.adapters.sqlalchemy.migrations import upgrade_head
from locations_mcp.adapters.sqlalchemy.repositories import SqlAlchemyLocationRepository
from locations_mcp.config import get_database_config
from locations_mcp.domain.categories import PARTITION_ORDER
from locations_mcp.domain.errors import StoreUnavailableError
from locations_mcp.domain.ports.unit_of_work import LocationRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the store is used before ``startup()`` or configured twice."""


@dataclass(slots=True)
class _StoreState:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    def open_session(self) -> Session:
        if self.sessions is None:
            raise StartupError(
                "Location store not started. Call "
                "locations_mcp.adapters.sqlalchemy.unit_of_work.startup() first."
            )
        return self.sessions()


_STATE = _StoreState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the store: migrate to the latest revision, then read every partition once.

    Any failure to reach, migrate or read the store raises ``StoreUnavailableError``
    and leaves the store unbound.
    """

    if _STATE.engine is not None and not force:
        raise StartupError("Location store already started. Pass force=True to rebind.")

    try:
        if engine is None:
            engine = create_engine(database_uri or get_database_config().uri, future=True)
        upgrade_head(engine=engine)
        _probe_partitions(engine)
    except (SQLAlchemyError, CommandError, OSError) as exc:
        raise StoreUnavailableError(f"Location store unavailable: {exc}") from exc

    _STATE.bind(engine)
    log.info("Location store ready (%s)", engine.url.render_as_string(hide_password=True))


def _probe_partitions(engine: Engine) -> None:
    with Session(engine) as session:
        repository = SqlAlchemyLocationRepository(session)
        for partition in PARTITION_ORDER:
            repository.probe(partition)
            log.debug("Probed partition %s", partition)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and unbind the store (used by tests and on exit)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class SqlAlchemyLocationUnitOfWork:
    """One session per ``with`` block; leaving the block on an exception rolls back.

    Nothing is written unless ``commit()`` is called inside the block.
    """

    def __init__(self) -> None:
        if not is_started():
            raise StartupError("Location store not started")
        self._session: Session | None = None
        self._repositories: LocationRepositories | None = None

    def __enter__(self) -> SqlAlchemyLocationUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work already entered")
        self._session = _STATE.open_session()
        self._repositories = LocationRepositories(
            locations=SqlAlchemyLocationRepository(self._session)
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        if exc_type is not None:
            session.rollback()
        session.close()
        self._session = None
        self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not active")
        return self._session

    @property
    def repositories(self) -> LocationRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not active")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
