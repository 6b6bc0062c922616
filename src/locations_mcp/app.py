"""Application wiring entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from locations_mcp.adapters.mcp import LocationToolset, serve
from locations_mcp.adapters.overpass import OverpassFeatureSource
from locations_mcp.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyLocationUnitOfWork,
    is_started,
    startup,
)
from locations_mcp.adapters.wikidata import WikidataClient
from locations_mcp.adapters.wikipedia import WikipediaClient
from locations_mcp.config import get_overpass_config, get_wikidata_config, get_wikipedia_config
from locations_mcp.domain.resolution import LocationResolver

if TYPE_CHECKING:
    from collections.abc import Callable

    from locations_mcp.domain.ports import (
        FactsSource,
        FeatureSource,
        LocationUnitOfWork,
        SummarySource,
    )

log = getLogger(__name__)


def build_location_resolver(
    *,
    features: FeatureSource | None = None,
    summaries: SummarySource | None = None,
    facts: FactsSource | None = None,
    unit_of_work_factory: Callable[[], LocationUnitOfWork] | None = None,
) -> LocationResolver:
    """Resolver over the default adapters; the store must already be started."""

    return LocationResolver(
        features=features or OverpassFeatureSource(config=get_overpass_config()),
        summaries=summaries or WikipediaClient(config=get_wikipedia_config()),
        facts=facts or WikidataClient(config=get_wikidata_config()),
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyLocationUnitOfWork,
    )


def open_location_store(*, database_uri: str | None = None) -> None:
    """Start the store once per process (migrate and probe every partition)."""

    if is_started():
        return
    startup(database_uri=database_uri)


async def serve_locations(*, resolver: LocationResolver | None = None) -> None:
    """Probe the store, then serve the location tools over stdio until the client disconnects."""

    if resolver is None:
        open_location_store()
        resolver = build_location_resolver()
    await serve(LocationToolset(resolver))
    log.info("Location server stopped")
