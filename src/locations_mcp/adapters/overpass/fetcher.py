"""Feature lookups against Overpass."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from locations_mcp.domain.errors import NotFoundError, UpstreamError

from .client import OverpassClient
from .query import (
    CATEGORY_NOT_FOUND,
    CATEGORY_SELECTORS,
    PROGRESSIVE_STAGES,
    build_query,
    selectors_for_type,
)
from .translator import translate_response

if TYPE_CHECKING:
    from collections.abc import Iterable

    from locations_mcp.adapters.http_resilience import ResilientClient
    from locations_mcp.config.overpass import OverpassConfig
    from locations_mcp.domain.model import Partition, RawFeature

    from .query import TagSelector

log = getLogger(__name__)


class OverpassFeatureSource:
    """Named-feature search restricted to the configured region."""

    def __init__(
        self,
        *,
        config: OverpassConfig | None = None,
        client: OverpassClient | None = None,
    ) -> None:
        if client is None:
            if config is None:
                raise ValueError("OverpassFeatureSource needs a config or a client")
            client = OverpassClient(config=config)
        self._client = client

    async def search(self, term: str, location_type: str | None = None) -> list[RawFeature]:
        async with self._client.open() as http:
            if location_type:
                log.info("Searching Overpass for %r with type %s", term, location_type)
                return await self._run(http, term, selectors_for_type(location_type))
            return await self._progressive(http, term)

    async def search_category(self, term: str, category: Partition) -> list[RawFeature]:
        log.info("Searching Overpass for %r in %s", term, category)
        async with self._client.open() as http:
            features = await self._run(http, term, CATEGORY_SELECTORS[category])
        if not features:
            raise NotFoundError(f'{CATEGORY_NOT_FOUND[category]} "{term}"')
        return features

    async def _progressive(self, http: ResilientClient, term: str) -> list[RawFeature]:
        final_stage = len(PROGRESSIVE_STAGES) - 1
        for index, (label, selectors) in enumerate(PROGRESSIVE_STAGES):
            log.info("Trying %s for %r", label, term)
            try:
                features = await self._run(http, term, selectors)
            except UpstreamError as exc:
                if index == final_stage:
                    log.error("%s query failed: %s", label.capitalize(), exc)
                    raise NotFoundError(f'No results found for "{term}"') from exc
                log.warning("%s query failed: %s", label.capitalize(), exc)
                continue
            if features:
                return features
        return []

    async def _run(
        self,
        http: ResilientClient,
        term: str,
        selectors: Iterable[TagSelector],
    ) -> list[RawFeature]:
        config = self._client.config
        query = build_query(
            term,
            selectors,
            region=config.region,
            timeout_seconds=config.query_timeout_seconds,
        )
        payload = await self._client.execute(http, query)
        return translate_response(payload)
