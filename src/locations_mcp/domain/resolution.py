"""Cache-first location resolution: lookup, search, enrich, validate, persist."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from .categories import PARTITION_ORDER, parse_partition, partition_for
from .errors import InputError, NotFoundError, UpstreamError, ValidationError
from .locks import NameLocks
from .merge import merge_location
from .model import Partition, Provenance
from .proximity import is_near_any
from .validation import validate_location

if TYPE_CHECKING:
    from collections.abc import Callable

    from .model import LocationRecord, NarrativeSummary, RawFeature, StructuredFacts
    from .ports import FactsSource, FeatureSource, LocationUnitOfWork, SummarySource

log = getLogger(__name__)

DEFAULT_LIST_LIMIT: Final[int] = 50
DEFAULT_LIST_PARTITION: Final[Partition] = Partition.CITIES


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class SearchScope:
    """Where a resolution looks in the store and how it queries the geodata source."""

    partitions: tuple[Partition, ...]
    location_type: str | None = None
    category: Partition | None = None

    @property
    def label(self) -> str:
        if self.location_type:
            return f"type:{self.location_type}"
        if self.category:
            return f"category:{self.category}"
        return "any"

    @classmethod
    def build(
        cls,
        location_type: str | None = None,
        category: str | Partition | None = None,
    ) -> SearchScope:
        if location_type:
            return cls(partitions=(partition_for(location_type),), location_type=location_type)
        if category:
            partition = parse_partition(category)
            return cls(partitions=(partition,), category=partition)
        return cls(partitions=PARTITION_ORDER)


@dataclass(slots=True)
class LocationResolver:
    features: FeatureSource
    summaries: SummarySource
    facts: FactsSource
    unit_of_work_factory: Callable[[], LocationUnitOfWork]
    locks: NameLocks = field(default_factory=NameLocks)
    clock: Callable[[], datetime] = _utcnow

    async def resolve_one(
        self,
        name: str,
        location_type: str | None = None,
        category: str | Partition | None = None,
    ) -> LocationRecord:
        """Return the single best match for ``name``, resolving and caching it on a miss."""

        normalized = normalize_name(name)
        scope = SearchScope.build(location_type, category)
        log.info('Searching for "%s" (%s)', normalized, scope.label)

        async with self.locks.hold(normalized):
            cached = self._cached(normalized, scope, limit=1)
            if cached:
                log.info('Found "%s" in %s cache', normalized, cached[0].partition)
                return cached[0]

            log.info('"%s" not in cache, querying geodata source', normalized)
            features = await self._search(normalized, scope)
            if not features:
                raise NotFoundError(f'No results found for "{normalized}"')

            record = await self._enrich(features[0])
            validation = validate_location(record)
            if not validation.valid:
                log.warning("Validation errors for %s: %s", normalized, validation.errors)
                raise ValidationError(validation.errors)

            return self._persist(record)

    async def resolve_all(
        self,
        name: str,
        location_type: str | None = None,
        category: str | Partition | None = None,
    ) -> list[LocationRecord]:
        """Return every match for ``name``.

        Any cached match short-circuits the external search, so a partially
        cached name never discovers its other namesakes.
        """

        normalized = normalize_name(name)
        scope = SearchScope.build(location_type, category)
        log.info('Searching for all "%s" (%s)', normalized, scope.label)

        async with self.locks.hold(normalized):
            cached = self._cached(normalized, scope, limit=None)
            if cached:
                log.info('Returning %d cached results for "%s"', len(cached), normalized)
                return cached

            features = await self._search(normalized, scope)
            results: list[LocationRecord] = []
            for feature in features:
                if is_near_any(feature, results):
                    log.debug(
                        "Skipping duplicate %s at %s, %s", feature.name, feature.lat, feature.lon
                    )
                    continue

                log.info('Enriching "%s" at %s, %s', feature.name, feature.lat, feature.lon)
                record = await self._enrich(feature)
                validation = validate_location(record)
                if not validation.valid:
                    messages = "; ".join(error.message for error in validation.errors)
                    log.warning('Skipping "%s", validation failed: %s', feature.name, messages)
                    continue
                results.append(self._persist(record))

        if not results:
            raise NotFoundError(f'No results found for "{normalized}"')
        log.info('Returning %d resolved results for "%s"', len(results), normalized)
        return results

    def get_by_id(
        self,
        record_id: str,
        collection: str | Partition | None = None,
    ) -> LocationRecord:
        if not isinstance(record_id, str) or not record_id.strip():
            raise InputError("Location ID is required")
        record_id = record_id.strip()

        partitions = (parse_partition(collection),) if collection else PARTITION_ORDER
        with self.unit_of_work_factory() as uow:
            for partition in partitions:
                record = uow.repositories.locations.get(partition, record_id)
                if record is not None:
                    return record

        if collection:
            raise NotFoundError(f'Location with ID "{record_id}" not found in {collection}')
        raise NotFoundError(f'Location with ID "{record_id}" not found')

    def list_locations(
        self,
        collection: str | Partition | None = None,
        *,
        location_type: str | None = None,
        limit: int | None = None,
    ) -> list[LocationRecord]:
        partition = parse_partition(collection) if collection else DEFAULT_LIST_PARTITION
        effective_limit = DEFAULT_LIST_LIMIT if limit is None else limit
        if isinstance(effective_limit, bool) or not isinstance(effective_limit, int):
            raise InputError("Limit must be an integer")
        if effective_limit < 1:
            raise InputError("Limit must be at least 1")

        with self.unit_of_work_factory() as uow:
            return uow.repositories.locations.list_records(
                partition,
                location_type=location_type or None,
                limit=effective_limit,
            )

    def _cached(
        self,
        name: str,
        scope: SearchScope,
        *,
        limit: int | None,
    ) -> list[LocationRecord]:
        hits: list[LocationRecord] = []
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.locations
            for partition in scope.partitions:
                remaining = None if limit is None else limit - len(hits)
                if remaining == 0:
                    break
                hits.extend(
                    repository.find_by_name(
                        partition,
                        name,
                        location_type=scope.location_type,
                        limit=remaining,
                    )
                )
        for record in hits:
            record.provenance = Provenance.CACHE
        return hits

    async def _search(self, name: str, scope: SearchScope) -> list[RawFeature]:
        if scope.location_type:
            return await self.features.search(name, scope.location_type)
        if scope.category:
            return await self.features.search_category(name, scope.category)
        return await self.features.search(name)

    async def _enrich(self, feature: RawFeature) -> LocationRecord:
        references = feature.cross_references
        summary, facts = await asyncio.gather(
            self._summary_for(references.wikipedia),
            self._facts_for(references.wikidata),
        )
        return merge_location(feature, summary, facts, now=self.clock())

    async def _summary_for(self, tag: str | None) -> NarrativeSummary | None:
        if not tag:
            return None
        try:
            return await self.summaries.get_summary(tag)
        except UpstreamError as exc:
            log.warning("Wikipedia unavailable for %s: %s", tag, exc)
            return None

    async def _facts_for(self, entity_id: str | None) -> StructuredFacts | None:
        if not entity_id:
            return None
        try:
            return await self.facts.get_facts(entity_id)
        except UpstreamError as exc:
            log.warning("Wikidata unavailable for %s: %s", entity_id, exc)
            return None

    def _persist(self, record: LocationRecord) -> LocationRecord:
        partition = partition_for(record.type)
        log.info('Saving "%s" to %s', record.name, partition)
        with self.unit_of_work_factory() as uow:
            record_id = uow.repositories.locations.add(partition, record)
            uow.commit()
        record.id = record_id
        record.partition = partition
        record.provenance = Provenance.RESOLVED
        return record


def normalize_name(name: object) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InputError("Location name is required")
    return name.strip()
