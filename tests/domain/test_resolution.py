from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from locations_mcp.domain.errors import (
    InputError,
    NotFoundError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    ValidationError,
)
from locations_mcp.domain.model import Partition, Provenance
from locations_mcp.domain.resolution import LocationResolver
from tests.helpers.locations import (
    FakeFactsSource,
    FakeFeatureSource,
    FakeSummarySource,
    fixed_clock,
    make_facts,
    make_feature,
    make_summary,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from locations_mcp.adapters.sqlalchemy.unit_of_work import SqlAlchemyLocationUnitOfWork

LINKED_TAGS = {"name": "Test City", "place": "city", "wikipedia": "en:Test City", "wikidata": "Q42"}


def _resolver(
    uow: Callable[[], SqlAlchemyLocationUnitOfWork],
    features: FakeFeatureSource,
    summaries: FakeSummarySource | None = None,
    facts: FakeFactsSource | None = None,
) -> LocationResolver:
    return LocationResolver(
        features=features,
        summaries=summaries or FakeSummarySource(make_summary()),
        facts=facts or FakeFactsSource(make_facts()),
        unit_of_work_factory=uow,
        clock=fixed_clock,
    )


def _stored(uow: Callable[[], SqlAlchemyLocationUnitOfWork], partition: Partition) -> int:
    with uow() as unit:
        return len(unit.repositories.locations.list_records(partition, limit=100))


def test_resolve_one_end_to_end_then_cache(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource([make_feature(tags=LINKED_TAGS)])
    summaries = FakeSummarySource(make_summary())
    facts = FakeFactsSource(make_facts())
    resolver = _resolver(sqlite_unit_of_work, features, summaries, facts)

    first = asyncio.run(resolver.resolve_one("  Test City "))

    assert first.provenance is Provenance.RESOLVED
    assert first.id
    assert first.partition is Partition.CITIES
    assert first.description
    assert first.images
    assert summaries.calls == ["en:Test City"]
    assert facts.calls == ["Q42"]

    second = asyncio.run(resolver.resolve_one("Test City"))

    assert second.provenance is Provenance.CACHE
    assert second.id == first.id
    assert second.description == first.description
    assert second.images == first.images
    assert second.population == first.population
    assert features.calls == 1
    assert len(summaries.calls) == 1
    assert len(facts.calls) == 1
    assert _stored(sqlite_unit_of_work, Partition.CITIES) == 1


def test_cache_hit_skips_every_external_call(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    seed = _resolver(sqlite_unit_of_work, FakeFeatureSource([make_feature(tags=LINKED_TAGS)]))
    asyncio.run(seed.resolve_one("Test City"))

    features = FakeFeatureSource([make_feature()])
    summaries = FakeSummarySource(make_summary())
    facts = FakeFactsSource(make_facts())
    resolver = _resolver(sqlite_unit_of_work, features, summaries, facts)

    record = asyncio.run(resolver.resolve_one("Test City", category="cities"))

    assert record.provenance is Provenance.CACHE
    assert features.calls == 0
    assert summaries.calls == []
    assert facts.calls == []


def test_type_scoped_resolution_uses_type_search_and_routes_by_type(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource([make_feature("Musala", location_type="peak")])
    resolver = _resolver(sqlite_unit_of_work, features)

    record = asyncio.run(resolver.resolve_one("Musala", location_type="peak"))

    assert features.search_calls == [("Musala", "peak")]
    assert record.partition is Partition.PEAKS
    assert _stored(sqlite_unit_of_work, Partition.PEAKS) == 1


def test_category_resolution_persists_by_actual_type(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource([make_feature("Rila", location_type="monastery")])
    resolver = _resolver(sqlite_unit_of_work, features)

    record = asyncio.run(resolver.resolve_one("Rila", category="mountains"))

    assert features.category_calls == [("Rila", Partition.MOUNTAINS)]
    assert record.partition is Partition.CULTURAL_SITES
    assert _stored(sqlite_unit_of_work, Partition.MOUNTAINS) == 0


def test_missing_identifiers_skip_enrichment(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    summaries = FakeSummarySource(make_summary())
    facts = FakeFactsSource(make_facts())
    resolver = _resolver(
        sqlite_unit_of_work, FakeFeatureSource([make_feature()]), summaries, facts
    )

    record = asyncio.run(resolver.resolve_one("Test City"))

    assert summaries.calls == []
    assert facts.calls == []
    assert record.description is None
    assert record.images == []


def test_enrichment_failures_are_tolerated(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    summaries = FakeSummarySource(
        error=UpstreamTimeoutError("Wikipedia API timeout", source="Wikipedia")
    )
    facts = FakeFactsSource(make_facts())
    resolver = _resolver(
        sqlite_unit_of_work, FakeFeatureSource([make_feature(tags=LINKED_TAGS)]), summaries, facts
    )

    record = asyncio.run(resolver.resolve_one("Test City"))

    assert record.provenance is Provenance.RESOLVED
    assert record.description == "City in testland"
    assert record.wikipedia_url is None


def test_both_enrichment_sources_failing_still_persists(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    summaries = FakeSummarySource(error=UpstreamTimeoutError("timeout", source="Wikipedia"))
    facts = FakeFactsSource(
        error=UpstreamUnavailableError("Wikidata API error: 503", source="Wikidata", status_code=503)
    )
    resolver = _resolver(
        sqlite_unit_of_work, FakeFeatureSource([make_feature(tags=LINKED_TAGS)]), summaries, facts
    )

    record = asyncio.run(resolver.resolve_one("Test City"))

    assert record.id
    assert record.description is None


def test_feature_source_errors_abort(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource(error=UpstreamTimeoutError("Overpass API timeout", source="Overpass"))
    resolver = _resolver(sqlite_unit_of_work, features)

    with pytest.raises(UpstreamTimeoutError):
        asyncio.run(resolver.resolve_one("Test City"))


def test_no_results_raise_not_found(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    resolver = _resolver(sqlite_unit_of_work, FakeFeatureSource([]))

    with pytest.raises(NotFoundError, match='No results found for "Nowhere"'):
        asyncio.run(resolver.resolve_one("Nowhere"))


def test_invalid_record_is_not_persisted(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource([make_feature("Lozenets", location_type="suburb")])
    resolver = _resolver(sqlite_unit_of_work, features)

    with pytest.raises(ValidationError) as excinfo:
        asyncio.run(resolver.resolve_one("Lozenets"))

    assert str(excinfo.value).startswith("Invalid location data: ")
    assert [error.field for error in excinfo.value.errors] == ["type"]
    assert _stored(sqlite_unit_of_work, Partition.CULTURAL_SITES) == 0


@pytest.mark.parametrize("name", ["", "   ", None])
def test_blank_name_is_rejected(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
    name: str | None,
) -> None:
    features = FakeFeatureSource([make_feature()])
    resolver = _resolver(sqlite_unit_of_work, features)

    with pytest.raises(InputError, match="Location name is required"):
        asyncio.run(resolver.resolve_one(name))  # type: ignore[arg-type]

    assert features.calls == 0


def test_concurrent_resolutions_insert_once(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource([make_feature(tags=LINKED_TAGS)])
    resolver = _resolver(sqlite_unit_of_work, features)

    async def run() -> list[Provenance | None]:
        records = await asyncio.gather(
            resolver.resolve_one("Test City"),
            resolver.resolve_one("Test City"),
        )
        return [record.provenance for record in records]

    provenances = asyncio.run(run())

    assert sorted(str(value) for value in provenances) == ["cache", "resolved"]
    assert features.calls == 1
    assert _stored(sqlite_unit_of_work, Partition.CITIES) == 1


def test_concurrent_resolutions_with_mixed_scopes_insert_once(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource([make_feature(tags=LINKED_TAGS)])
    resolver = _resolver(sqlite_unit_of_work, features)

    async def run() -> list[Provenance | None]:
        records = await asyncio.gather(
            resolver.resolve_one("Test City", location_type="city"),
            resolver.resolve_one("Test City", category="cities"),
            resolver.resolve_one("Test City"),
        )
        return [record.provenance for record in records]

    provenances = asyncio.run(run())

    assert sorted(str(value) for value in provenances) == ["cache", "cache", "resolved"]
    assert features.calls == 1
    assert _stored(sqlite_unit_of_work, Partition.CITIES) == 1


def test_resolve_all_deduplicates_by_proximity(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    tags = {"name": "Bistritsa", "wikidata": "Q7"}
    features = FakeFeatureSource(
        [
            make_feature("Bistritsa", location_type="village", lat=42.0, lon=23.0, tags=tags),
            make_feature("Bistritsa", location_type="village", lat=42.0003, lon=23.0004, tags=tags),
            make_feature("Bistritsa", location_type="village", lat=42.01, lon=23.01, tags=tags),
        ]
    )
    facts = FakeFactsSource(make_facts())
    resolver = _resolver(sqlite_unit_of_work, features, facts=facts)

    records = asyncio.run(resolver.resolve_all("Bistritsa"))

    assert [(record.lat, record.lon) for record in records] == [(42.0, 23.0), (42.01, 23.01)]
    assert len(facts.calls) == 2
    assert all(record.provenance is Provenance.RESOLVED for record in records)
    assert _stored(sqlite_unit_of_work, Partition.CITIES) == 2


def test_resolve_all_skips_invalid_candidates(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource(
        [
            make_feature("Bistritsa", location_type="locality", lat=41.0, lon=22.0),
            make_feature("Bistritsa", location_type="village", lat=42.0, lon=23.0),
        ]
    )
    resolver = _resolver(sqlite_unit_of_work, features)

    records = asyncio.run(resolver.resolve_all("Bistritsa"))

    assert [record.type for record in records] == ["village"]


def test_resolve_all_returns_cached_matches_without_searching(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    seed = _resolver(
        sqlite_unit_of_work,
        FakeFeatureSource(
            [
                make_feature("Bistritsa", location_type="village", lat=42.0, lon=23.0),
                make_feature("Bistritsa", location_type="village", lat=42.5, lon=23.5),
            ]
        ),
    )
    asyncio.run(seed.resolve_all("Bistritsa"))

    features = FakeFeatureSource([make_feature("Bistritsa", lat=43.0, lon=24.0)])
    resolver = _resolver(sqlite_unit_of_work, features)

    records = asyncio.run(resolver.resolve_all("Bistritsa"))

    assert len(records) == 2
    assert all(record.provenance is Provenance.CACHE for record in records)
    assert features.calls == 0


def test_resolve_all_with_nothing_valid_raises_not_found(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource([make_feature("Nowhere", location_type="unknown")])
    resolver = _resolver(sqlite_unit_of_work, features)

    with pytest.raises(NotFoundError):
        asyncio.run(resolver.resolve_all("Nowhere"))


def test_get_by_id_probes_every_partition(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource([make_feature("Musala", location_type="peak")])
    resolver = _resolver(sqlite_unit_of_work, features)
    stored = asyncio.run(resolver.resolve_one("Musala"))
    assert stored.id is not None

    found = resolver.get_by_id(stored.id)

    assert found.name == "Musala"
    assert found.partition is Partition.PEAKS
    assert resolver.get_by_id(stored.id, "peaks").id == stored.id
    with pytest.raises(NotFoundError, match="not found in cities"):
        resolver.get_by_id(stored.id, "cities")
    with pytest.raises(InputError, match="Location ID is required"):
        resolver.get_by_id(" ")


def test_list_locations_orders_by_name_and_filters(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
) -> None:
    features = FakeFeatureSource(
        [
            make_feature("Varna", location_type="city", lat=43.2, lon=27.9),
            make_feature("Bansko", location_type="town", lat=41.8, lon=23.5),
            make_feature("Arbanasi", location_type="village", lat=43.1, lon=25.7),
        ]
    )
    resolver = _resolver(sqlite_unit_of_work, features)
    asyncio.run(resolver.resolve_all("Anything"))

    names = [record.name for record in resolver.list_locations()]
    towns = resolver.list_locations("cities", location_type="town")
    limited = resolver.list_locations(limit=1)

    assert names == ["Arbanasi", "Bansko", "Varna"]
    assert [record.name for record in towns] == ["Bansko"]
    assert [record.name for record in limited] == ["Arbanasi"]
    assert resolver.list_locations("peaks") == []


@pytest.mark.parametrize("limit", [0, -3, "10", True])
def test_list_locations_rejects_bad_limits(
    sqlite_unit_of_work: Callable[[], SqlAlchemyLocationUnitOfWork],
    limit: object,
) -> None:
    resolver = _resolver(sqlite_unit_of_work, FakeFeatureSource([]))

    with pytest.raises(InputError):
        resolver.list_locations(limit=limit)  # type: ignore[arg-type]
