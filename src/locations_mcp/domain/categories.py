"""Routing between location types and storage partitions."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from .errors import InputError
from .model import LocationType, Partition

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_PARTITION: Final[Partition] = Partition.CULTURAL_SITES

# Fixed probe order for lookups that do not name a partition.
PARTITION_ORDER: Final[tuple[Partition, ...]] = (
    Partition.CITIES,
    Partition.MOUNTAINS,
    Partition.PEAKS,
    Partition.NATURAL_SITES,
    Partition.CULTURAL_SITES,
)

CATEGORY_TYPES: Final[Mapping[Partition, tuple[LocationType, ...]]] = MappingProxyType(
    {
        Partition.CITIES: (
            LocationType.CITY,
            LocationType.TOWN,
            LocationType.VILLAGE,
            LocationType.HAMLET,
        ),
        Partition.MOUNTAINS: (LocationType.MOUNTAIN_RANGE,),
        Partition.PEAKS: (LocationType.PEAK,),
        Partition.NATURAL_SITES: (LocationType.CAVE, LocationType.WATERFALL),
        Partition.CULTURAL_SITES: (
            LocationType.ALPINE_HUT,
            LocationType.VIEWPOINT,
            LocationType.MUSEUM,
            LocationType.ATTRACTION,
            LocationType.CASTLE,
            LocationType.FORT,
            LocationType.RUINS,
            LocationType.ARCHAEOLOGICAL_SITE,
            LocationType.MONASTERY,
            LocationType.MEMORIAL,
            LocationType.CHURCH,
            LocationType.HISTORICAL_SITE,
            LocationType.PLACE_OF_WORSHIP,
        ),
    }
)

PARTITION_BY_TYPE: Final[Mapping[str, Partition]] = MappingProxyType(
    {
        str(location_type): partition
        for partition, types in CATEGORY_TYPES.items()
        for location_type in types
    }
)

KNOWN_TYPES: Final[frozenset[str]] = frozenset(str(member) for member in LocationType)


def partition_for(location_type: str | None) -> Partition:
    """Partition a record of the given type is stored in."""

    if location_type is None:
        return DEFAULT_PARTITION
    return PARTITION_BY_TYPE.get(location_type, DEFAULT_PARTITION)


def types_for(partition: Partition) -> tuple[LocationType, ...]:
    return CATEGORY_TYPES[partition]


def is_known_type(location_type: str) -> bool:
    return location_type in KNOWN_TYPES


def parse_partition(value: str | Partition) -> Partition:
    """Parse a caller supplied collection name."""

    try:
        return Partition(value)
    except ValueError:
        allowed = ", ".join(str(partition) for partition in PARTITION_ORDER)
        raise InputError(f'Unknown collection "{value}" (expected one of {allowed})') from None
