"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class LocationType(StrEnum):
    CITY = "city"
    TOWN = "town"
    VILLAGE = "village"
    HAMLET = "hamlet"
    MOUNTAIN_RANGE = "mountain_range"
    PEAK = "peak"
    CAVE = "cave"
    WATERFALL = "waterfall"
    ALPINE_HUT = "alpine_hut"
    VIEWPOINT = "viewpoint"
    MUSEUM = "museum"
    ATTRACTION = "attraction"
    CASTLE = "castle"
    FORT = "fort"
    RUINS = "ruins"
    ARCHAEOLOGICAL_SITE = "archaeological_site"
    MONASTERY = "monastery"
    MEMORIAL = "memorial"
    CHURCH = "church"
    HISTORICAL_SITE = "historical_site"
    PLACE_OF_WORSHIP = "place_of_worship"


class Partition(StrEnum):
    """Storage collections a record can live in."""

    CITIES = "cities"
    MOUNTAINS = "mountains"
    PEAKS = "peaks"
    NATURAL_SITES = "natural_sites"
    CULTURAL_SITES = "cultural_sites"


class Provenance(StrEnum):
    CACHE = "cache"
    RESOLVED = "resolved"


UNKNOWN_TYPE = "unknown"
