"""Translate Overpass elements into raw features."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from locations_mcp.domain.model import UNKNOWN_TYPE, LocationType, RawFeature

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .schema import OverpassElement, OverpassResponse

log = getLogger(__name__)

_NATURAL_TYPES: Final[dict[str, str]] = {
    "mountain_range": LocationType.MOUNTAIN_RANGE,
    "peak": LocationType.PEAK,
    "cave": LocationType.CAVE,
    "cave_entrance": LocationType.CAVE,
    "waterfall": LocationType.WATERFALL,
}
_TOURISM_TYPES: Final[frozenset[str]] = frozenset({"alpine_hut", "viewpoint", "museum", "attraction"})
_HISTORIC_TYPES: Final[frozenset[str]] = frozenset(
    {"castle", "fort", "ruins", "archaeological_site", "monastery", "memorial", "church"}
)


def determine_type(tags: Mapping[str, str]) -> str:
    """Location type for a tag set; the first matching rule wins."""

    place = tags.get("place")
    if place:
        return place

    natural = _NATURAL_TYPES.get(tags.get("natural", ""))
    if natural:
        return natural

    tourism = tags.get("tourism")
    if tourism:
        return tourism if tourism in _TOURISM_TYPES else LocationType.ATTRACTION

    historic = tags.get("historic")
    if historic:
        return historic if historic in _HISTORIC_TYPES else LocationType.HISTORICAL_SITE

    if tags.get("amenity") == "place_of_worship":
        if tags.get("religion") == "christian":
            return LocationType.CHURCH
        return LocationType.PLACE_OF_WORSHIP

    return UNKNOWN_TYPE


def translate_element(element: OverpassElement) -> RawFeature | None:
    name = (element.tags.get("name") or "").strip()
    lat, lon = element.lat, element.lon
    if (lat is None or lon is None) and element.center is not None:
        lat, lon = element.center.lat, element.center.lon
    if not name or lat is None or lon is None:
        return None

    return RawFeature(
        name=name,
        type=str(determine_type(element.tags)),
        lat=lat,
        lon=lon,
        osm_id=element.id,
        osm_type=element.type,
        tags=dict(element.tags),
    )


def translate_response(response: OverpassResponse) -> list[RawFeature]:
    features: list[RawFeature] = []
    for element in response.elements:
        feature = translate_element(element)
        if feature is None:
            log.debug("Dropping %s/%s without name or coordinates", element.type, element.id)
            continue
        features.append(feature)
    return features
