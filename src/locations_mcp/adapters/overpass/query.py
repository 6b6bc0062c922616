"""Overpass QL construction from tag selector tables."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from locations_mcp.domain.model import LocationType, Partition

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from locations_mcp.config.overpass import SearchRegion

ELEMENT_KINDS: Final[tuple[str, ...]] = ("node", "way", "relation")

_BRACKETS = re.compile(r"[\[\]]")
_PARENS = re.compile(r"[()]")
_REGEX_META = re.compile(r"[.*+?^${}|]")


@dataclass(frozen=True, slots=True)
class TagSelector:
    """One tag filter, expanded into a statement per element kind.

    ``value=None`` matches any value of ``key``.
    """

    key: str
    value: str | None = None
    elements: tuple[str, ...] = ELEMENT_KINDS

    def filter(self) -> str:
        if self.value is None:
            return f'["{self.key}"]'
        return f'["{self.key}"="{self.value}"]'


def _selectors(key: str, *values: str) -> tuple[TagSelector, ...]:
    return tuple(TagSelector(key, value) for value in values)


PLACE_SELECTORS: Final[tuple[TagSelector, ...]] = (TagSelector("place"),)

NATURAL_SELECTORS: Final[tuple[TagSelector, ...]] = _selectors(
    "natural", "peak", "mountain_range", "cave", "cave_entrance", "waterfall"
)

CULTURAL_SELECTORS: Final[tuple[TagSelector, ...]] = (
    TagSelector("historic"),
    TagSelector("tourism"),
    TagSelector("amenity", "place_of_worship"),
)

# Combined query used when a requested type has no selector of its own.
GENERAL_SELECTORS: Final[tuple[TagSelector, ...]] = (
    *PLACE_SELECTORS,
    *NATURAL_SELECTORS,
    *_selectors(
        "historic",
        "castle",
        "fort",
        "ruins",
        "archaeological_site",
        "monastery",
        "memorial",
        "church",
    ),
    *_selectors("tourism", "alpine_hut", "viewpoint", "museum", "attraction"),
    TagSelector("amenity", "place_of_worship"),
)

# Progressive fallback for searches without a type or category.
PROGRESSIVE_STAGES: Final[tuple[tuple[str, tuple[TagSelector, ...]], ...]] = (
    ("places", PLACE_SELECTORS),
    ("natural features", NATURAL_SELECTORS),
    ("cultural sites", CULTURAL_SELECTORS),
)

TYPE_SELECTORS: Final[Mapping[str, tuple[TagSelector, ...]]] = MappingProxyType(
    {
        LocationType.CITY: _selectors("place", "city"),
        LocationType.TOWN: _selectors("place", "town"),
        LocationType.VILLAGE: _selectors("place", "village"),
        LocationType.PEAK: _selectors("natural", "peak"),
        LocationType.MOUNTAIN_RANGE: _selectors("natural", "mountain_range"),
        LocationType.CAVE: _selectors("natural", "cave", "cave_entrance"),
        LocationType.WATERFALL: _selectors("natural", "waterfall"),
        LocationType.CASTLE: _selectors("historic", "castle"),
        LocationType.FORT: _selectors("historic", "fort"),
        LocationType.RUINS: _selectors("historic", "ruins"),
        LocationType.ARCHAEOLOGICAL_SITE: _selectors("historic", "archaeological_site"),
        LocationType.MONASTERY: _selectors("historic", "monastery"),
        LocationType.MEMORIAL: _selectors("historic", "memorial"),
        LocationType.CHURCH: _selectors("historic", "church"),
        LocationType.ALPINE_HUT: _selectors("tourism", "alpine_hut"),
        LocationType.VIEWPOINT: _selectors("tourism", "viewpoint"),
        LocationType.MUSEUM: _selectors("tourism", "museum"),
        LocationType.ATTRACTION: _selectors("tourism", "attraction"),
    }
)

CATEGORY_SELECTORS: Final[Mapping[Partition, tuple[TagSelector, ...]]] = MappingProxyType(
    {
        Partition.CITIES: PLACE_SELECTORS,
        Partition.MOUNTAINS: (
            TagSelector("boundary", elements=("relation",)),
            TagSelector("natural", elements=("relation",)),
            TagSelector("place", elements=("relation",)),
            TagSelector("natural", "mountain_range"),
        ),
        Partition.PEAKS: _selectors("natural", "peak"),
        Partition.NATURAL_SITES: _selectors("natural", "cave", "cave_entrance", "waterfall"),
        Partition.CULTURAL_SITES: CULTURAL_SELECTORS,
    }
)

CATEGORY_NOT_FOUND: Final[Mapping[Partition, str]] = MappingProxyType(
    {
        Partition.CITIES: "No cities, towns, or villages found for",
        Partition.MOUNTAINS: "No mountain ranges found for",
        Partition.PEAKS: "No peaks found for",
        Partition.NATURAL_SITES: "No natural sites found for",
        Partition.CULTURAL_SITES: "No cultural or historic sites found for",
    }
)


def escape_search_term(term: str) -> str:
    """Escape ``term`` for embedding in a quoted Overpass regular expression.

    Backslashes go first so later escapes are not doubled.
    """

    escaped = term.replace("\\", "\\\\")
    escaped = escaped.replace('"', '\\"')
    escaped = _BRACKETS.sub(r"\\\g<0>", escaped)
    escaped = _PARENS.sub(r"\\\g<0>", escaped)
    return _REGEX_META.sub(r"\\\g<0>", escaped)


def selectors_for_type(location_type: str) -> tuple[TagSelector, ...]:
    return TYPE_SELECTORS.get(location_type, GENERAL_SELECTORS)


def build_query(
    term: str,
    selectors: Iterable[TagSelector],
    *,
    region: SearchRegion,
    timeout_seconds: int,
) -> str:
    """Union query for features named exactly ``term`` matching any selector."""

    name_filter = f'["name"~"^{escape_search_term(term)}$"]'
    header, scope = _region_clauses(region)

    statements = [
        f"{element}{selector.filter()}{name_filter}{scope};"
        for selector in selectors
        for element in selector.elements
    ]
    lines = [f"[out:json][timeout:{timeout_seconds}];"]
    if header:
        lines.append(header)
    lines.append("(")
    lines.extend(f"  {statement}" for statement in statements)
    lines.append(");")
    lines.append("out center;")
    return "\n".join(lines)


def _region_clauses(region: SearchRegion) -> tuple[str | None, str]:
    if region.bbox is not None:
        box = region.bbox
        return None, f"({box.min_lat},{box.min_lon},{box.max_lat},{box.max_lon})"
    if region.area_name:
        area = region.area_name.replace("\\", "\\\\").replace('"', '\\"')
        header = f'area["name"="{area}"]["admin_level"="{region.admin_level}"]->.searchArea;'
        return header, "(area.searchArea)"
    return None, ""
