"""Field precedence rules for combining a feature with its enrichment."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .model import LocationRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from datetime import datetime

    from .model import NarrativeSummary, RawFeature, StructuredFacts

_LEADING_NUMBER = re.compile(r"^\s*(-?\d+(?:[.,]\d+)?)")


def merge_location(
    feature: RawFeature,
    summary: NarrativeSummary | None,
    facts: StructuredFacts | None,
    *,
    now: datetime,
) -> LocationRecord:
    """Build the canonical record for ``feature``.

    - description, url and language come from the narrative summary; the
      description falls back to the structured facts.
    - population, area and website come from the structured facts only.
    - elevation comes from the structured facts, then from the ``ele`` tag.
    - images are the de-duplicated union of the summary image, its thumbnail
      and the structured image list, in that order.
    """

    description = (summary.description if summary else None) or (
        facts.description if facts else None
    )
    elevation = facts.elevation if facts else None
    if elevation is None:
        elevation = parse_elevation_tag(feature.tags)

    return LocationRecord(
        name=feature.name.strip(),
        type=feature.type,
        lat=feature.lat,
        lon=feature.lon,
        osm_id=feature.osm_id,
        osm_type=feature.osm_type,
        osm_tags=dict(feature.tags),
        description=description or None,
        wikipedia_url=summary.url if summary else None,
        wikipedia_lang=summary.lang if summary else None,
        population=facts.population if facts else None,
        elevation=elevation,
        area=facts.area if facts else None,
        official_website=facts.official_website if facts else None,
        images=merge_images(
            summary.image if summary else None,
            summary.thumbnail if summary else None,
            *(facts.images if facts else ()),
        ),
        cross_references=feature.cross_references,
        last_updated=now,
    )


def merge_images(*candidates: str | None) -> list[str]:
    return _unique(candidate.strip() for candidate in candidates if candidate and candidate.strip())


def parse_elevation_tag(tags: Mapping[str, str]) -> float | None:
    raw = tags.get("ele")
    if not raw:
        return None
    match = _LEADING_NUMBER.match(raw)
    if match is None:
        return None
    return float(match.group(1).replace(",", "."))


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered
