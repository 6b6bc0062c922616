"""Location records and the raw features they are resolved from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from .enums import Partition, Provenance


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class CrossReferenceIds:
    """Identifiers used to fetch enrichment, kept for provenance."""

    wikipedia: str | None = None
    wikidata: str | None = None


@dataclass(frozen=True, slots=True)
class RawFeature:
    """A named feature as returned by the geodata source, already normalised."""

    name: str
    type: str
    lat: float
    lon: float
    osm_id: int
    osm_type: str
    tags: Mapping[str, str] = field(default_factory=dict)

    @property
    def cross_references(self) -> CrossReferenceIds:
        return CrossReferenceIds(
            wikipedia=self.tags.get("wikipedia") or None,
            wikidata=self.tags.get("wikidata") or None,
        )


@dataclass(slots=True)
class LocationRecord:
    """Canonical enriched location, as persisted and returned to callers."""

    name: str
    type: str
    lat: float
    lon: float
    osm_id: int | None = None
    osm_type: str | None = None
    osm_tags: dict[str, str] = field(default_factory=dict)
    description: str | None = None
    wikipedia_url: str | None = None
    wikipedia_lang: str | None = None
    population: float | None = None
    elevation: float | None = None
    area: float | None = None
    official_website: str | None = None
    images: list[str] = field(default_factory=list)
    cross_references: CrossReferenceIds = field(default_factory=CrossReferenceIds)
    last_updated: datetime | None = None
    provenance: Provenance | None = None
    id: str | None = None
    partition: Partition | None = None

    def to_document(self) -> dict[str, object]:
        """JSON-ready mapping; optional facts are omitted when absent."""

        document: dict[str, object] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "lat": self.lat,
            "lon": self.lon,
            "osm_id": self.osm_id,
            "osm_type": self.osm_type,
            "osm_tags": dict(self.osm_tags),
        }
        optional: dict[str, object | None] = {
            "description": self.description,
            "wikipedia_url": self.wikipedia_url,
            "wikipedia_lang": self.wikipedia_lang,
            "population": self.population,
            "elevation": self.elevation,
            "area": self.area,
            "official_website": self.official_website,
            "wikipedia_tag": self.cross_references.wikipedia,
            "wikidata_id": self.cross_references.wikidata,
        }
        document.update({key: value for key, value in optional.items() if value is not None})
        document["images"] = list(self.images)
        document["last_updated"] = self.last_updated.isoformat() if self.last_updated else None
        document["source"] = str(self.provenance) if self.provenance else None
        document["collection"] = str(self.partition) if self.partition else None
        return document
