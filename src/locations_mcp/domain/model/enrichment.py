"""Data returned by the encyclopedic enrichment sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .location import Coordinates


@dataclass(frozen=True, slots=True)
class NarrativeSummary:
    title: str | None = None
    description: str | None = None
    thumbnail: str | None = None
    image: str | None = None
    url: str | None = None
    lang: str | None = None


@dataclass(frozen=True, slots=True)
class StructuredFacts:
    label: str | None = None
    description: str | None = None
    population: float | None = None
    elevation: float | None = None
    area: float | None = None
    official_website: str | None = None
    images: tuple[str, ...] = field(default_factory=tuple)
    coordinates: Coordinates | None = None
