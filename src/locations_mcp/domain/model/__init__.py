"""Domain model for location lookup."""

from __future__ import annotations

from .enrichment import NarrativeSummary, StructuredFacts
from .enums import UNKNOWN_TYPE, LocationType, Partition, Provenance
from .location import Coordinates, CrossReferenceIds, LocationRecord, RawFeature

__all__ = [
    "UNKNOWN_TYPE",
    "Coordinates",
    "CrossReferenceIds",
    "LocationRecord",
    "LocationType",
    "NarrativeSummary",
    "Partition",
    "Provenance",
    "RawFeature",
    "StructuredFacts",
]
