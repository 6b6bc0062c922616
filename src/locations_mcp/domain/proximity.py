"""Proximity rule used to collapse near-identical candidates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .model import LocationRecord, RawFeature

# Roughly 100 m at the latitudes we search.
PROXIMITY_TOLERANCE_DEGREES: Final[float] = 0.001


def is_same_place(
    first: RawFeature | LocationRecord,
    second: RawFeature | LocationRecord,
    *,
    tolerance: float = PROXIMITY_TOLERANCE_DEGREES,
) -> bool:
    return abs(first.lat - second.lat) < tolerance and abs(first.lon - second.lon) < tolerance


def is_near_any(
    candidate: RawFeature | LocationRecord,
    accepted: Iterable[RawFeature | LocationRecord],
    *,
    tolerance: float = PROXIMITY_TOLERANCE_DEGREES,
) -> bool:
    return any(is_same_place(candidate, other, tolerance=tolerance) for other in accepted)
