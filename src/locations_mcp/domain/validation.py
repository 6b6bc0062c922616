"""Validation gate applied to merged records before they are persisted."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .categories import is_known_type

if TYPE_CHECKING:
    from .model import LocationRecord


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    errors: tuple[FieldError, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_location(record: LocationRecord) -> ValidationResult:
    """Run every check independently and collect all field errors.

    The record is never mutated.
    """

    errors: list[FieldError] = []

    name = record.name
    if not isinstance(name, str) or not name.strip():
        errors.append(FieldError("name", "Name is required and must be a non-empty string"))

    if not _in_range(record.lat, 90.0):
        errors.append(FieldError("lat", "Valid latitude is required (-90 to 90)"))

    if not _in_range(record.lon, 180.0):
        errors.append(FieldError("lon", "Valid longitude is required (-180 to 180)"))

    location_type = record.type
    if not isinstance(location_type, str) or not location_type.strip():
        errors.append(FieldError("type", "Type is required"))
    elif not is_known_type(location_type):
        errors.append(FieldError("type", f'Type "{location_type}" is not a known location type'))

    return ValidationResult(errors=tuple(errors))


def _in_range(value: object, bound: float) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    if math.isnan(value):
        return False
    return -bound <= value <= bound
