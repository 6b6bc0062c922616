"""Overpass API response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OverpassBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class OverpassCenter(OverpassBaseModel):
    lat: float
    lon: float


class OverpassElement(OverpassBaseModel):
    type: str
    id: int
    lat: float | None = None
    lon: float | None = None
    center: OverpassCenter | None = None
    tags: dict[str, str] = Field(default_factory=dict)


class OverpassResponse(OverpassBaseModel):
    elements: list[OverpassElement] = Field(default_factory=list)
