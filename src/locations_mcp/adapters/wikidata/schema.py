"""Wikidata entity data schemas (only the parts we read)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WikidataBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class WikidataLanguageValue(WikidataBaseModel):
    language: str | None = None
    value: str


class WikidataDataValue(WikidataBaseModel):
    type: str
    value: Any = None


class WikidataSnak(WikidataBaseModel):
    snaktype: str = "value"
    property: str | None = None
    datavalue: WikidataDataValue | None = None


class WikidataClaim(WikidataBaseModel):
    mainsnak: WikidataSnak
    rank: str | None = None


class WikidataEntity(WikidataBaseModel):
    id: str | None = None
    labels: dict[str, WikidataLanguageValue] = Field(default_factory=dict)
    descriptions: dict[str, WikidataLanguageValue] = Field(default_factory=dict)
    claims: dict[str, list[WikidataClaim]] = Field(default_factory=dict)


class WikidataEntityData(WikidataBaseModel):
    entities: dict[str, WikidataEntity]
