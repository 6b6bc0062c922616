"""Translate Wikidata entities into structured facts."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

from locations_mcp.domain.model import Coordinates, StructuredFacts

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .schema import WikidataDataValue, WikidataEntity, WikidataLanguageValue

COMMONS_FILE_URL: Final[str] = "https://commons.wikimedia.org/wiki/Special:FilePath/{filename}"


class WikidataProperty(StrEnum):
    POPULATION = "P1082"
    ELEVATION = "P2044"
    AREA = "P2046"
    OFFICIAL_WEBSITE = "P856"
    IMAGE = "P18"
    COORDINATES = "P625"


def translate_entity(entity: WikidataEntity, *, languages: Sequence[str]) -> StructuredFacts:
    return StructuredFacts(
        label=_first_language(entity.labels, languages),
        description=_first_language(entity.descriptions, languages),
        population=_quantity(entity, WikidataProperty.POPULATION),
        elevation=_quantity(entity, WikidataProperty.ELEVATION),
        area=_quantity(entity, WikidataProperty.AREA),
        official_website=_string(entity, WikidataProperty.OFFICIAL_WEBSITE),
        images=_images(entity),
        coordinates=_coordinates(entity),
    )


def commons_file_url(filename: str) -> str:
    return COMMONS_FILE_URL.format(filename=quote(filename, safe=""))


def _first_language(
    values: dict[str, WikidataLanguageValue],
    languages: Sequence[str],
) -> str | None:
    for language in languages:
        entry = values.get(language)
        if entry is not None and entry.value:
            return entry.value
    return None


def _main_value(entity: WikidataEntity, prop: WikidataProperty) -> WikidataDataValue | None:
    claims = entity.claims.get(prop)
    if not claims:
        return None
    snak = claims[0].mainsnak
    if snak.snaktype != "value":
        return None
    return snak.datavalue


def _quantity(entity: WikidataEntity, prop: WikidataProperty) -> float | None:
    datavalue = _main_value(entity, prop)
    if datavalue is None or datavalue.type != "quantity" or not isinstance(datavalue.value, dict):
        return None
    amount = datavalue.value.get("amount")
    try:
        return float(amount)
    except (TypeError, ValueError):
        return None


def _string(entity: WikidataEntity, prop: WikidataProperty) -> str | None:
    datavalue = _main_value(entity, prop)
    if datavalue is None or not isinstance(datavalue.value, str):
        return None
    return datavalue.value or None


def _images(entity: WikidataEntity) -> tuple[str, ...]:
    urls: list[str] = []
    for claim in entity.claims.get(WikidataProperty.IMAGE, ()):
        datavalue = claim.mainsnak.datavalue
        if datavalue is None or not isinstance(datavalue.value, str) or not datavalue.value:
            continue
        urls.append(commons_file_url(datavalue.value))
    return tuple(urls)


def _coordinates(entity: WikidataEntity) -> Coordinates | None:
    datavalue = _main_value(entity, WikidataProperty.COORDINATES)
    if datavalue is None or not isinstance(datavalue.value, dict):
        return None
    lat = datavalue.value.get("latitude")
    lon = datavalue.value.get("longitude")
    if not isinstance(lat, int | float) or not isinstance(lon, int | float):
        return None
    return Coordinates(lat=float(lat), lon=float(lon))
