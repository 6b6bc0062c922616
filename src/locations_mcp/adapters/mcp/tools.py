"""Tool declarations and dispatch for the location lookup server."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Final

from mcp import types

from locations_mcp.domain.categories import PARTITION_ORDER
from locations_mcp.domain.errors import InputError, LocationError
from locations_mcp.domain.model import LocationType, Partition

if TYPE_CHECKING:
    from collections.abc import Mapping

    from locations_mcp.domain.model import LocationRecord
    from locations_mcp.domain.resolution import LocationResolver

log = getLogger(__name__)

LOCATION_TYPE_VALUES: Final[list[str]] = [str(location_type) for location_type in LocationType]
COLLECTION_VALUES: Final[list[str]] = [str(partition) for partition in PARTITION_ORDER]
DEFAULT_LIST_LIMIT: Final[int] = 50

_CATEGORY_LABELS: Final[Mapping[Partition, tuple[str, str]]] = MappingProxyType(
    {
        Partition.CITIES: ("cities, towns, or villages", "city, town, or village"),
        Partition.MOUNTAINS: ("mountain ranges", "mountain range"),
        Partition.PEAKS: ("peaks", "peak"),
        Partition.NATURAL_SITES: ("natural sites like caves and waterfalls", "natural site"),
        Partition.CULTURAL_SITES: (
            "cultural and historic sites (monasteries, castles, museums, memorials)",
            "cultural or historic site",
        ),
    }
)


class ToolCallError(RuntimeError):
    """Carries the JSON error payload of a failed tool call."""


@dataclass(frozen=True, slots=True)
class ToolResponse:
    text: str
    is_error: bool = False


def _name_schema(description: str, *, with_type: bool = False) -> dict[str, Any]:
    properties: dict[str, Any] = {"name": {"type": "string", "description": description}}
    if with_type:
        properties["type"] = {
            "type": "string",
            "description": "Optional: specific type of location to search for",
            "enum": LOCATION_TYPE_VALUES,
        }
    return {"type": "object", "properties": properties, "required": ["name"]}


def _category_tools() -> list[types.Tool]:
    tools: list[types.Tool] = []
    for partition in PARTITION_ORDER:
        plural, singular = _CATEGORY_LABELS[partition]
        tools.append(
            types.Tool(
                name=f"search_{partition}",
                description=(
                    f"Search specifically for {plural}. Uses the {partition!s} collection."
                ),
                inputSchema=_name_schema(f"Name of the {singular} to search for"),
            )
        )
    for partition in PARTITION_ORDER:
        plural, singular = _CATEGORY_LABELS[partition]
        tools.append(
            types.Tool(
                name=f"search_all_{partition}",
                description=(
                    f"Search for ALL {plural} with the given name. Returns multiple "
                    "results if there are several places with the same name."
                ),
                inputSchema=_name_schema(f"Name of the {singular} to search for"),
            )
        )
    return tools


def tool_definitions() -> list[types.Tool]:
    return [
        *_category_tools(),
        types.Tool(
            name="search_location",
            description=(
                "General location search. Tries cities first, then natural features, "
                "then cultural sites."
            ),
            inputSchema=_name_schema("Name of the location to search for", with_type=True),
        ),
        types.Tool(
            name="search_all_locations",
            description=(
                "Search for ALL locations with the given name across any category."
            ),
            inputSchema=_name_schema("Name of the location to search for", with_type=True),
        ),
        types.Tool(
            name="get_location_by_id",
            description="Get a stored location by its id",
            inputSchema={
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Location id"},
                    "collection": {
                        "type": "string",
                        "description": "Optional: collection to look in",
                        "enum": COLLECTION_VALUES,
                    },
                },
                "required": ["id"],
            },
        ),
        types.Tool(
            name="list_locations",
            description="List cached locations from one collection, ordered by name",
            inputSchema={
                "type": "object",
                "properties": {
                    "collection": {
                        "type": "string",
                        "description": "Collection to list from",
                        "enum": COLLECTION_VALUES,
                        "default": str(Partition.CITIES),
                    },
                    "limit": {
                        "type": "integer",
                        "description": "Maximum number of results",
                        "default": DEFAULT_LIST_LIMIT,
                        "minimum": 1,
                    },
                    "type": {
                        "type": "string",
                        "description": "Filter by specific location type",
                        "enum": LOCATION_TYPE_VALUES,
                    },
                },
            },
        ),
    ]


class LocationToolset:
    """Dispatches tool calls to the resolver and renders JSON text results."""

    def __init__(self, resolver: LocationResolver) -> None:
        self._resolver = resolver
        self._one_by_category = {f"search_{p}": p for p in PARTITION_ORDER}
        self._all_by_category = {f"search_all_{p}": p for p in PARTITION_ORDER}

    async def call(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResponse:
        args = dict(arguments or {})
        try:
            result = await self._dispatch(name, args)
        except InputError as exc:
            log.info("Rejected %s call: %s", name, exc)
            return _error(str(exc))
        except LocationError as exc:
            log.warning("Tool %s failed: %s", name, exc)
            return _error(str(exc))
        except Exception as exc:
            log.exception("Unexpected failure in tool %s", name)
            return _error(str(exc) or type(exc).__name__)
        return ToolResponse(text=_dumps(result))

    async def _dispatch(self, name: str, args: dict[str, Any]) -> object:
        resolver = self._resolver
        if name in self._one_by_category:
            record = await resolver.resolve_one(
                _required(args, "name", "Location name is required"),
                category=self._one_by_category[name],
            )
            return record.to_document()
        if name in self._all_by_category:
            records = await resolver.resolve_all(
                _required(args, "name", "Location name is required"),
                category=self._all_by_category[name],
            )
            return _documents(records)

        match name:
            case "search_location":
                record = await resolver.resolve_one(
                    _required(args, "name", "Location name is required"),
                    location_type=_optional(args, "type"),
                )
                return record.to_document()
            case "search_all_locations":
                records = await resolver.resolve_all(
                    _required(args, "name", "Location name is required"),
                    location_type=_optional(args, "type"),
                )
                return _documents(records)
            case "get_location_by_id":
                record = resolver.get_by_id(
                    _required(args, "id", "Location ID is required"),
                    _optional(args, "collection"),
                )
                return record.to_document()
            case "list_locations":
                records = resolver.list_locations(
                    _optional(args, "collection"),
                    location_type=_optional(args, "type"),
                    limit=args.get("limit", DEFAULT_LIST_LIMIT),
                )
                return _documents(records)
            case _:
                raise InputError(f"Unknown tool: {name}")


def _required(args: Mapping[str, Any], key: str, message: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InputError(message)
    return value


def _optional(args: Mapping[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InputError(f"{key} must be a string")
    return value.strip() or None


def _documents(records: list[LocationRecord]) -> list[dict[str, object]]:
    return [record.to_document() for record in records]


def _dumps(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _error(message: str) -> ToolResponse:
    return ToolResponse(text=_dumps({"error": message}), is_error=True)
