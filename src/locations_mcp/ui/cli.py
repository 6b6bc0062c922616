from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from locations_mcp.app import build_location_resolver, open_location_store, serve_locations
from locations_mcp.config import configure_logging
from locations_mcp.domain.categories import PARTITION_ORDER
from locations_mcp.domain.errors import InputError
from locations_mcp.domain.model import LocationType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from locations_mcp.domain.model import LocationRecord

log = logging.getLogger(__name__)

_TYPES = [str(location_type) for location_type in LocationType]
_COLLECTIONS = [str(partition) for partition in PARTITION_ORDER]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Look up and cache named locations")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Serve the location tools over MCP stdio")

    search = subparsers.add_parser("search", help="Resolve a location by name")
    search.add_argument("name", type=str, help="Exact location name")
    scope = search.add_mutually_exclusive_group()
    scope.add_argument("--type", choices=_TYPES, help="Restrict to one location type")
    scope.add_argument("--category", choices=_COLLECTIONS, help="Restrict to one collection")
    search.add_argument(
        "--all",
        action="store_true",
        help="Return every match instead of the best one",
    )

    get = subparsers.add_parser("get", help="Fetch a stored location by id")
    get.add_argument("id", type=str, help="Location id")
    get.add_argument("--collection", choices=_COLLECTIONS, help="Collection to look in")

    listing = subparsers.add_parser("list", help="List stored locations")
    listing.add_argument("--collection", choices=_COLLECTIONS, help="Collection to list")
    listing.add_argument("--type", choices=_TYPES, help="Filter by location type")
    listing.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum number of results (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _print_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")


def _documents(records: list[LocationRecord]) -> list[dict[str, object]]:
    return [record.to_document() for record in records]


async def _search(args: argparse.Namespace) -> object:
    resolver = build_location_resolver()
    if args.all:
        records = await resolver.resolve_all(args.name, args.type, args.category)
        return _documents(records)
    record = await resolver.resolve_one(args.name, args.type, args.category)
    return record.to_document()


def main(argv: Sequence[str] | None = None) -> None:
    """Run one lookup or serve the MCP tools over stdio."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "serve":
            asyncio.run(serve_locations())
            return

        open_location_store()
        if parsed_args.command == "search":
            _print_json(asyncio.run(_search(parsed_args)))
        elif parsed_args.command == "get":
            record = build_location_resolver().get_by_id(parsed_args.id, parsed_args.collection)
            _print_json(record.to_document())
        elif parsed_args.command == "list":
            records = build_location_resolver().list_locations(
                parsed_args.collection,
                location_type=parsed_args.type,
                limit=parsed_args.limit,
            )
            _print_json(_documents(records))
        else:
            raise InputError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except InputError as exc:
        log.error("Invalid input: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Exit quietly on Ctrl+C."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
