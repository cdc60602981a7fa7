import argparse
import json
import logging
import sys
from typing import Any, Optional

import requests

from nominatim_client.client import Client
from nominatim_client.errors import NominatimError
from nominatim_client.ident import IdentificationMethod
from nominatim_client.models import StructuredSearch
from nominatim_client.settings import Settings

STRUCTURED_FIELDS = ("amenity", "street", "city", "county", "state", "country", "postalcode")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nominatim-client", description="Query a Nominatim geocoding server."
    )
    parser.add_argument("--base-url", help="Server base URL (default: NOMINATIM_BASE_URL or the public server).")
    ident = parser.add_mutually_exclusive_group()
    ident.add_argument("--user-agent", help="Identify with this User-Agent.")
    ident.add_argument("--referer", help="Identify with this Referer.")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests to stderr.")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show server status.")

    search = sub.add_parser("search", help="Free-text or structured search.")
    search.add_argument("query", nargs="*", help="Free-text query.")
    for name in STRUCTURED_FIELDS:
        search.add_argument(f"--{name}", help=f"Structured search: {name}.")

    reverse = sub.add_parser("reverse", help="Place at a coordinate.")
    reverse.add_argument("lat", help="Latitude, decimal degrees.")
    reverse.add_argument("lon", help="Longitude, decimal degrees.")
    reverse.add_argument("--zoom", type=int, help="Address detail level, 0-18.")

    lookup = sub.add_parser("lookup", help="Places for OSM ids like R146656 or W50637691.")
    lookup.add_argument("ids", nargs="+", help="OSM references.")
    return parser


def _make_client(args: argparse.Namespace) -> Client:
    settings = Settings.from_env()
    if args.base_url:
        settings.BASE_URL = args.base_url
    if args.timeout is not None:
        settings.TIMEOUT = args.timeout
    if args.user_agent:
        return Client(
            IdentificationMethod.from_user_agent(args.user_agent),
            base_url=settings.BASE_URL,
            timeout=settings.TIMEOUT,
        )
    if args.referer:
        return Client(
            IdentificationMethod.from_referer(args.referer),
            base_url=settings.BASE_URL,
            timeout=settings.TIMEOUT,
        )
    return Client.from_settings(settings)


def _dump(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    structured = None
    if args.command == "search":
        structured = StructuredSearch(**{name: getattr(args, name) for name in STRUCTURED_FIELDS})
        if args.query and not structured.is_empty():
            parser.error("search takes either a free-text query or structured fields, not both")
        if not args.query and structured.is_empty():
            parser.error("search needs a query or at least one structured field")

    try:
        with _make_client(args) as client:
            if args.command == "status":
                _dump(client.status().to_dict())
            elif args.command == "search":
                if args.query:
                    places = client.search(" ".join(args.query))
                else:
                    places = client.search_structured(structured)
                _dump([p.to_dict() for p in places])
            elif args.command == "reverse":
                place = client.reverse(args.lat, args.lon, zoom=args.zoom)
                if place is None:
                    _dump(None)
                    return 1
                _dump(place.to_dict())
            elif args.command == "lookup":
                _dump([p.to_dict() for p in client.lookup(args.ids)])
    except (NominatimError, requests.RequestException) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0
