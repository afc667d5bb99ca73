"""CLI entrypoint for weather_geo."""

from __future__ import annotations

import argparse
import json

from weather_geo.logging_config import setup_logging
from weather_geo.models import Suggestion


def main() -> None:
    setup_logging()

    parser = argparse.ArgumentParser(prog="weather-geo")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve")

    resolve_parser = sub.add_parser("resolve")
    resolve_parser.add_argument("query")
    resolve_parser.add_argument("--limit", type=int, default=10)
    resolve_parser.add_argument("--country", default=None)
    resolve_parser.add_argument("--autocomplete", action="store_true")

    parse_parser = sub.add_parser("parse")
    parse_parser.add_argument("query")

    try_parser = sub.add_parser("try")
    try_parser.add_argument("query", nargs="?")
    try_parser.add_argument("--limit", type=int, default=10)

    args = parser.parse_args()

    if args.command == "serve":
        _serve()
    elif args.command == "resolve":
        _resolve_once(args.query, args.limit, args.country, args.autocomplete)
    elif args.command == "parse":
        _parse_once(args.query)
    elif args.command == "try":
        _try_mode(args.query, args.limit)


def _serve() -> None:
    import uvicorn

    from weather_geo.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "weather_geo.api:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=(settings.env == "development"),
        log_level=settings.log_level.lower(),
    )


def _resolve_once(query: str, limit: int, country: str | None, autocomplete: bool) -> None:
    from weather_geo.resolver import get_resolver

    results = get_resolver().resolve_candidates(
        query, limit, country_filter=country, include_priority=autocomplete,
    )
    print(json.dumps([s.to_payload() for s in results], ensure_ascii=False, indent=2))


def _parse_once(query: str) -> None:
    from weather_geo.resolver import get_resolver

    resolver = get_resolver()
    normalized = resolver.normalize(query)
    parts = resolver.parse(query)
    print(json.dumps(
        {
            "normalized": normalized,
            "city": parts.city,
            "state": parts.state_code,
            "country": parts.country_code,
            "alias_only": parts.alias_only,
            "explicit_country": resolver.detect_explicit_country(normalized),
        },
        ensure_ascii=False,
        indent=2,
    ))


def _try_mode(initial_query: str | None, limit: int) -> None:
    from weather_geo.resolver import get_resolver

    resolver = get_resolver()

    def run_once(query: str) -> None:
        _print_cli_result(query, resolver.resolve_candidates(query, limit))

    if initial_query:
        run_once(initial_query)
        return

    print("Weather Geo Interactive")
    print("Enter a location query, e.g. 'Paris, Texas, USA' or 'fr'.")
    print("Type 'quit' to exit.")

    while True:
        query = input("query> ").strip()
        if not query:
            continue
        if query.lower() in {"quit", "exit", "q"}:
            break
        run_once(query)


def _print_cli_result(query: str, results: list[Suggestion]) -> None:
    print("\n" + "-" * 72)
    print(f"Query: {query}")
    print(f"Results: {len(results)}")

    if not results:
        print("(none)")
        return

    for i, s in enumerate(results, 1):
        print(f"\n{i}. {s.display_name}")
        print(f"   Type:    {s.type}")
        print(f"   Badge:   {s.badge}")
        print(f"   Id:      {s.id}")
        if s.is_capital:
            print(f"   Capital of {s.country_name}")


if __name__ == "__main__":
    main()
