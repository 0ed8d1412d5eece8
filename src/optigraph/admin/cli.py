"""Command-line access to the content graph admin operations."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from optigraph.config import get_graph_config, get_settings
from optigraph.exceptions import ConfigurationError
from optigraph.graph import CONTENT_SEARCH_QUERY, GraphClient, recent_content_query
from optigraph.i18n import load_i18n_config, to_backend_locale, to_url_locale
from optigraph.validation import clamp_number


def _read_synonyms(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


async def _upload_synonyms(client: GraphClient, args: argparse.Namespace) -> int:
    result = await client.upload_synonyms(
        _read_synonyms(args.file),
        slot=args.slot,
        language_routing=args.language_routing,
    )
    _emit({"success": result.success, "message": result.message, "error": result.error})
    return 0 if result.success else 1


async def _search(client: GraphClient, query: str, variables: dict[str, Any]) -> int:
    result = await client.search_content(query, variables)
    if result.error:
        print(result.error, file=sys.stderr)
        return 1
    _emit([item.to_dict() for item in result.items])
    return 0


def _locale(args: argparse.Namespace) -> int:
    if args.to == "url":
        _emit({"input": args.locale, "locale": to_url_locale(args.locale)})
        return 0
    chain = load_i18n_config(get_settings().i18n_config_json).fallback_chain
    _emit(
        {
            "input": args.locale,
            "locale": to_backend_locale(args.locale),
            "fallbackChain": chain.backend_chain(args.locale)[1:],
        },
    )
    return 0


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="optigraph", description="Content graph admin utilities.")
    commands = parser.add_subparsers(dest="command", required=True)

    synonyms = commands.add_parser("synonyms", help="Upload synonyms to a slot (replaces its contents)")
    synonyms.add_argument("file", help="Synonym file, or '-' for stdin")
    synonyms.add_argument("--slot", choices=("1", "2"), default="1")
    synonyms.add_argument("--language-routing", default="standard", help="Locale tag or 'standard'")

    search = commands.add_parser("search", help="Full-text content search")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=10)

    recent = commands.add_parser("recent", help="List recently modified content")
    recent.add_argument("--limit", type=int, default=20)
    recent.add_argument("--content-type", default=None)

    locale = commands.add_parser("locale", help="Convert a locale tag")
    locale.add_argument("locale")
    locale.add_argument("--to", choices=("backend", "url"), default="backend")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None, *, client: GraphClient | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    if args.command == "locale":
        return _locale(args)

    if client is None:
        try:
            client = GraphClient(get_graph_config(), timeout=get_settings().graph_timeout_seconds)
        except ConfigurationError as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            return 2

    if args.command == "synonyms":
        return asyncio.run(_upload_synonyms(client, args))
    if args.command == "search":
        variables = {"searchTerm": args.query.strip(), "limit": clamp_number(args.limit, 1, 50)}
        return asyncio.run(_search(client, CONTENT_SEARCH_QUERY, variables))
    try:
        query = recent_content_query(args.content_type)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    return asyncio.run(_search(client, query, {"limit": clamp_number(args.limit, 1, 50)}))


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    sys.exit(main())
