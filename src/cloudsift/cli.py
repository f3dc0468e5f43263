"""CLI entry point for CloudSift."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudsift",
        description="CloudSift — query and update a CloudSearch domain",
    )
    parser.add_argument("--config", "-c", type=str, default=None, help="Path to YAML configuration file")
    parser.add_argument("--domain", "-d", type=str, default=None, help="Search domain (overrides config)")
    parser.add_argument("--region", type=str, default=None, help="AWS region (overrides config)")
    parser.add_argument("--api-version", type=str, default=None, help="API version, e.g. 2013-01-01")
    parser.add_argument("--live", action="store_true", help="Talk to the service instead of sandbox mode")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument("--version", action="version", version=f"CloudSift {_get_version()}")

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Search the domain")
    search.add_argument("term", nargs="?", default="", help="Free-text search term")
    search.add_argument("--filter", type=str, default=None, help='Filter as JSON, e.g. \'{"and": {"type": "donuts"}}\'')
    search.add_argument("--page", type=int, default=None, help="1-based page number")
    search.add_argument("--page-size", type=int, default=10, help="Hits per page")
    search.add_argument("--rank", type=str, default=None, help="Rank field, optionally FIELD:desc")
    search.add_argument("--return-fields", type=str, default=None, help="Comma-separated fields to return")

    add = commands.add_parser("add", help="Add or replace a document")
    add.add_argument("id", help="Document id")
    add.add_argument(
        "--field",
        "-f",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Document field (repeatable)",
    )

    remove = commands.add_parser("remove", help="Remove a document")
    remove.add_argument("id", help="Document id")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    from cloudsift.client.client import CloudSearchClient
    from cloudsift.config.settings import Mode, Settings
    from cloudsift.exceptions import CloudSearchError
    from cloudsift.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return 1
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.domain:
        settings.search_domain = args.domain
    if args.region:
        settings.aws_region = args.region
    if args.api_version:
        settings.api_version = args.api_version
    if args.live:
        settings.mode = Mode.LIVE
    if args.log_level:
        settings.observability.log_level = args.log_level

    setup_logging(settings.observability)

    try:
        with CloudSearchClient.from_settings(settings) as client:
            if args.command == "search":
                result = _run_search(client, args)
            elif args.command == "add":
                client.add_item(args.id, _parse_fields(args.field))
                result = {"status": "ok", "id": args.id}
            else:
                client.remove_item(args.id)
                result = {"status": "ok", "id": args.id}
    except (CloudSearchError, ValueError) as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


def _run_search(client: Any, args: argparse.Namespace) -> dict[str, Any]:
    options: dict[str, Any] = {"page_size": args.page_size}
    if args.filter:
        options["filter"] = json.loads(args.filter)
    if args.page:
        options["page"] = args.page
    if args.rank:
        options["rank"] = args.rank.split(":", 1)
    if args.return_fields:
        options["return_fields"] = args.return_fields

    hits = client.search(args.term, options)
    return {
        "ids": list(hits),
        "total_hits": hits.total_hits,
        "page": hits.current_page,
        "total_pages": hits.total_pages,
        "data": hits.data,
    }


def _parse_fields(pairs: Sequence[str]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Fields must look like KEY=VALUE, got {pair!r}")
        fields[key] = value
    return fields


def _get_version() -> str:
    """Get the package version."""
    try:
        from cloudsift import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
