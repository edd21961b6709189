#!/usr/bin/env python3
"""CLI for reading query history from the backend.

Usage:
  search_history.py --datasources datasources.json
  search_history.py --datasources datasources.json --search rate --starred
  search_history.py --datasources datasources.json --datasource Prometheus --from 0 --to 30 --sort asc
"""
import argparse
import asyncio
import json
import logging
import sys

from pydantic import ValidationError

from rich_history.config import get_settings
from rich_history.lib.logging import configure_logging
from rich_history.models.rich_history_query import RichHistorySearchFilters, SortOrder
from rich_history.services.datasource_registry import InMemoryDatasourceRegistry
from rich_history.services.errors import RemoteError
from rich_history.services.query_params import QueryParamsConfig
from rich_history.services.remote_storage import RichHistoryRemoteStorage
from rich_history.services.transport import AiohttpBackendTransport

LOG = logging.getLogger("search_history")

SORT_CHOICES = {"desc": SortOrder.Descending, "asc": SortOrder.Ascending}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search remote query history")
    parser.add_argument("--datasources", required=True, help="JSON file mapping datasource names to uids")
    parser.add_argument("--search", default="", help="Text to search for")
    parser.add_argument("--datasource", action="append", default=[], help="Datasource name to filter on (repeatable)")
    parser.add_argument("--sort", choices=sorted(SORT_CHOICES), default="desc")
    parser.add_argument("--starred", action="store_true", help="Only starred entries")
    parser.add_argument("--from", dest="from_days", type=int, default=0, help="Newest edge, days ago")
    parser.add_argument("--to", dest="to_days", type=int, default=7, help="Oldest edge, days ago")
    parser.add_argument("--page", type=int, default=None)
    return parser


async def run(args: argparse.Namespace) -> int:
    try:
        registry = InMemoryDatasourceRegistry.from_json_file(args.datasources)
        filters = RichHistorySearchFilters(
            search=args.search,
            datasource_filters=args.datasource,
            sort_order=SORT_CHOICES[args.sort],
            starred=args.starred,
            from_=args.from_days,
            to=args.to_days,
            page=args.page,
        )
    except (OSError, ValueError, ValidationError) as exc:
        LOG.error("Invalid search arguments: %s", exc)
        return 2

    settings = get_settings()
    storage = RichHistoryRemoteStorage(
        AiohttpBackendTransport.from_settings(settings),
        registry,
        QueryParamsConfig.from_settings(settings),
    )
    try:
        items = await storage.get_rich_history(filters)
    except RemoteError as exc:
        LOG.error("Query history search failed: %s", exc)
        return 1
    print(json.dumps([item.model_dump(by_alias=True) for item in items], indent=2))
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
