#!/usr/bin/env python3
"""CLI for moving a local query history export into the backend.

The export is a JSON array of history entries as kept by the old local
store (``createdAt`` in milliseconds).

Usage:
  migrate_history.py export.json
  migrate_history.py export.json --dry-run
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List

from pydantic import ValidationError

from rich_history.config import get_settings
from rich_history.lib.logging import configure_logging
from rich_history.models.api_models import QueryHistoryMigrationRequest
from rich_history.models.rich_history_query import RichHistoryQuery
from rich_history.services.datasource_registry import InMemoryDatasourceRegistry
from rich_history.services.errors import RemoteError
from rich_history.services.mapper import to_dto
from rich_history.services.remote_storage import RichHistoryRemoteStorage
from rich_history.services.transport import AiohttpBackendTransport

LOG = logging.getLogger("migrate_history")


def load_local_history(path: Path) -> List[RichHistoryQuery]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of history entries")
    return [RichHistoryQuery.model_validate(item) for item in data]


async def run(args: argparse.Namespace) -> int:
    try:
        queries = load_local_history(Path(args.export))
    except (OSError, ValueError, ValidationError) as exc:
        LOG.error("Could not read %s: %s", args.export, exc)
        return 2

    if args.dry_run:
        body = QueryHistoryMigrationRequest(queries=[to_dto(q) for q in queries])
        print(json.dumps(body.model_dump(by_alias=True), indent=2))
        return 0

    settings = get_settings()
    # Migration never resolves names, so an empty registry is enough.
    storage = RichHistoryRemoteStorage(AiohttpBackendTransport.from_settings(settings), InMemoryDatasourceRegistry())
    try:
        ack = await storage.migrate(queries)
    except RemoteError as exc:
        LOG.error("Migration failed: %s", exc)
        return 1
    print(f"Migrated {len(queries)} entries" + (f": {ack.message}" if ack.message else ""))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Migrate local query history into the backend")
    parser.add_argument("export", help="JSON file with the local history entries")
    parser.add_argument("--dry-run", action="store_true", help="Print the request body instead of sending it")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
