"""Command-line entry point: run one ingestion pass and print the records.

Usage:
    dropbox-source [--path /Photos] [--no-recursive] [--extensions .jpg,.md]
                   [--no-folders] [--folder-match path|name] [--output FILE]

Records are written as JSON lines to stdout (or ``--output``); logs go to
stderr. The access token comes from ``DROPBOX_SOURCE_ACCESS_TOKEN``.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, TextIO

from dropbox_source.core.config import Settings, settings
from dropbox_source.core.logging import get_logger, setup_logging
from dropbox_source.db import create_engine, create_session_maker, get_database_url, init_db
from dropbox_source.schemas.options import FolderMatch, parse_extensions
from dropbox_source.schemas.record import AnyRecord
from dropbox_source.services import (
    DropboxClient,
    DropboxSource,
    JsonLinesSink,
    RemoteFileStore,
    ResourceTracker,
    SqlCache,
)

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dropbox-source",
        description="List a Dropbox folder and emit linked file and folder records.",
    )
    parser.add_argument("--path", help="Remote folder to scan (default: app root)")
    parser.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        default=None,
        help="Only list the top level of the folder",
    )
    parser.add_argument("--extensions", help="Comma-separated extensions, e.g. .jpg,.png,.md")
    parser.add_argument(
        "--no-folders",
        dest="create_folder_nodes",
        action="store_false",
        default=None,
        help="Do not emit folder records",
    )
    parser.add_argument(
        "--folder-match",
        choices=[m.value for m in FolderMatch],
        help="Match files to folders by full parent path or bare folder name",
    )
    parser.add_argument("--output", type=Path, help="Write records to this file instead of stdout")
    return parser.parse_args(argv)


def apply_overrides(config: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command-line values taking precedence."""
    updates: dict[str, Any] = {}
    if args.path is not None:
        updates["path"] = args.path
    if args.recursive is not None:
        updates["recursive"] = args.recursive
    if args.extensions is not None:
        updates["extensions"] = parse_extensions(args.extensions)
    if args.create_folder_nodes is not None:
        updates["create_folder_nodes"] = args.create_folder_nodes
    if args.folder_match is not None:
        updates["folder_match"] = FolderMatch(args.folder_match)
    return config.model_copy(update=updates)


async def run(config: Settings, output: TextIO) -> list[AnyRecord]:
    """Run one ingestion pass with the Dropbox, SQL cache and file store."""
    engine = create_engine(get_database_url(config), echo=config.debug)
    try:
        await init_db(engine)
        cache = SqlCache(create_session_maker(engine))
        sink = JsonLinesSink(output)
        tracker = ResourceTracker()

        async with DropboxClient(
            config.access_token,
            base_url=config.api_base_url,
            timeout=config.request_timeout,
        ) as client, RemoteFileStore(
            config.cache_path,
            timeout=config.request_timeout,
        ) as store:
            source = DropboxSource(
                client,
                cache,
                store,
                options=config.source_options(),
                liveness=tracker,
                sink=sink,
                max_concurrent=config.max_concurrent_downloads,
            )
            records = await source.run()

        logger.info(
            "run_summary",
            records=len(records),
            emitted=sink.count,
            reused_payloads=len(tracker),
        )
        return records
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = apply_overrides(settings, args)
    setup_logging(config)

    logger.info(
        "starting_run",
        app_name=config.app_name,
        version=config.version,
        path=config.path,
    )

    if args.output is not None:
        with args.output.open("w", encoding="utf-8") as fh:
            asyncio.run(run(config, fh))
    else:
        asyncio.run(run(config, sys.stdout))
    return 0


if __name__ == "__main__":
    sys.exit(main())
