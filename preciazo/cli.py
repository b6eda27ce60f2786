"""Command line entry points for working with saved product pages."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from preciazo.db.store import ObservationStore
from preciazo.extract.errors import ExtractionError, UnknownRetailer
from preciazo.extract.toolkit import get_canonical_url, parse_document
from preciazo.ingest.pipeline import IngestPipeline
from preciazo.logging_config import setup_logging
from preciazo.normalize.processor import InvalidRecord

logger = logging.getLogger(__name__)


def _read_page(path: Path) -> tuple[bytes, Optional[str]]:
    content = path.read_bytes()
    return content, get_canonical_url(parse_document(content))


def _fetched_at(path: Path, override: Optional[datetime]) -> datetime:
    if override is not None:
        return override
    return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)


def parse_file(args: argparse.Namespace, pipeline: Optional[IngestPipeline] = None) -> int:
    """Extract one saved page and print the record as JSON."""
    pipeline = pipeline or IngestPipeline(store=ObservationStore())
    path = Path(args.path)
    html, url = _read_page(path)

    print(f"URL: {url}", file=sys.stderr)
    try:
        record = pipeline.extract_page(html, retailer=args.retailer, url=url)
    except (ExtractionError, UnknownRetailer) as e:
        print(f"error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))
    return 0


async def ingest_files(args: argparse.Namespace, pipeline: Optional[IngestPipeline] = None) -> int:
    """Extract and append each saved page; returns 1 if any page failed."""
    if pipeline is None:
        from preciazo.db.session import init_db

        await init_db()
        pipeline = IngestPipeline(store=ObservationStore())

    failed = 0
    for name in args.paths:
        path = Path(name)
        try:
            html, url = _read_page(path)
            row = await pipeline.ingest_page(
                html,
                fetched_at=_fetched_at(path, args.fetched_at),
                retailer=args.retailer,
                url=url,
            )
        except (OSError, ExtractionError, UnknownRetailer, InvalidRecord) as e:
            failed += 1
            logger.error(f"Failed to ingest {path}: {type(e).__name__}: {e}")
            continue
        logger.info(f"Ingested {path} as observation {row.id} for {row.ean}")

    logger.info(f"Ingested {len(args.paths) - failed}/{len(args.paths)} pages")
    return 1 if failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="preciazo", description="Retailer price observation pipeline")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse-file", help="Extract one saved product page")
    parse_cmd.add_argument("path", help="Path to a saved HTML page")
    parse_cmd.add_argument("--retailer", help="Retailer key (defaults to the canonical URL host)")

    ingest_cmd = subparsers.add_parser("ingest", help="Extract saved pages and store them")
    ingest_cmd.add_argument("paths", nargs="+", help="Paths to saved HTML pages")
    ingest_cmd.add_argument("--retailer", help="Retailer key (defaults to the canonical URL host)")
    ingest_cmd.add_argument(
        "--fetched-at",
        type=datetime.fromisoformat,
        default=None,
        help="Fetch time in ISO format (defaults to each file's modification time)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(json_files=False)

    if args.command == "parse-file":
        return parse_file(args)
    return asyncio.run(ingest_files(args))


if __name__ == "__main__":
    sys.exit(main())
