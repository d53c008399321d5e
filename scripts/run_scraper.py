"""Manual batch runner for testing and debugging extractors.

Runs a batch of sources through the scraping core and prints the
outcome of each one. Records are posted to the ingest API only when
``--post`` is given.

Usage:
    python scripts/run_scraper.py --url https://diaonline.supermercadosdia.com.ar/leche-entera-1l/p
    python scripts/run_scraper.py --url https://www.cotodigital.com.ar/sitios/cdigi/productos/... --type coto
    python scripts/run_scraper.py --sources sources.json --post

A sources file is a JSON list of objects with ``id``, ``url``, ``type``
and optionally ``name`` and ``product_id``.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List

from pydantic import ValidationError

from pricetracker.config import settings
from pricetracker.core.logging_setup import configure_logging
from pricetracker.schemas.source import Source
from pricetracker.scrapers.batch_runner import BatchItemResult, BatchRunner
from pricetracker.scrapers.persistence import HttpRecordSink, MemoryRecordSink
from pricetracker.scrapers.registry import ScraperRegistry, create_default_registry


def load_sources(path: str) -> List[Source]:
    """Read a JSON list of sources from ``path``."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError("sources file must contain a JSON list")
    return [Source.model_validate(item) for item in raw]


def source_from_url(url: str, type_tag: str, registry: ScraperRegistry) -> Source:
    """Build a one-off source, detecting its type from the URL if needed."""
    type_tag = type_tag or registry.detect_type(url)
    if not type_tag:
        raise ValueError(
            f"could not detect the site of {url}; pass --type "
            f"({', '.join(registry.registered_types())})"
        )
    return Source(id="cli-1", url=url, type=type_tag)


def print_results(results: List[BatchItemResult]) -> None:
    print(f"\n{'='*70}")
    print("  Results")
    print(f"{'='*70}\n")

    for i, result in enumerate(results, 1):
        print(f"[{i}] {result.source.label} ({result.source.type})")
        if result.ok:
            print(f"    Name:  {result.data['name']}")
            print(f"    Price: $ {result.data['price']}")
            if result.data.get("image"):
                print(f"    Image: {result.data['image'][:80]}")
        else:
            print(f"    {result.status.upper()}: {result.error}")
        print()

    success_count = sum(1 for r in results if r.ok)
    print(f"{'='*70}")
    print(f"  Summary: {success_count} ok, {len(results) - success_count} failed")
    print(f"{'='*70}\n")


async def run_batch(sources: List[Source], registry: ScraperRegistry, post: bool) -> int:
    """Run the batch and return the process exit code."""
    if post:
        sink = HttpRecordSink.from_settings()
        if sink is None:
            print("Error: --post requires INGEST_URL to be set")
            return 2
    else:
        sink = MemoryRecordSink()

    runner = BatchRunner(registry, record_sink=sink)
    try:
        results = await runner.run(sources)
    finally:
        if isinstance(sink, HttpRecordSink):
            await sink.aclose()

    print_results(results)
    return 0 if all(r.ok for r in results) else 1


def main() -> int:
    """Parse arguments and run the batch."""
    parser = argparse.ArgumentParser(
        description="Scrape product pages and print the extracted data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_scraper.py --url https://www.sporting.com.ar/zapatillas-x/p
  python scripts/run_scraper.py --url https://tiendariver.com/camiseta/p --type tiendariver
  python scripts/run_scraper.py --sources sources.json --post
        """,
    )

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--sources", help="JSON file with a list of sources")
    target.add_argument("--url", help="Single product URL")

    parser.add_argument(
        "--type",
        default="",
        help="Site type for --url (detected from the domain when omitted)",
    )
    parser.add_argument(
        "--post",
        action="store_true",
        help="Post scraped records to INGEST_URL",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        help=f"Log level (default: {settings.LOG_LEVEL})",
    )

    args = parser.parse_args()
    configure_logging(args.log_level)

    registry = create_default_registry()
    try:
        if args.sources:
            sources = load_sources(args.sources)
        else:
            sources = [source_from_url(args.url, args.type, registry)]
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error: {e}")
        return 2

    return asyncio.run(run_batch(sources, registry, args.post))


if __name__ == "__main__":
    sys.exit(main())
