"""Annotate a grounded answer from a JSON payload and print the result.

Usage:
    python scripts/annotate.py payload.json
    cat payload.json | python scripts/annotate.py - --no-cache --json
    python scripts/annotate.py payload.json --page https://www.nhs.uk/aspirin/=saved/nhs.html

The payload is the same body accepted by ``POST /v1/citations``:
``{"text": ..., "groundingMetadata": {...}}`` or
``{"text": ..., "sources": [...], "segments": [...]}``.

Each ``--page URL=FILE`` supplies saved HTML for a source URL; its title,
description and image are attached to that source.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add src to path (matching the server layout)
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pydantic import ValidationError

from citation_engine.config.settings import Settings
from citation_engine.metadata.page_metadata import HtmlFileFetcher
from citation_engine.models.schemas import CitationRequest, SourceOut
from citation_engine.observability.logger import setup_logging
from citation_engine.pipeline.factory import build_cache, build_pipeline


def load_payload(path: str) -> CitationRequest:
    raw = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    return CitationRequest.model_validate(json.loads(raw))


def parse_pages(values: list[str]) -> dict[str, str]:
    pages = {}
    for value in values:
        url, sep, path = value.rpartition("=")
        if not sep or not url or not path:
            raise ValueError(f"expected URL=FILE, got {value!r}")
        pages[url] = path
    return pages


async def run(args: argparse.Namespace) -> int:
    settings = Settings(durable_cache_enabled=False) if args.no_cache else Settings()
    setup_logging(level="WARNING" if not args.verbose else "DEBUG", json_logs=settings.log_json)

    try:
        request = load_payload(args.payload)
        pages = parse_pages(args.page)
    except (OSError, ValueError, ValidationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    cache = await build_cache(settings)
    fetcher = HtmlFileFetcher(pages) if pages else None
    pipeline = build_pipeline(settings, cache, metadata_fetcher=fetcher)
    offset_unit = args.offset_unit or request.offset_unit or settings.default_offset_unit
    result = await pipeline.run(
        text=request.text,
        sources=request.raw_sources(),
        segments=request.grounding_segments(offset_unit),
    )
    await cache.flush()

    if args.json:
        body = {
            "annotated_text": result.annotated_text,
            "cited_count": result.cited_count,
            "sources": [
                SourceOut.from_resolved(n, s).model_dump() for n, s in enumerate(result.sources, start=1)
            ],
        }
        print(json.dumps(body, indent=2, ensure_ascii=False))
        return 0

    print(result.annotated_text)
    print()
    for n, source in enumerate(result.sources, start=1):
        print(f"[{n}] {source.display_name} - {source.canonical_url}")
        if source.metadata is not None and source.metadata.title:
            print(f"    {source.metadata.title}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Place inline citations in a grounded answer")
    parser.add_argument("payload", help="Path to a JSON payload, or - for stdin")
    parser.add_argument("--offset-unit", choices=["char", "byte"], default=None)
    parser.add_argument("--no-cache", action="store_true", help="Skip the durable SQLite cache tier")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument(
        "--page", action="append", default=[], metavar="URL=FILE", help="Saved HTML for a source URL (repeatable)"
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
