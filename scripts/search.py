#!/usr/bin/env python3
"""
Manual search runner against the live DuckDuckGo endpoints.

Usage:
    uv run python scripts/search.py text "python asyncio" --max-results 30
    uv run python scripts/search.py text "python asyncio" --backend lite
    uv run python scripts/search.py images "cat" --max-results 10
    uv run python scripts/search.py translate "hola" "bonjour" --to en
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from config.settings import get_settings
from src.search import AsyncDDGS, SearchError

logger.configure(extra={"module": "Script"})

RESULT_TYPES = ["text", "images", "videos", "news", "answers", "suggestions", "translate"]


async def main(args: argparse.Namespace) -> int:
    """Run one search and print the results as JSON."""
    settings = get_settings().search
    ddgs = AsyncDDGS(
        headers={
            "User-Agent": settings.user_agent,
            "Accept-Language": settings.accept_language,
        },
        proxies=settings.proxies,
        timeout=settings.timeout,
        max_workers=settings.max_workers,
    )

    try:
        await ddgs.start()
        keywords = " ".join(args.keywords)

        if args.type == "text":
            results = await ddgs.text(
                keywords,
                region=args.region,
                safesearch=args.safesearch,
                timelimit=args.timelimit,
                backend=args.backend,
                max_results=args.max_results,
            )
        elif args.type == "answers":
            results = await ddgs.answers(keywords)
        elif args.type == "suggestions":
            results = await ddgs.suggestions(keywords, region=args.region)
        elif args.type == "translate":
            results = await ddgs.translate(args.keywords, to=args.to)
        else:
            search = getattr(ddgs, args.type)
            results = await search(
                keywords,
                region=args.region,
                safesearch=args.safesearch,
                timelimit=args.timelimit,
                max_results=args.max_results,
            )

        print(json.dumps(results, ensure_ascii=False, indent=2))
        print(f"\n{len(results)} results", file=sys.stderr)
        return 0

    except SearchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    finally:
        await ddgs.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a DuckDuckGo search")
    parser.add_argument("type", choices=RESULT_TYPES, help="Result type")
    parser.add_argument("keywords", nargs="+", help="Search keywords")
    parser.add_argument("--region", default="wt-wt")
    parser.add_argument("--safesearch", default="moderate", choices=["on", "moderate", "off"])
    parser.add_argument("--timelimit", default=None)
    parser.add_argument("--backend", default="api", help="Text backend: api, html, lite")
    parser.add_argument("--max-results", type=int, default=None)
    parser.add_argument("--to", default="en", help="Translation target language")

    sys.exit(asyncio.run(main(parser.parse_args())))
