"""CLI entry point: python -m cinelink_search <query>"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from cinelink_search.config import get_settings
from cinelink_search.contracts import ContentFilter
from cinelink_search.display import ResultDisplay
from cinelink_search.service import SearchService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cinelink-search",
        description="Search movies and series with a local fuzzy cache and API quota",
    )
    parser.add_argument(
        "query",
        type=str,
        nargs="?",
        default=None,
        help="Title or phrase to search for",
    )
    parser.add_argument(
        "--filter",
        type=str,
        choices=[f.value for f in ContentFilter],
        default=ContentFilter.ALL.value,
        help="Restrict results to movies or series (default: all)",
    )
    parser.add_argument(
        "--page",
        type=int,
        default=1,
        help="Result page to fetch (default: 1)",
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Keep loading more results until this many pages are shown",
    )
    parser.add_argument(
        "--suggest",
        type=str,
        default=None,
        metavar="TEXT",
        help="Print suggestions for partial input and exit",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        default=False,
        help="Print search history and exit",
    )
    parser.add_argument(
        "--clear-history",
        action="store_true",
        default=False,
        help="Delete search history and exit",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        default=False,
        help="Delete the local result cache and exit",
    )
    parser.add_argument(
        "--quota",
        action="store_true",
        default=False,
        help="Print remote API quota usage and exit",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    standalone = (
        args.suggest is not None
        or args.history
        or args.clear_history
        or args.clear_cache
        or args.quota
    )
    if not args.query and not standalone:
        parser.error(
            "a query is required (or use --suggest TEXT / --history / --clear-history "
            "/ --clear-cache / --quota)"
        )
    if args.page < 1:
        parser.error("--page must be >= 1")
    if args.pages < 1:
        parser.error("--pages must be >= 1")

    return args


async def _standalone(service: SearchService, args: argparse.Namespace, display) -> None:
    if args.clear_history:
        await service.clear_history()
        print("Search history cleared.", file=sys.stderr)
    if args.clear_cache:
        await service.clear_cache()
        print("Result cache cleared.", file=sys.stderr)
    if args.history:
        display.show_lines(service.history.entries, empty="No search history.")
    if args.quota:
        print(service.quota.summary())
    if args.suggest is not None:
        service.suggest(args.suggest)
        await service.suggester.wait()
        display.show_lines(service.suggester.suggestions, empty="No suggestions.")


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.query:
        errors = settings.validate()
        if errors:
            for e in errors:
                print(f"ERROR: {e}", file=sys.stderr)
            print(
                f"Configured backends: {', '.join(settings.available_backends())}",
                file=sys.stderr,
            )
            return 1

    display = ResultDisplay()
    async with SearchService(settings) as service:
        if not args.query:
            await _standalone(service, args, display)
            return 0

        session = await service.search(args.query, args.filter, args.page)
        display.show_session(session)
        shown = 1
        while shown < args.pages and session.has_more_pages:
            session = await service.load_more()
            display.show_session(session)
            shown += 1

        return 1 if session.condition and session.condition.is_failure else 0


def main() -> None:
    args = parse_args()
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
