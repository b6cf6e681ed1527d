"""Synchronize the local corpus with a browser bookmarks file.

Usage:
    bookmark-mirror-scan [--bookmarks FILE] [--db PATH] [--force] [--verbose]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from bookmark_mirror.adapters.bookmarks import ChromiumBookmarksFile
from bookmark_mirror.adapters.renderer import HttpPageRenderer
from bookmark_mirror.cli._bootstrap import build_search_stack, configure_logging
from bookmark_mirror.config import load_config
from bookmark_mirror.services.commands import BookmarkCommands
from bookmark_mirror.services.content_acquirer import ContentAcquirer
from bookmark_mirror.services.scrape_coordinator import ScrapeCoordinator

logger = logging.getLogger(__name__)


async def run_scan(
    *,
    bookmarks_file: str | None = None,
    db_path: str | None = None,
    force_refresh: bool = False,
    verbose: bool = False,
) -> int:
    """Run one scan and print progress.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    overrides = {}
    if bookmarks_file:
        overrides["BOOKMARKS_FILE"] = bookmarks_file
    if db_path:
        overrides["DB_PATH"] = db_path

    try:
        cfg = load_config(**overrides)
    except RuntimeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    configure_logging(cfg, verbose=verbose)

    if not cfg.bookmarks.bookmarks_file:
        logger.error("bookmarks_file_not_configured")
        print("ERROR: no bookmarks file. Pass --bookmarks or set BOOKMARKS_FILE.", file=sys.stderr)
        return 1

    stack = build_search_stack(cfg)
    try:
        async with HttpPageRenderer(cfg.renderer) as renderer:
            coordinator = ScrapeCoordinator(
                ChromiumBookmarksFile(cfg.bookmarks.bookmarks_file),
                ContentAcquirer(renderer, cfg.renderer),
                cfg.scan,
            )
            commands = BookmarkCommands(stack.service, coordinator)

            final_error: str | None = None
            async for status in commands.start_scan(force_refresh=force_refresh):
                print(f"\rProgress: {status.progress * 100:6.2f}%", end="", flush=True)
                if status.done:
                    final_error = status.error
            print()

        if final_error:
            print(f"Scan failed: {final_error}", file=sys.stderr)
            return 1

        corpus = stack.service.fetch_corpus()
        print("\n=== Scan Summary ===")
        print(f"Entries in corpus: {len(corpus)}")
        print(f"Stored corpus size: {stack.corpus_store.raw_corpus_size()} bytes")
        return 0
    finally:
        stack.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Mirror bookmarked pages into a local search index")
    parser.add_argument(
        "--bookmarks",
        default=None,
        help="Path to a Chromium 'Bookmarks' JSON file (defaults to BOOKMARKS_FILE)",
    )
    parser.add_argument("--db", default=None, help="SQLite database path (defaults to DB_PATH)")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Re-acquire every bookmark, not only newly added ones",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    sys.exit(
        asyncio.run(
            run_scan(
                bookmarks_file=args.bookmarks,
                db_path=args.db,
                force_refresh=args.force,
                verbose=args.verbose,
            )
        )
    )


if __name__ == "__main__":
    main()
