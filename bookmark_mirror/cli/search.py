"""Query the local bookmark index.

Usage:
    bookmark-mirror-search QUERY [--db PATH] [--limit N] [--json]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from bookmark_mirror.cli._bootstrap import build_search_stack, configure_logging
from bookmark_mirror.config import load_config
from bookmark_mirror.services.commands import BookmarkCommands

SNIPPET_LENGTH = 160


def _snippet(content: str) -> str:
    if len(content) <= SNIPPET_LENGTH:
        return content
    return content[:SNIPPET_LENGTH].rsplit(" ", 1)[0] + "..."


async def run_search(
    query: str,
    *,
    db_path: str | None = None,
    limit: int | None = None,
    as_json: bool = False,
    verbose: bool = False,
) -> int:
    overrides = {"DB_PATH": db_path} if db_path else {}
    try:
        cfg = load_config(**overrides)
    except RuntimeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    configure_logging(cfg, verbose=verbose)

    stack = build_search_stack(cfg)
    try:
        commands = BookmarkCommands(stack.service)
        response = await commands.search(query, limit)
    finally:
        stack.close()

    if as_json:
        print(json.dumps(response.model_dump(), ensure_ascii=False, indent=2))
        return 0

    if not response.results:
        print(f"No results for {query!r} ({response.elapsed_ms:.1f} ms)")
        return 0

    print(f"{len(response.results)} result(s) for {query!r} ({response.elapsed_ms:.1f} ms)\n")
    for position, entry in enumerate(response.results, start=1):
        score = f" [{entry.score:.3f}]" if entry.score is not None else ""
        print(f"{position:2d}. {entry.title or '(no title)'}{score}")
        print(f"    {entry.url}")
        if entry.content:
            print(f"    {_snippet(entry.content)}")
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Search mirrored bookmarks")
    parser.add_argument("query", help="Search terms (OR-combined)")
    parser.add_argument("--db", default=None, help="SQLite database path (defaults to DB_PATH)")
    parser.add_argument("--limit", type=int, default=None, help="Maximum number of results")
    parser.add_argument("--json", action="store_true", help="Print the response as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    sys.exit(
        asyncio.run(
            run_search(
                args.query,
                db_path=args.db,
                limit=args.limit,
                as_json=args.json,
                verbose=args.verbose,
            )
        )
    )


if __name__ == "__main__":
    main()
