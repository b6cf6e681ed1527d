"""Erase the stored corpus and rebuild an empty search index.

Usage:
    bookmark-mirror-reset [--db PATH] [--yes]
"""

from __future__ import annotations

import argparse
import sys

from bookmark_mirror.cli._bootstrap import build_search_stack, configure_logging
from bookmark_mirror.config import load_config


def run_reset(*, db_path: str | None = None, assume_yes: bool = False) -> int:
    overrides = {"DB_PATH": db_path} if db_path else {}
    try:
        cfg = load_config(**overrides)
    except RuntimeError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    configure_logging(cfg)

    if not assume_yes:
        answer = input(f"Erase all mirrored bookmarks in {cfg.runtime.db_path}? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted.")
            return 1

    stack = build_search_stack(cfg)
    try:
        before = len(stack.service.fetch_corpus())
        stack.service.reset_corpus()
    finally:
        stack.close()

    print(f"Removed {before} entries; search index rebuilt.")
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Reset the bookmark mirror database")
    parser.add_argument("--db", default=None, help="SQLite database path (defaults to DB_PATH)")
    parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    args = parser.parse_args(argv)
    sys.exit(run_reset(db_path=args.db, assume_yes=args.yes))


if __name__ == "__main__":
    main()
