"""Merge per-field hit lists into one bucket-ordered result list."""

from __future__ import annotations

from collections.abc import Sequence


def merge_field_hits(
    title_hits: Sequence[str],
    content_hits: Sequence[str],
    limit: int,
) -> list[str]:
    """Order URLs as matched-in-both, then title-only, then content-only.

    Each input is in engine relevance order and that order is preserved inside
    every bucket. Duplicates are dropped and the output is capped at ``limit``.
    """
    if limit <= 0:
        return []

    title_set = set(title_hits)
    content_set = set(content_hits)

    both: list[str] = []
    seen: set[str] = set()
    for url in (*title_hits, *content_hits):
        if url in title_set and url in content_set and url not in seen:
            both.append(url)
            seen.add(url)

    merged = list(both)
    for bucket in (title_hits, content_hits):
        for url in bucket:
            if url not in seen:
                merged.append(url)
                seen.add(url)

    return merged[:limit]
