"""Diff the known corpus URLs against the live bookmark tree."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bookmark_mirror.models.bookmarks import BookmarkNode


@dataclass(frozen=True)
class CorpusDiff:
    added: frozenset[str] = field(default_factory=frozenset)
    removed: frozenset[str] = field(default_factory=frozenset)


def diff_urls(previous: Iterable[str], current: Iterable[str]) -> CorpusDiff:
    """``added = current - previous``, ``removed = previous - current``."""
    old = frozenset(previous)
    new = frozenset(current)
    return CorpusDiff(added=new - old, removed=old - new)


def collect_bookmark_urls(roots: Iterable[BookmarkNode]) -> list[str]:
    """Collect the URL of every leaf node, depth-first in document order.

    Folders are never collected, even empty ones. Leaves without a URL are skipped.
    Scheme filtering is left to acquisition.
    """
    urls: list[str] = []
    stack: list[BookmarkNode] = list(reversed(list(roots)))
    while stack:
        node = stack.pop()
        if node.children is not None:
            stack.extend(reversed(node.children))
        elif node.url:
            urls.append(node.url)
    return urls
