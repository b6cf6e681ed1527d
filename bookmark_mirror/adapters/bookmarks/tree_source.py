"""Sources for the live bookmark tree."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from bookmark_mirror.models.bookmarks import BookmarkNode
from bookmark_mirror.services.errors import BookmarkTreeError

logger = logging.getLogger(__name__)

CHROMIUM_ROOT_KEYS = ("bookmark_bar", "other", "synced")


class BookmarkTreeSource(Protocol):
    async def get_tree(self) -> list[BookmarkNode]: ...


class StaticBookmarkTree:
    """Serve a fixed, in-memory bookmark tree."""

    def __init__(self, nodes: list[BookmarkNode] | None = None) -> None:
        self._nodes = list(nodes or [])

    async def get_tree(self) -> list[BookmarkNode]:
        return list(self._nodes)

    @classmethod
    def from_urls(cls, urls: list[str], *, folder_title: str = "Bookmarks") -> StaticBookmarkTree:
        folder = BookmarkNode(
            title=folder_title,
            children=[BookmarkNode(title=url, url=url) for url in urls],
        )
        return cls([folder])


class ChromiumBookmarksFile:
    """Read the ``Bookmarks`` JSON file found in a Chromium browser profile."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def get_tree(self) -> list[BookmarkNode]:
        return await asyncio.to_thread(self._read_tree)

    def _read_tree(self) -> list[BookmarkNode]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot read bookmarks file {self.path}: {exc}"
            raise BookmarkTreeError(msg) from exc

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            msg = f"Bookmarks file {self.path} is not valid JSON: {exc}"
            raise BookmarkTreeError(msg) from exc

        roots = document.get("roots") if isinstance(document, dict) else None
        if not isinstance(roots, dict):
            msg = f"Bookmarks file {self.path} has no 'roots' object"
            raise BookmarkTreeError(msg)

        try:
            nodes = [
                _to_node(roots[key]) for key in CHROMIUM_ROOT_KEYS if isinstance(roots.get(key), dict)
            ]
        except ValidationError as exc:
            msg = f"Bookmarks file {self.path} contains malformed nodes: {exc}"
            raise BookmarkTreeError(msg) from exc

        logger.debug("bookmarks_file_loaded", extra={"path": str(self.path), "roots": len(nodes)})
        return nodes


def _to_node(raw: dict[str, Any]) -> BookmarkNode:
    title = str(raw.get("name") or "")
    if raw.get("type") == "folder" or "children" in raw:
        children = [_to_node(child) for child in raw.get("children") or [] if isinstance(child, dict)]
        return BookmarkNode(title=title, children=children)
    return BookmarkNode.model_validate({"title": title, "url": raw.get("url")})
