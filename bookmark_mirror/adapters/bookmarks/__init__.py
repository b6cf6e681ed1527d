"""Bookmark tree sources."""

from bookmark_mirror.adapters.bookmarks.tree_source import (
    BookmarkTreeSource,
    ChromiumBookmarksFile,
    StaticBookmarkTree,
)

__all__ = ["BookmarkTreeSource", "ChromiumBookmarksFile", "StaticBookmarkTree"]
