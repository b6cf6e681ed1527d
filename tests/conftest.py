"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from bookmark_mirror.adapters.storage import CorpusStore, SqliteKeyValueStore
from bookmark_mirror.config import SearchConfig
from bookmark_mirror.db.session import DatabaseSessionManager
from bookmark_mirror.models.bookmarks import BookmarkEntry
from bookmark_mirror.services.search_index import SearchIndex
from bookmark_mirror.services.search_service import BookmarkSearchService


def make_entry(url: str, title: str = "", content: str = "") -> BookmarkEntry:
    return BookmarkEntry(url=url, title=title, content=content)


@pytest.fixture
def db_session(tmp_path) -> Iterator[DatabaseSessionManager]:
    session = DatabaseSessionManager(str(tmp_path / "bookmarks.db"))
    session.migrate()
    yield session
    session.close()


@pytest.fixture
def corpus_store(db_session: DatabaseSessionManager) -> CorpusStore:
    return CorpusStore(SqliteKeyValueStore(db_session))


@pytest.fixture
def search_index(db_session: DatabaseSessionManager) -> SearchIndex:
    return SearchIndex(db_session, SearchConfig())


@pytest.fixture
def search_service(search_index: SearchIndex, corpus_store: CorpusStore) -> BookmarkSearchService:
    return BookmarkSearchService(search_index, corpus_store)
