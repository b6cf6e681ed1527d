"""Wiring shared by the command line entry points."""

from __future__ import annotations

from dataclasses import dataclass

from bookmark_mirror.adapters.storage import CorpusStore, SqliteKeyValueStore
from bookmark_mirror.config import AppConfig
from bookmark_mirror.core.logging_utils import setup_json_logging
from bookmark_mirror.db.session import DatabaseSessionManager
from bookmark_mirror.services.search_index import SearchIndex
from bookmark_mirror.services.search_service import BookmarkSearchService


@dataclass
class SearchStack:
    session: DatabaseSessionManager
    corpus_store: CorpusStore
    index: SearchIndex
    service: BookmarkSearchService

    def close(self) -> None:
        self.session.close()


def configure_logging(cfg: AppConfig, *, verbose: bool = False) -> None:
    setup_json_logging(
        "DEBUG" if verbose else cfg.runtime.log_level,
        log_file=cfg.runtime.log_file,
        use_loguru=cfg.runtime.log_json,
    )


def build_search_stack(cfg: AppConfig) -> SearchStack:
    session = DatabaseSessionManager(cfg.runtime.db_path)
    session.migrate()
    corpus_store = CorpusStore(SqliteKeyValueStore(session))
    index = SearchIndex(session, cfg.search)
    service = BookmarkSearchService(index, corpus_store)
    return SearchStack(session=session, corpus_store=corpus_store, index=index, service=service)
