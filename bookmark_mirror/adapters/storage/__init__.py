"""Persistence adapters for the bookmark corpus."""

from bookmark_mirror.adapters.storage.corpus_store import CORPUS_KEY, CorpusStore
from bookmark_mirror.adapters.storage.sqlite_store import InMemoryKeyValueStore, SqliteKeyValueStore

__all__ = ["CORPUS_KEY", "CorpusStore", "InMemoryKeyValueStore", "SqliteKeyValueStore"]
