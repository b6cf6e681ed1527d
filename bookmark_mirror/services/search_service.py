"""Search service: owns index readiness and keeps index and storage in sync."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING

from bookmark_mirror.core.async_utils import attempt_send

if TYPE_CHECKING:
    from bookmark_mirror.adapters.storage.corpus_store import CorpusStore
    from bookmark_mirror.models.bookmarks import BookmarkCorpus, ScanManifest, ScoredEntry
    from bookmark_mirror.services.search_index import SearchIndex

logger = logging.getLogger(__name__)

ReadyListener = Callable[[bool], None]


class IndexState(StrEnum):
    NOT_READY = "not_ready"
    IN_PROGRESS = "in_progress"
    READY = "ready"


class BookmarkSearchService:
    """Seed the index from the stored corpus and answer queries against it.

    Exactly one ready listener is held at a time; subscribing replaces the
    previous one. Every state transition notifies it with ``is_ready``.
    """

    def __init__(self, index: SearchIndex, corpus_store: CorpusStore) -> None:
        self._index = index
        self._corpus_store = corpus_store
        self._state = IndexState.NOT_READY
        self._ready_listener: ReadyListener | None = None

    @property
    def state(self) -> IndexState:
        return self._state

    def is_ready(self) -> bool:
        return self._state is IndexState.READY

    def subscribe_on_ready(self, listener: ReadyListener) -> None:
        if self._ready_listener is not None and self._ready_listener is not listener:
            logger.debug("ready_listener_replaced")
        self._ready_listener = listener

    def unsubscribe_on_ready(self, listener: ReadyListener | None = None) -> None:
        """Drop the ready listener, or only ``listener`` when it is still the active one."""
        if listener is None or self._ready_listener is listener:
            self._ready_listener = None

    @property
    def has_ready_listener(self) -> bool:
        return self._ready_listener is not None

    def initialize(self) -> None:
        """Bulk-index the stored corpus. No-op unless the index is not ready."""
        if self._state is not IndexState.NOT_READY:
            return

        self._set_state(IndexState.IN_PROGRESS)
        start = time.perf_counter()
        try:
            self._index.ensure_index()
            corpus = self._corpus_store.fetch_corpus()
            indexed = self._index.add_or_update(corpus)
        except Exception:
            logger.exception("search_index_initialize_failed")
            self._set_state(IndexState.NOT_READY)
            raise

        self._set_state(IndexState.READY)
        logger.info(
            "search_index_ready",
            extra={
                "entries": indexed,
                "latency_ms": int((time.perf_counter() - start) * 1000),
            },
        )

    def reinitialize(self) -> None:
        """Recreate the index from scratch and replay the stored corpus."""
        self._set_state(IndexState.NOT_READY)
        self._index.recreate()
        self.initialize()

    def fetch_corpus(self) -> BookmarkCorpus:
        return self._corpus_store.fetch_corpus()

    def persist_corpus(self, corpus: BookmarkCorpus) -> None:
        self._corpus_store.persist_corpus(corpus)

    def reset_corpus(self) -> None:
        """Erase the stored corpus and rebuild an empty index."""
        self._corpus_store.reset_corpus()
        self.reinitialize()

    def sync_scan_content(self, manifest: ScanManifest) -> None:
        """Apply a scan result: persist the corpus, then patch the index."""
        self._corpus_store.persist_corpus(manifest.updated_corpus)
        removed = self._index.remove(manifest.removed.urls)
        added = self._index.add_or_update(manifest.added.entries)
        logger.info(
            "scan_content_synced",
            extra={
                "corpus_size": len(manifest.updated_corpus),
                "index_removed": removed,
                "index_added": added,
            },
        )

    def search(self, query: str, limit: int | None = None) -> list[ScoredEntry]:
        if not query or not query.strip():
            return []
        return self._index.search(query, limit)

    def _set_state(self, state: IndexState) -> None:
        self._state = state
        listener = self._ready_listener
        if listener is not None:
            attempt_send(listener, state is IndexState.READY)
