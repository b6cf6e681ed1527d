"""Load and persist the bookmark corpus as a single JSON blob."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from bookmark_mirror.models.bookmarks import BookmarkCorpus, corpus_adapter

if TYPE_CHECKING:
    from bookmark_mirror.adapters.storage.protocols import KeyValueStore

logger = logging.getLogger(__name__)

CORPUS_KEY = "bookmark_corpus"


class CorpusStore:
    """Corpus persistence on top of a :class:`KeyValueStore`.

    Missing data is an empty corpus; corrupt data is also treated as empty.
    """

    def __init__(self, store: KeyValueStore, *, key: str = CORPUS_KEY) -> None:
        self._store = store
        self._key = key

    def fetch_corpus(self) -> BookmarkCorpus:
        raw = self._store.get(self._key)
        if raw is None:
            # Ensure the storage key is never left empty
            self._store.set(self._key, self._encode({}))
            return {}

        try:
            corpus = corpus_adapter.validate_json(raw)
        except (ValidationError, ValueError) as exc:
            logger.warning(
                "corpus_blob_unreadable",
                extra={"key": self._key, "bytes": len(raw), "error": str(exc)[:200]},
            )
            return {}

        return corpus

    def persist_corpus(self, corpus: BookmarkCorpus) -> None:
        self._store.set(self._key, self._encode(corpus))
        logger.debug("corpus_persisted", extra={"entries": len(corpus)})

    def reset_corpus(self) -> None:
        self._store.set(self._key, self._encode({}))
        logger.info("corpus_reset", extra={"key": self._key})

    def raw_corpus_size(self) -> int:
        """Size in bytes of the stored corpus blob, for diagnostics only."""
        raw = self._store.raw_dump().get(self._key)
        return len(raw.encode("utf-8")) if raw else 0

    @staticmethod
    def _encode(corpus: BookmarkCorpus) -> str:
        return corpus_adapter.dump_json(corpus).decode("utf-8")
