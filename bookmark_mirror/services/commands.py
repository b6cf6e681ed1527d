"""The three operations a transport (CLI, extension bridge, ...) can invoke.

``start_scan`` and ``query_ready`` are async generators of status messages;
``search`` returns a single response.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from bookmark_mirror.core.async_utils import attempt_send, raise_if_cancelled
from bookmark_mirror.core.logging_utils import truncate_log_content
from bookmark_mirror.models.messages import ReadyStatus, ScanStatus, SearchResponse

if TYPE_CHECKING:
    from bookmark_mirror.models.bookmarks import BookmarkCorpus
    from bookmark_mirror.services.scrape_coordinator import ScrapeCoordinator
    from bookmark_mirror.services.search_service import BookmarkSearchService

logger = logging.getLogger(__name__)

SCAN_ALREADY_RUNNING = "A scan is already running"
SCAN_UNAVAILABLE = "Scanning is not configured"


class BookmarkCommands:
    def __init__(
        self,
        search_service: BookmarkSearchService,
        coordinator: ScrapeCoordinator | None = None,
    ) -> None:
        self._search = search_service
        self._coordinator = coordinator
        self._scan_lock = asyncio.Lock()

    @property
    def scan_in_progress(self) -> bool:
        return self._scan_lock.locked()

    async def start_scan(self, force_refresh: bool = False) -> AsyncIterator[ScanStatus]:
        """Run one scan, yielding ``(0, False)``, each progress update, then a final status.

        The final status is always ``progress=1.0, done=True``; failures are
        reported through its ``error`` field. Persisted state is only touched
        by checkpoints and by the final sync of a successful scan.
        """
        coordinator = self._coordinator
        if coordinator is None:
            yield ScanStatus(progress=1.0, done=True, error=SCAN_UNAVAILABLE)
            return
        if self._scan_lock.locked():
            yield ScanStatus(progress=1.0, done=True, error=SCAN_ALREADY_RUNNING)
            return

        async with self._scan_lock:
            queue: asyncio.Queue[ScanStatus] = asyncio.Queue()
            write_lock = asyncio.Lock()

            async def on_progress(progress: float) -> None:
                attempt_send(queue.put_nowait, ScanStatus(progress=progress, done=False))

            async def on_checkpoint(corpus: BookmarkCorpus) -> None:
                # Snapshots are written one at a time, oldest first
                async with write_lock:
                    await asyncio.to_thread(self._search.persist_corpus, corpus)

            async def run() -> None:
                error: str | None = None
                try:
                    self._search.initialize()
                    corpus = self._search.fetch_corpus()
                    manifest = await coordinator.scan(
                        corpus,
                        force_refresh=force_refresh,
                        on_progress=on_progress,
                        on_checkpoint=on_checkpoint,
                    )
                    await asyncio.to_thread(self._search.sync_scan_content, manifest)
                except Exception as exc:
                    raise_if_cancelled(exc)
                    logger.exception("scan_failed", extra={"force_refresh": force_refresh})
                    error = str(exc) or type(exc).__name__
                attempt_send(queue.put_nowait, ScanStatus(progress=1.0, done=True, error=error))

            yield ScanStatus(progress=0.0, done=False)
            task = asyncio.create_task(run())
            try:
                while True:
                    status = await queue.get()
                    yield status
                    if status.done:
                        break
            finally:
                # A scan runs to completion even when nobody is listening anymore
                await task

    async def search(self, query: str, limit: int | None = None) -> SearchResponse:
        if not query or not query.strip():
            return SearchResponse(results=[], elapsed_ms=0.0)

        if not self._search.is_ready():
            self._search.initialize()

        start = time.perf_counter()
        results = self._search.search(query, limit)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 3)
        logger.info(
            "search_completed",
            extra={
                "query": truncate_log_content(query, 100),
                "results": len(results),
                "elapsed_ms": elapsed_ms,
            },
        )
        return SearchResponse(results=results, elapsed_ms=elapsed_ms)

    async def query_ready(self) -> AsyncIterator[ReadyStatus]:
        """Stream readiness, initializing the index first if it is not ready.

        The stream stays open until the consumer stops iterating; the listener
        slot is released then, unless another subscriber has taken it over.
        """
        queue: asyncio.Queue[ReadyStatus] = asyncio.Queue()

        def listener(is_ready: bool) -> None:
            attempt_send(queue.put_nowait, ReadyStatus(is_ready=is_ready))

        if not self._search.is_ready():
            self._search.initialize()

        self._search.subscribe_on_ready(listener)
        try:
            listener(self._search.is_ready())
            while True:
                yield await queue.get()
        finally:
            self._search.unsubscribe_on_ready(listener)
