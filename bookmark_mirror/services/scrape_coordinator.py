"""One synchronization pass of the corpus against the live bookmark tree."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TYPE_CHECKING

from bookmark_mirror.config import ScanConfig
from bookmark_mirror.core.async_utils import raise_if_cancelled
from bookmark_mirror.core.logging_utils import generate_correlation_id
from bookmark_mirror.models.bookmarks import (
    AddedBookmarks,
    BookmarkCorpus,
    RemovedBookmarks,
    ScanManifest,
)
from bookmark_mirror.services.corpus_differ import collect_bookmark_urls, diff_urls
from bookmark_mirror.utils.progress_tracker import CompletionCounter, WeightedProgress

if TYPE_CHECKING:
    from bookmark_mirror.adapters.bookmarks.tree_source import BookmarkTreeSource
    from bookmark_mirror.models.bookmarks import BookmarkEntry
    from bookmark_mirror.services.content_acquirer import ContentAcquirer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], Awaitable[None]]
CheckpointCallback = Callable[[BookmarkCorpus], Awaitable[None]]


class ScanState(StrEnum):
    IDLE = "idle"
    COLLECTING = "collecting"
    REMOVING = "removing"
    ACQUIRING = "acquiring"
    DONE = "done"


class _ProgressEmitter:
    """Deliver overall progress without ever going backwards.

    Delivery is serialized and failures on the receiving side are logged,
    never raised.
    """

    def __init__(
        self,
        tracker: WeightedProgress,
        callback: ProgressCallback | None,
        correlation_id: str,
    ) -> None:
        self._tracker = tracker
        self._callback = callback
        self._cid = correlation_id
        self._lock = asyncio.Lock()
        self._last = 0.0
        self.history: list[float] = []

    async def emit(self, *, remove: float, add: float) -> None:
        async with self._lock:
            progress = self._tracker.update([remove, add])
            if progress < self._last:
                return
            self._last = progress
            self.history.append(progress)
            if self._callback is None:
                return
            try:
                await self._callback(progress)
            except Exception as exc:
                raise_if_cancelled(exc)
                logger.warning(
                    "scan_progress_delivery_failed",
                    extra={"cid": self._cid, "progress": progress, "error": str(exc)},
                )


class ScrapeCoordinator:
    """Orchestrate a scan: diff, remove stale entries, acquire new pages.

    One instance may be reused for consecutive scans, but never for two
    concurrent ones.
    """

    def __init__(
        self,
        tree_source: BookmarkTreeSource,
        acquirer: ContentAcquirer,
        config: ScanConfig | None = None,
    ) -> None:
        self._tree_source = tree_source
        self._acquirer = acquirer
        self._config = config or ScanConfig()
        self._state = ScanState.IDLE
        self.last_progress_history: list[float] = []

    @property
    def state(self) -> ScanState:
        return self._state

    async def scan(
        self,
        corpus: BookmarkCorpus,
        *,
        force_refresh: bool = False,
        on_progress: ProgressCallback | None = None,
        on_checkpoint: CheckpointCallback | None = None,
    ) -> ScanManifest:
        """Reconcile *corpus* with the live tree and return the scan manifest.

        The input mapping is never mutated. Tree enumeration failures
        propagate; per-URL acquisition failures do not.
        """
        cid = generate_correlation_id()
        start = time.perf_counter()

        self._state = ScanState.COLLECTING
        try:
            roots = await self._tree_source.get_tree()
        except Exception:
            self._state = ScanState.IDLE
            logger.exception("scan_enumeration_failed", extra={"cid": cid})
            raise

        live_urls = collect_bookmark_urls(roots)
        working: BookmarkCorpus = dict(corpus)
        diff = diff_urls(() if force_refresh else working.keys(), live_urls)

        # Keep tree order for acquisition; removal order is irrelevant but made stable
        to_add = [url for url in dict.fromkeys(live_urls) if url in diff.added]
        to_remove = sorted(diff.removed)

        logger.info(
            "scan_started",
            extra={
                "cid": cid,
                "live_urls": len(live_urls),
                "known_urls": len(corpus),
                "to_add": len(to_add),
                "to_remove": len(to_remove),
                "force_refresh": force_refresh,
            },
        )

        tracker = WeightedProgress(
            2, weights=[self._config.remove_weight, self._config.acquire_weight]
        )
        emitter = _ProgressEmitter(tracker, on_progress, cid)
        await emitter.emit(remove=0.0, add=0.0)

        self._state = ScanState.REMOVING
        for index, url in enumerate(to_remove):
            working.pop(url, None)
            await emitter.emit(remove=(index + 1) / len(to_remove), add=0.0)
        await emitter.emit(remove=1.0, add=0.0)

        self._state = ScanState.ACQUIRING
        added_entries = await self._acquire_all(
            to_add, working, emitter, on_checkpoint, correlation_id=cid
        )
        await emitter.emit(remove=1.0, add=1.0)

        self._state = ScanState.DONE
        self.last_progress_history = emitter.history

        logger.info(
            "scan_completed",
            extra={
                "cid": cid,
                "added": len(added_entries),
                "skipped": len(to_add) - len(added_entries),
                "removed": len(to_remove),
                "corpus_size": len(working),
                "duration_sec": round(time.perf_counter() - start, 3),
            },
        )

        return ScanManifest(
            updated_corpus=working,
            added=AddedBookmarks(urls=set(diff.added), entries=added_entries),
            removed=RemovedBookmarks(urls=set(diff.removed)),
        )

    async def _acquire_all(
        self,
        urls: list[str],
        working: BookmarkCorpus,
        emitter: _ProgressEmitter,
        on_checkpoint: CheckpointCallback | None,
        *,
        correlation_id: str,
    ) -> BookmarkCorpus:
        added_entries: BookmarkCorpus = {}
        if not urls:
            return added_entries

        semaphore = asyncio.Semaphore(self._config.max_concurrency)
        counter = CompletionCounter(len(urls))
        interval = self._config.checkpoint_interval

        async def process(url: str) -> None:
            entry: BookmarkEntry | None = None
            async with semaphore:
                try:
                    entry = await self._acquirer.acquire(url, correlation_id=correlation_id)
                except Exception as exc:
                    raise_if_cancelled(exc)
                    logger.exception(
                        "scan_acquire_crashed", extra={"cid": correlation_id, "url": url}
                    )

            if entry is not None:
                # Distinct URLs own distinct slots, so these writes never collide
                working[entry.url] = entry
                added_entries[entry.url] = entry

            completed = await counter.increment()
            await emitter.emit(remove=1.0, add=counter.fraction(completed))

            if on_checkpoint is not None and completed % interval == 0:
                await self._checkpoint(on_checkpoint, working, completed, correlation_id)

        await asyncio.gather(*(process(url) for url in urls))
        return added_entries

    @staticmethod
    async def _checkpoint(
        on_checkpoint: CheckpointCallback,
        working: BookmarkCorpus,
        completed: int,
        correlation_id: str,
    ) -> None:
        try:
            await on_checkpoint(dict(working))
            logger.debug(
                "scan_checkpoint_saved",
                extra={"cid": correlation_id, "completed": completed, "entries": len(working)},
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.warning(
                "scan_checkpoint_failed",
                extra={"cid": correlation_id, "completed": completed, "error": str(exc)},
            )
