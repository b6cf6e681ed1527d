from __future__ import annotations

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock

from bookmark_mirror.adapters.bookmarks import StaticBookmarkTree
from bookmark_mirror.config import ScanConfig
from bookmark_mirror.models.bookmarks import BookmarkEntry
from bookmark_mirror.services.errors import BookmarkTreeError
from bookmark_mirror.services.scrape_coordinator import ScanState, ScrapeCoordinator


def _entry(url: str) -> BookmarkEntry:
    return BookmarkEntry(url=url, title=f"title {url}", content=f"content {url}")


class FakeAcquirer:
    """Acquires every URL except those listed in ``fail``; tracks peak concurrency."""

    def __init__(self, fail: set[str] | None = None, delay: float = 0.0) -> None:
        self.fail = fail or set()
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.peak = 0

    async def acquire(self, url: str, *, correlation_id: str | None = None) -> BookmarkEntry | None:
        self.calls.append(url)
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if url in self.fail:
            return None
        return _entry(url)


def _urls(count: int, prefix: str = "https://site.example/") -> list[str]:
    return [f"{prefix}{n}" for n in range(count)]


class TestScrapeCoordinator(unittest.IsolatedAsyncioTestCase):
    async def test_no_changes_returns_input_corpus(self) -> None:
        urls = _urls(3)
        corpus = {url: _entry(url) for url in urls}
        acquirer = FakeAcquirer()
        coordinator = ScrapeCoordinator(StaticBookmarkTree.from_urls(urls), acquirer)
        progress: list[float] = []

        async def on_progress(value: float) -> None:
            progress.append(value)

        manifest = await coordinator.scan(corpus, on_progress=on_progress)

        assert manifest.updated_corpus == corpus
        assert manifest.added.urls == set()
        assert manifest.removed.urls == set()
        assert acquirer.calls == []
        assert progress[0] == 0.0
        assert progress[-1] == 1.0
        assert coordinator.state is ScanState.DONE

    async def test_input_corpus_is_not_mutated(self) -> None:
        corpus = {"https://gone.example": _entry("https://gone.example")}
        coordinator = ScrapeCoordinator(
            StaticBookmarkTree.from_urls(["https://new.example"]), FakeAcquirer()
        )

        manifest = await coordinator.scan(corpus)

        assert list(corpus) == ["https://gone.example"]
        assert list(manifest.updated_corpus) == ["https://new.example"]
        assert manifest.removed.urls == {"https://gone.example"}
        assert manifest.added.urls == {"https://new.example"}
        assert manifest.added.entries == {"https://new.example": _entry("https://new.example")}

    async def test_failed_urls_are_skipped_without_aborting(self) -> None:
        urls = _urls(6)
        acquirer = FakeAcquirer(fail={urls[1], urls[4]})
        coordinator = ScrapeCoordinator(StaticBookmarkTree.from_urls(urls), acquirer)

        manifest = await coordinator.scan({})

        assert sorted(acquirer.calls) == sorted(urls)
        assert manifest.added.urls == set(urls)
        assert set(manifest.added.entries) == set(urls) - {urls[1], urls[4]}
        assert set(manifest.updated_corpus) == set(manifest.added.entries)

    async def test_crashing_acquirer_does_not_abort_batch(self) -> None:
        urls = _urls(3)
        acquirer = MagicMock()
        acquirer.acquire = AsyncMock(side_effect=[_entry(urls[0]), RuntimeError("boom"), None])
        coordinator = ScrapeCoordinator(StaticBookmarkTree.from_urls(urls), acquirer)

        manifest = await coordinator.scan({})

        assert acquirer.acquire.await_count == 3
        assert list(manifest.added.entries) == [urls[0]]

    async def test_progress_is_monotonic_and_weighted(self) -> None:
        existing = _urls(4, "https://old.example/")
        live = _urls(20)
        corpus = {url: _entry(url) for url in existing}
        coordinator = ScrapeCoordinator(
            StaticBookmarkTree.from_urls(live), FakeAcquirer(delay=0.001)
        )
        progress: list[float] = []

        async def on_progress(value: float) -> None:
            progress.append(value)

        await coordinator.scan(corpus, on_progress=on_progress)

        assert progress == sorted(progress)
        assert progress[0] == 0.0
        assert 0.1 in progress
        assert progress[-1] == 1.0
        assert all(0.0 <= value <= 1.0 for value in progress)

    async def test_concurrency_is_bounded(self) -> None:
        acquirer = FakeAcquirer(delay=0.01)
        coordinator = ScrapeCoordinator(
            StaticBookmarkTree.from_urls(_urls(30)), acquirer, ScanConfig(max_concurrency=4)
        )

        await coordinator.scan({})

        assert acquirer.peak == 4

    async def test_checkpoint_every_interval(self) -> None:
        urls = _urls(25)
        checkpoints: list[int] = []

        async def on_checkpoint(snapshot) -> None:
            checkpoints.append(len(snapshot))

        coordinator = ScrapeCoordinator(
            StaticBookmarkTree.from_urls(urls), FakeAcquirer(fail={urls[0]})
        )

        manifest = await coordinator.scan({}, on_checkpoint=on_checkpoint)

        assert len(checkpoints) == 2
        assert checkpoints == sorted(checkpoints)
        assert len(manifest.updated_corpus) == 24

    async def test_failing_callbacks_never_fail_the_scan(self) -> None:
        on_progress = AsyncMock(side_effect=ConnectionError("receiver gone"))
        on_checkpoint = AsyncMock(side_effect=OSError("disk full"))
        coordinator = ScrapeCoordinator(
            StaticBookmarkTree.from_urls(_urls(10)),
            FakeAcquirer(),
            ScanConfig(checkpoint_interval=5),
        )

        manifest = await coordinator.scan({}, on_progress=on_progress, on_checkpoint=on_checkpoint)

        assert len(manifest.updated_corpus) == 10
        assert on_checkpoint.await_count == 2

    async def test_force_refresh_reacquires_everything(self) -> None:
        urls = _urls(3)
        corpus = {url: BookmarkEntry(url=url, title="stale") for url in urls}
        acquirer = FakeAcquirer()
        coordinator = ScrapeCoordinator(StaticBookmarkTree.from_urls(urls), acquirer)

        manifest = await coordinator.scan(corpus, force_refresh=True)

        assert sorted(acquirer.calls) == sorted(urls)
        assert manifest.removed.urls == set()
        assert all(entry.title != "stale" for entry in manifest.updated_corpus.values())

    async def test_enumeration_failure_propagates(self) -> None:
        tree = MagicMock()
        tree.get_tree = AsyncMock(side_effect=BookmarkTreeError("no bookmarks"))
        acquirer = FakeAcquirer()
        coordinator = ScrapeCoordinator(tree, acquirer)
        on_progress = AsyncMock()

        with self.assertRaises(BookmarkTreeError):
            await coordinator.scan({}, on_progress=on_progress)

        on_progress.assert_not_awaited()
        assert acquirer.calls == []
        assert coordinator.state is ScanState.IDLE
