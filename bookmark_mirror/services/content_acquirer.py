"""Turn a bookmarked URL into a :class:`BookmarkEntry` of readable text."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from bookmark_mirror.adapters.renderer.http_renderer import serialize_page
from bookmark_mirror.core.async_utils import raise_if_cancelled
from bookmark_mirror.core.content_sanitizer import sanitize_content
from bookmark_mirror.core.html_utils import ArticleText, extract_article
from bookmark_mirror.core.url_utils import build_pdf_viewer_url, is_fetchable_url, url_scheme
from bookmark_mirror.models.bookmarks import BookmarkEntry
from bookmark_mirror.services.errors import RenderError, RenderTimeoutError

if TYPE_CHECKING:
    from bookmark_mirror.adapters.renderer.protocols import (
        PageExtractor,
        PageRenderer,
        RenderedPage,
    )
    from bookmark_mirror.config import RendererConfig

logger = logging.getLogger(__name__)

ArticleExtractor = Callable[..., ArticleText | None]


class ContentAcquirer:
    """Render a page, fall back to a PDF viewer when needed, and extract its article.

    Failures never escape :meth:`acquire`; a failed URL yields ``None`` and is
    retried on the next scan.
    """

    def __init__(
        self,
        renderer: PageRenderer,
        config: RendererConfig,
        *,
        page_extractor: PageExtractor[RenderedPage] = serialize_page,
        article_extractor: ArticleExtractor = extract_article,
    ) -> None:
        self._renderer = renderer
        self._config = config
        self._page_extractor = page_extractor
        self._article_extractor = article_extractor

    async def acquire(self, url: str, *, correlation_id: str | None = None) -> BookmarkEntry | None:
        if not is_fetchable_url(url):
            logger.debug(
                "acquire_skipped_unfetchable",
                extra={"cid": correlation_id, "scheme": url_scheme(url) if url else None},
            )
            return None

        try:
            page = await self._render(url)
            if page is not None and page.processing:
                viewer_url = build_pdf_viewer_url(self._config.pdf_viewer_url, url)
                logger.debug(
                    "acquire_pdf_viewer_fallback",
                    extra={"cid": correlation_id, "url": url, "content_type": page.processing},
                )
                page = await self._render(viewer_url)
                if page is not None and page.processing:
                    page = None

            if page is None:
                return None

            article = await asyncio.to_thread(self._article_extractor, page.markup, url=url)
            if article is None:
                logger.info("acquire_no_article", extra={"cid": correlation_id, "url": url})
                return None

            title = sanitize_content(page.title) or article.title or url
            return BookmarkEntry(url=url, title=title, content=sanitize_content(article.content))

        except RenderTimeoutError as exc:
            logger.warning(
                "acquire_timeout",
                extra={"cid": correlation_id, "url": url, "error": str(exc)},
            )
        except RenderError as exc:
            logger.warning(
                "acquire_render_failed",
                extra={
                    "cid": correlation_id,
                    "url": url,
                    "status_code": exc.status_code,
                    "error": str(exc),
                },
            )
        except Exception as exc:
            raise_if_cancelled(exc)
            logger.exception(
                "acquire_unexpected_error",
                extra={"cid": correlation_id, "url": url, "error_type": type(exc).__name__},
            )
        return None

    async def _render(self, url: str) -> RenderedPage | None:
        return await self._renderer.render(
            url,
            self._config.initial_delay_ms,
            self._config.timeout_ms,
            self._page_extractor,
        )
