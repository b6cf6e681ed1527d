"""httpx-backed page renderer."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

import httpx

from bookmark_mirror.adapters.renderer.protocols import PageSnapshot, RenderedPage
from bookmark_mirror.core.html_utils import extract_page_title
from bookmark_mirror.core.url_utils import PDF_CONTENT_TYPE, is_pdf_content_type
from bookmark_mirror.services.errors import RenderError, RenderTimeoutError

if TYPE_CHECKING:
    from typing import Self

    from bookmark_mirror.adapters.renderer.protocols import PageExtractor
    from bookmark_mirror.config import RendererConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")


def serialize_page(snapshot: PageSnapshot) -> RenderedPage:
    """Default extractor: short-circuit PDFs, otherwise hand back title + markup."""
    if is_pdf_content_type(snapshot.content_type):
        return RenderedPage(title="", markup="", processing=PDF_CONTENT_TYPE)
    return RenderedPage(title=extract_page_title(snapshot.markup), markup=snapshot.markup)


class HttpPageRenderer:
    """Fetch pages over HTTP and expose them to extractors as :class:`PageSnapshot`.

    Use as an async context manager; the underlying ``httpx.AsyncClient`` is
    created on enter and closed on exit.
    """

    def __init__(
        self,
        config: RendererConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        self._client = httpx.AsyncClient(
            headers={
                "User-Agent": self._config.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/pdf;q=0.9,*/*;q=0.8",
            },
            follow_redirects=True,
            verify=self._config.verify_tls,
            transport=self._transport,
            timeout=None,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "Renderer not initialized. Use async context manager."
            raise RuntimeError(msg)
        return self._client

    async def render(
        self,
        url: str,
        initial_delay_ms: int,
        timeout_ms: int,
        extractor: PageExtractor[T],
    ) -> T | None:
        loop = asyncio.get_running_loop()
        try:
            async with asyncio.timeout(None) as deadline:
                # Hard timeout is only armed once the grace delay has passed
                arm_handle = loop.call_later(
                    initial_delay_ms / 1000,
                    lambda: deadline.reschedule(loop.time() + timeout_ms / 1000),
                )
                try:
                    snapshot = await self._capture(url)
                finally:
                    arm_handle.cancel()
        except TimeoutError as exc:
            msg = f"Render timed out after {initial_delay_ms + timeout_ms} ms"
            raise RenderTimeoutError(msg, url=url) from exc
        except httpx.HTTPError as exc:
            msg = f"Render transport error: {exc}"
            raise RenderError(msg, url=url) from exc

        try:
            return extractor(snapshot)
        except Exception as exc:
            msg = f"Page extractor failed: {exc}"
            raise RenderError(msg, url=url) from exc

    async def _capture(self, url: str) -> PageSnapshot:
        try:
            async with self.client.stream("GET", url) as response:
                if response.status_code >= 400:
                    msg = f"HTTP {response.status_code}"
                    raise RenderError(msg, url=url, status_code=response.status_code)

                content_type = response.headers.get("content-type")
                if is_pdf_content_type(content_type):
                    markup = ""
                else:
                    markup = await self._read_text(response)

                return PageSnapshot(
                    url=url,
                    final_url=str(response.url),
                    status_code=response.status_code,
                    content_type=content_type,
                    markup=markup,
                )
        finally:
            logger.debug("render_released", extra={"url": url})

    async def _read_text(self, response: httpx.Response) -> str:
        limit = self._config.max_response_bytes
        chunks: list[bytes] = []
        size = 0
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            size += len(chunk)
            if size >= limit:
                logger.info(
                    "render_response_truncated",
                    extra={"url": str(response.url), "limit_bytes": limit},
                )
                break
        body = b"".join(chunks)[:limit]
        return body.decode(response.encoding or "utf-8", errors="replace")
