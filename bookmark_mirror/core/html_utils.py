from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from html import unescape
from html.parser import HTMLParser

import trafilatura

from bookmark_mirror.core.content_sanitizer import sanitize_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArticleText:
    """Readable article text pulled out of a page's markup."""

    title: str
    content: str


class _TitleExtractor(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._in_title = False
        self._done = False
        self._buf: list[str] = []

    def handle_starttag(self, tag: str, attrs) -> None:
        if tag == "title" and not self._done:
            self._in_title = True

    def handle_endtag(self, tag: str) -> None:
        if tag == "title" and self._in_title:
            self._in_title = False
            self._done = True

    def handle_data(self, data: str) -> None:
        if self._in_title:
            self._buf.append(data)

    def get_title(self) -> str:
        return unescape("".join(self._buf)).strip()


def extract_page_title(markup: str) -> str:
    """Return the document ``<title>`` text, or an empty string."""
    if not markup:
        return ""
    parser = _TitleExtractor()
    try:
        parser.feed(markup)
        parser.close()
    except (AssertionError, ValueError) as exc:  # pragma: no cover - malformed markup
        logger.debug("page_title_parse_incomplete", extra={"error": str(exc)})
    return sanitize_content(parser.get_title())


def extract_article(markup: str, *, url: str | None = None) -> ArticleText | None:
    """Run readability-style extraction over serialized page markup.

    Extraction failures are not fatal; they yield ``None`` so the caller can
    skip the page for this scan.
    """
    if not markup or not markup.strip():
        return None

    try:
        raw = trafilatura.extract(
            markup,
            url=url,
            output_format="json",
            with_metadata=True,
            include_comments=False,
            include_tables=True,
        )
    except Exception as exc:
        logger.warning(
            "article_extraction_failed",
            extra={"url": url, "error": str(exc), "error_type": type(exc).__name__},
        )
        return None

    if not raw:
        return None

    try:
        document = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("article_extraction_bad_payload", extra={"url": url})
        return None

    content = sanitize_content(document.get("text") or document.get("raw_text"))
    if not content:
        return None

    return ArticleText(title=sanitize_content(document.get("title")), content=content)
