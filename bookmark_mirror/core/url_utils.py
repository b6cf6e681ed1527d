from __future__ import annotations

from urllib.parse import quote, urlparse

# Schemes that never resolve to a fetchable document (bookmarklets, browser pages).
NON_FETCHABLE_SCHEMES = frozenset(
    {"javascript", "data", "about", "chrome", "edge", "file", "place", "blob", "view-source"}
)

PDF_CONTENT_TYPE = "application/pdf"


def url_scheme(url: str) -> str:
    return urlparse(url.strip()).scheme.lower()


def is_fetchable_url(url: str | None) -> bool:
    """Return True when *url* points at something a renderer can load."""
    if not url or not url.strip():
        return False
    scheme = url_scheme(url)
    if scheme in NON_FETCHABLE_SCHEMES:
        return False
    return scheme in {"http", "https"}


def build_pdf_viewer_url(viewer_prefix: str, url: str) -> str:
    """Rewrite a PDF URL into its HTML viewer-proxy variant."""
    return f"{viewer_prefix}{quote(url, safe='')}"


def is_pdf_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() == PDF_CONTENT_TYPE
