"""Renderer capability port.

A renderer loads a URL, waits out an initial grace delay, then arms a hard
timeout. The ``extractor`` runs against the fully loaded page and decides
what to hand back. Whatever happens, the page resource is released exactly
once.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageSnapshot:
    """A loaded page as seen by an extractor."""

    url: str
    final_url: str
    status_code: int
    content_type: str | None
    markup: str


@dataclass(frozen=True, slots=True)
class RenderedPage:
    """Default extractor result. ``processing`` names a content type needing a workaround."""

    title: str
    markup: str
    processing: str | None = None


PageExtractor = Callable[[PageSnapshot], T | None]


class PageRenderer(Protocol):
    async def render(
        self,
        url: str,
        initial_delay_ms: int,
        timeout_ms: int,
        extractor: PageExtractor[T],
    ) -> T | None: ...
