"""Messages streamed to whatever transport drives scans and searches."""

from __future__ import annotations

from pydantic import BaseModel, Field

from bookmark_mirror.models.bookmarks import ScoredEntry  # noqa: TC001


class ScanStatus(BaseModel):
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    done: bool = False
    error: str | None = None


class SearchResponse(BaseModel):
    results: list[ScoredEntry] = Field(default_factory=list)
    elapsed_ms: float = 0.0


class ReadyStatus(BaseModel):
    is_ready: bool = False
