"""Exception hierarchy for scans and acquisition."""

from __future__ import annotations


class BookmarkMirrorError(Exception):
    """Base exception for bookmark mirror errors."""


class BookmarkTreeError(BookmarkMirrorError):
    """The live bookmark tree could not be enumerated. Fatal to a scan."""


class RenderError(BookmarkMirrorError):
    """A page could not be rendered. Recovered per URL."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class RenderTimeoutError(RenderError):
    """The hard render timeout elapsed before the page was captured."""


class ProgressArityError(ValueError):
    """A progress vector did not match the number of tracked values."""
