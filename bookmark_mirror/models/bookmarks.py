"""Pydantic models for bookmark corpus data."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BookmarkEntry(BaseModel):
    """Extracted text for one bookmarked page. Replaced wholesale on re-scrape."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str = ""
    content: str = ""


BookmarkCorpus = dict[str, BookmarkEntry]

corpus_adapter: TypeAdapter[BookmarkCorpus] = TypeAdapter(BookmarkCorpus)


class BookmarkNode(BaseModel):
    """One node of the live bookmark tree: a folder (has children) or a link."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    url: str | None = None
    children: list[BookmarkNode] | None = None

    @property
    def is_folder(self) -> bool:
        return self.children is not None


class AddedBookmarks(BaseModel):
    urls: set[str] = Field(default_factory=set)
    entries: BookmarkCorpus = Field(default_factory=dict)


class RemovedBookmarks(BaseModel):
    urls: set[str] = Field(default_factory=set)


class ScanManifest(BaseModel):
    """Result of one scan; consumed once to patch the index and storage."""

    updated_corpus: BookmarkCorpus = Field(default_factory=dict)
    added: AddedBookmarks = Field(default_factory=AddedBookmarks)
    removed: RemovedBookmarks = Field(default_factory=RemovedBookmarks)


class ScoredEntry(BaseModel):
    """Search hit. Never persisted."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str = ""
    content: str = ""
    score: float | None = None
