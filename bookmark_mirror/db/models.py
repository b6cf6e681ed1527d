"""Peewee ORM models for the bookmark mirror database."""

from __future__ import annotations

import datetime as _dt
from typing import Any

import peewee
from playhouse.sqlite_ext import FTS5Model, SearchField

# A proxy that will be initialised with the concrete database instance at runtime.
database_proxy: peewee.Database = peewee.DatabaseProxy()


def utcnow() -> _dt.datetime:
    return _dt.datetime.now(_dt.UTC)


class BaseModel(peewee.Model):
    """Base Peewee model bound to the lazily initialised database proxy."""

    def save(self, *args: Any, **kwargs: Any) -> int:
        if hasattr(self, "updated_at"):
            self.updated_at = utcnow()
        return super().save(*args, **kwargs)

    class Meta:
        database = database_proxy
        legacy_table_names = False


class KeyValueBlob(BaseModel):
    """Single serialized blob per key (the corpus lives under one key)."""

    key = peewee.TextField(primary_key=True)
    value = peewee.TextField()
    updated_at = peewee.DateTimeField(default=utcnow)


class BookmarkSearchIndex(FTS5Model):
    """FTS-backed search index over bookmark titles and extracted content."""

    url = SearchField(unindexed=True)
    title = SearchField()
    content = SearchField()

    class Meta:
        table_name = "bookmark_search_index"
        database = database_proxy
        options = {"tokenize": "unicode61 remove_diacritics 2"}


ALL_MODELS: tuple[type[peewee.Model], ...] = (KeyValueBlob, BookmarkSearchIndex)
