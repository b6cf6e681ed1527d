"""SQLite implementation of the key/value blob store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bookmark_mirror.db.models import KeyValueBlob, utcnow

if TYPE_CHECKING:
    from bookmark_mirror.db.session import DatabaseSessionManager

logger = logging.getLogger(__name__)


class SqliteKeyValueStore:
    def __init__(self, session: DatabaseSessionManager) -> None:
        self._database = session.database

    def get(self, key: str) -> str | None:
        row = KeyValueBlob.get_or_none(KeyValueBlob.key == key)
        return row.value if row is not None else None

    def set(self, key: str, blob: str) -> None:
        with self._database.atomic():
            (
                KeyValueBlob.insert(key=key, value=blob, updated_at=utcnow())
                .on_conflict(
                    conflict_target=[KeyValueBlob.key],
                    update={KeyValueBlob.value: blob, KeyValueBlob.updated_at: utcnow()},
                )
                .execute()
            )
        logger.debug("kv_blob_written", extra={"key": key, "bytes": len(blob)})

    def raw_dump(self) -> dict[str, str]:
        return {row.key: row.value for row in KeyValueBlob.select()}


class InMemoryKeyValueStore:
    """Dict-backed store for tests and throwaway runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, blob: str) -> None:
        self._data[key] = blob

    def raw_dump(self) -> dict[str, str]:
        return dict(self._data)
