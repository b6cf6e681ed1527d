"""Persistence port: one serialized blob per key."""

from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, blob: str) -> None: ...

    def raw_dump(self) -> dict[str, str]: ...
