from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class RuntimeConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    db_path: str = Field(default="data/bookmarks.db", validation_alias="DB_PATH")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    log_json: bool = Field(default=True, validation_alias="LOG_JSON")

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, value: Any) -> str:
        log_level = str(value or "INFO").upper()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if log_level not in valid_levels:
            msg = f"Invalid log level: {value}. Must be one of {valid_levels}"
            raise ValueError(msg)
        return log_level

    @field_validator("db_path", mode="before")
    @classmethod
    def _validate_db_path(cls, value: Any) -> str:
        path = str(value or "data/bookmarks.db").strip()
        if "\x00" in path:
            msg = "DB path contains invalid characters"
            raise ValueError(msg)
        return path

    @field_validator("log_file", mode="before")
    @classmethod
    def _validate_log_file(cls, value: Any) -> str | None:
        if value is None:
            return None
        trimmed = str(value).strip()
        return trimmed or None


class BookmarksConfig(BaseModel):
    """Where the live bookmark tree is read from."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bookmarks_file: str | None = Field(
        default=None,
        validation_alias="BOOKMARKS_FILE",
        description="Path to a Chromium profile 'Bookmarks' JSON file",
    )

    @field_validator("bookmarks_file", mode="before")
    @classmethod
    def _validate_bookmarks_file(cls, value: Any) -> str | None:
        if value is None:
            return None
        trimmed = str(value).strip()
        if not trimmed:
            return None
        if "\x00" in trimmed:
            msg = "Bookmarks file path contains invalid characters"
            raise ValueError(msg)
        return trimmed
