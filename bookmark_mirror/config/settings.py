from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .runtime import BookmarksConfig, RuntimeConfig
from .scan import RendererConfig, ScanConfig
from .search import SearchConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    runtime: RuntimeConfig
    bookmarks: BookmarksConfig
    scan: ScanConfig
    renderer: RendererConfig
    search: SearchConfig


class Settings(BaseSettings):
    """Application settings loaded automatically from environment variables.

    Nested models are populated by matching validation_alias on each field.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    bookmarks: BookmarksConfig = Field(default_factory=BookmarksConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    renderer: RendererConfig = Field(default_factory=RendererConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    @model_validator(mode="before")
    @classmethod
    def _build_nested_from_env(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Build nested config objects from flat environment variables.

        Constructor arguments take precedence over os.environ.
        """
        if not isinstance(data, dict):
            return data

        result = dict(data)
        merged_source = {**dict(os.environ), **data}

        for field_name, field_info in cls.model_fields.items():
            annotation = field_info.annotation
            if not isinstance(annotation, type) or not issubclass(annotation, BaseModel):
                continue

            nested_data: dict[str, Any] = {}
            for nested_field_name, nested_field in annotation.model_fields.items():
                env_value = cls._resolve_env_value(merged_source, nested_field)
                if env_value is not None:
                    nested_data[nested_field_name] = env_value

            if nested_data:
                if field_name in result and isinstance(result[field_name], dict):
                    result[field_name] = {**nested_data, **result[field_name]}
                else:
                    result[field_name] = nested_data

        return result

    @staticmethod
    def _resolve_env_value(data: dict[str, Any], field: Any) -> Any | None:
        aliases: list[str] = []
        alias = field.validation_alias
        if isinstance(alias, AliasChoices):
            aliases.extend(choice for choice in alias.choices if isinstance(choice, str))
        elif isinstance(alias, str):
            aliases.append(alias)
        if field.alias:
            aliases.append(field.alias)

        for name in aliases:
            if name in data:
                return data[name]
        return None

    def as_app_config(self) -> AppConfig:
        return AppConfig(
            runtime=self.runtime,
            bookmarks=self.bookmarks,
            scan=self.scan,
            renderer=self.renderer,
            search=self.search,
        )


def load_config(**overrides: Any) -> AppConfig:
    """Load application configuration from environment variables and ``.env``.

    Raises:
        RuntimeError: If configuration validation fails.
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        msg = f"Configuration validation failed: {exc}"
        raise RuntimeError(msg) from exc

    logger.debug(
        "config_loaded",
        extra={
            "db_path": settings.runtime.db_path,
            "scan_concurrency": settings.scan.max_concurrency,
            "checkpoint_interval": settings.scan.checkpoint_interval,
        },
    )
    return settings.as_app_config()
