from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ._validators import _ensure_http_url, _parse_bounded_float, _parse_bounded_int

DEFAULT_PDF_VIEWER_URL = "https://drive.google.com/viewerng/viewer?url="
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0 Safari/537.36"
)


class ScanConfig(BaseModel):
    """Bookmark scan tuning: worker pool size, checkpoint cadence and phase weights."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_concurrency: int = Field(default=8, validation_alias="SCAN_MAX_CONCURRENCY")
    checkpoint_interval: int = Field(default=10, validation_alias="SCAN_CHECKPOINT_INTERVAL")
    remove_weight: float = Field(default=0.1, validation_alias="SCAN_REMOVE_WEIGHT")
    acquire_weight: float = Field(default=0.9, validation_alias="SCAN_ACQUIRE_WEIGHT")

    @field_validator("max_concurrency", mode="before")
    @classmethod
    def _validate_concurrency(cls, value: Any) -> int:
        return _parse_bounded_int(
            value, name="Scan max concurrency", default=8, minimum=1, maximum=64
        )

    @field_validator("checkpoint_interval", mode="before")
    @classmethod
    def _validate_checkpoint_interval(cls, value: Any) -> int:
        return _parse_bounded_int(value, name="Scan checkpoint interval", default=10, minimum=1)

    @field_validator("remove_weight", "acquire_weight", mode="before")
    @classmethod
    def _validate_weight(cls, value: Any, info: ValidationInfo) -> float:
        default = cls.model_fields[info.field_name].default
        return _parse_bounded_float(
            value,
            name=info.field_name.replace("_", " ").capitalize(),
            default=default,
            minimum=0.0,
            inclusive_minimum=False,
        )


class RendererConfig(BaseModel):
    """Page rendering limits used during content acquisition."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    initial_delay_ms: int = Field(default=5_000, validation_alias="RENDER_INITIAL_DELAY_MS")
    timeout_ms: int = Field(default=15_000, validation_alias="RENDER_TIMEOUT_MS")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, validation_alias="RENDER_USER_AGENT")
    max_response_mb: int = Field(default=20, validation_alias="RENDER_MAX_RESPONSE_MB")
    pdf_viewer_url: str = Field(
        default=DEFAULT_PDF_VIEWER_URL,
        validation_alias="RENDER_PDF_VIEWER_URL",
        description="Prefix that turns a PDF URL into an HTML viewer page",
    )
    verify_tls: bool = Field(default=True, validation_alias="RENDER_VERIFY_TLS")

    @field_validator("initial_delay_ms", mode="before")
    @classmethod
    def _validate_initial_delay(cls, value: Any) -> int:
        return _parse_bounded_int(
            value, name="Render initial delay (ms)", default=5_000, minimum=0, maximum=120_000
        )

    @field_validator("timeout_ms", mode="before")
    @classmethod
    def _validate_timeout(cls, value: Any) -> int:
        return _parse_bounded_int(
            value, name="Render timeout (ms)", default=15_000, minimum=100, maximum=600_000
        )

    @field_validator("max_response_mb", mode="before")
    @classmethod
    def _validate_max_response(cls, value: Any) -> int:
        return _parse_bounded_int(
            value, name="Render max response size (MB)", default=20, minimum=1, maximum=500
        )

    @field_validator("user_agent", mode="before")
    @classmethod
    def _validate_user_agent(cls, value: Any) -> str:
        agent = str(value or DEFAULT_USER_AGENT).strip()
        if len(agent) > 500:
            msg = "Render user agent is too long"
            raise ValueError(msg)
        return agent

    @field_validator("pdf_viewer_url", mode="before")
    @classmethod
    def _validate_pdf_viewer(cls, value: Any) -> str:
        return _ensure_http_url(value or DEFAULT_PDF_VIEWER_URL, name="PDF viewer URL")

    @property
    def max_response_bytes(self) -> int:
        return self.max_response_mb * 1024 * 1024
