from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._validators import _parse_bounded_float, _parse_bounded_int


class SearchConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    result_limit: int = Field(default=20, validation_alias="SEARCH_RESULT_LIMIT")
    candidate_limit: int = Field(
        default=100,
        validation_alias="SEARCH_CANDIDATE_LIMIT",
        description="Maximum hits fetched per field before merging",
    )
    fuzzy_cutoff: float = Field(default=0.8, validation_alias="SEARCH_FUZZY_CUTOFF")
    fuzzy_max_expansions: int = Field(default=3, validation_alias="SEARCH_FUZZY_MAX_EXPANSIONS")
    min_fuzzy_length: int = Field(default=4, validation_alias="SEARCH_MIN_FUZZY_LENGTH")

    @field_validator("result_limit", mode="before")
    @classmethod
    def _validate_result_limit(cls, value: Any) -> int:
        return _parse_bounded_int(
            value, name="Search result limit", default=20, minimum=1, maximum=200
        )

    @field_validator("candidate_limit", mode="before")
    @classmethod
    def _validate_candidate_limit(cls, value: Any) -> int:
        return _parse_bounded_int(
            value, name="Search candidate limit", default=100, minimum=1, maximum=10_000
        )

    @field_validator("fuzzy_cutoff", mode="before")
    @classmethod
    def _validate_fuzzy_cutoff(cls, value: Any) -> float:
        return _parse_bounded_float(
            value, name="Search fuzzy cutoff", default=0.8, minimum=0.0, maximum=1.0
        )

    @field_validator("fuzzy_max_expansions", mode="before")
    @classmethod
    def _validate_fuzzy_expansions(cls, value: Any) -> int:
        return _parse_bounded_int(
            value, name="Search fuzzy expansions", default=3, minimum=0, maximum=20
        )

    @field_validator("min_fuzzy_length", mode="before")
    @classmethod
    def _validate_min_fuzzy_length(cls, value: Any) -> int:
        return _parse_bounded_int(
            value, name="Search minimum fuzzy term length", default=4, minimum=1, maximum=50
        )
