"""Validated selection requests: which segment efforts to cut from an activity."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

MAX_SELECTED_SEGMENTS = 100


class SegmentEffort(BaseModel):
    """One effort on a named segment, addressed by sample index."""

    model_config = ConfigDict(extra="ignore")

    start_index: int = Field(ge=0)
    end_index: int = Field(ge=0)
    name: str | None = None

    @model_validator(mode="after")
    def _ordered_bounds(self) -> SegmentEffort:
        if self.end_index < self.start_index:
            raise ValueError("end_index must be >= start_index")
        return self


class SelectionRequest(BaseModel):
    """Request to cut the selected segment efforts from an activity."""

    activity_id: str
    selected_segments: list[int] = Field(min_length=1, max_length=MAX_SELECTED_SEGMENTS)
    action: Literal["download", "upload"]
    format: Literal["fit", "gpx", "tcx"] = "fit"

    @field_validator("activity_id", mode="before")
    @classmethod
    def _numeric_activity_id(cls, value: Any) -> str:
        text = str(value).strip()
        if not text.isdigit():
            raise ValueError("Activity ID must be numeric")
        return text

    @field_validator("selected_segments")
    @classmethod
    def _non_negative_segments(cls, value: list[int]) -> list[int]:
        if any(index < 0 for index in value):
            raise ValueError("segment positions must be non-negative")
        return value


def validate_selection(data: Any) -> SelectionRequest:
    """Parse a raw request body, raising ValueError with the first problem found."""
    try:
        return SelectionRequest.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        message = first.get("msg", "Validation failed")
        raise ValueError(f"Invalid selection request: {message}") from exc


def parse_efforts(raw_efforts: list[dict[str, Any]]) -> list[SegmentEffort]:
    """Validate raw segment-effort dicts."""
    try:
        return [SegmentEffort.model_validate(effort) for effort in raw_efforts]
    except ValidationError as exc:
        raise ValueError(f"Invalid segment effort: {exc}") from exc
