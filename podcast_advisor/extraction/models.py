"""Data models for structured extraction results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from podcast_advisor.topics import Topic


class ExtractionStatus(StrEnum):
    """Outcome of one extraction call."""

    NO_ADVICE = "no_advice"
    VALID = "valid"
    UNPARSEABLE = "unparseable"
    FAILED = "failed"  # transport / API error


class ExtractionPayload(BaseModel):
    """Shape of the JSON object the oracle is asked to return."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    has_advice: bool = Field(alias="hasAdvice", strict=True)
    topics: list[Any] | None = None
    insight: str | None = None
    quote: str | None = None
    context: str | None = None


@dataclass(frozen=True)
class AdviceFields:
    """Validated advice content from a chunk."""

    topics: tuple[Topic, ...]
    insight: str
    quote: str
    context: str = ""


@dataclass(frozen=True)
class ExtractionResult:
    """Tagged result of extracting advice from a single chunk."""

    status: ExtractionStatus
    advice: AdviceFields | None = None
    error: str | None = None

    @property
    def has_advice(self) -> bool:
        return self.status is ExtractionStatus.VALID

    @classmethod
    def no_advice(cls) -> ExtractionResult:
        return cls(status=ExtractionStatus.NO_ADVICE)

    @classmethod
    def valid(cls, advice: AdviceFields) -> ExtractionResult:
        return cls(status=ExtractionStatus.VALID, advice=advice)

    @classmethod
    def unparseable(cls, error: str) -> ExtractionResult:
        return cls(status=ExtractionStatus.UNPARSEABLE, error=error)

    @classmethod
    def failed(cls, error: str) -> ExtractionResult:
        return cls(status=ExtractionStatus.FAILED, error=error)
