"""Pydantic request/response schemas for the advice lookup API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from podcast_advisor.ingestion.models import AdviceRecord
from podcast_advisor.topics import Topic


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AdviceRequest(_CamelModel):
    """Request body for the /api/advice endpoint."""

    topics: list[str]
    plan_summary: str | None = Field(default=None, alias="planSummary")
    max_results: int = Field(default=5, ge=1, alias="maxResults")


class AdviceItem(BaseModel):
    """A single advice record in API responses."""

    id: str
    guest: str
    episode: str
    topics: list[str]
    insight: str
    quote: str
    context: str
    timestamp: str | None = None

    @classmethod
    def from_record(cls, record: AdviceRecord) -> AdviceItem:
        return cls(**record.to_dict())


class AdviceResponse(_CamelModel):
    """Response body for the /api/advice endpoint."""

    advice: list[AdviceItem]
    topics_matched: list[Topic] = Field(alias="topicsMatched")
    total_matches: int = Field(alias="totalMatches")
    formatted: str = ""


class TopicsResponse(_CamelModel):
    """Response body for the /api/topics endpoint."""

    total_chunks: int = Field(alias="totalChunks")
    topics: dict[str, int]
    formatted: str = ""
