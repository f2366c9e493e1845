"""Advice lookup endpoints: topic search and topic listing."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from podcast_advisor.api.models import AdviceItem, AdviceRequest, AdviceResponse, TopicsResponse
from podcast_advisor.retrieval.formatting import format_advice_markdown, format_topic_list
from podcast_advisor.retrieval.search import AdviceSearch

router = APIRouter()


def _get_search(request: Request) -> AdviceSearch:
    search: AdviceSearch | None = getattr(request.app.state, "search", None)
    if search is None:
        raise HTTPException(status_code=503, detail="Advice index not loaded")
    return search


@router.post("/api/advice", response_model=AdviceResponse, response_model_by_alias=True)
async def get_product_advice(request: Request, body: AdviceRequest) -> AdviceResponse:
    """Return the advice records that best match the requested topics.

    Unknown topics are ignored; if none of them normalize to the taxonomy the
    response is empty rather than an error.
    """
    search = _get_search(request)
    result = search.get_product_advice(
        body.topics,
        plan_summary=body.plan_summary,
        max_results=body.max_results,
    )
    return AdviceResponse(
        advice=[AdviceItem.from_record(r) for r in result.advice],
        topics_matched=result.topics_matched,
        total_matches=result.total_matches,
        formatted=format_advice_markdown(result, body.topics),
    )


@router.get("/api/topics", response_model=TopicsResponse, response_model_by_alias=True)
async def list_topics(request: Request) -> TopicsResponse:
    """List every taxonomy topic with its record count."""
    search = _get_search(request)
    stats = search.get_stats()
    return TopicsResponse(
        total_chunks=stats.total_chunks,
        topics=stats.chunks_by_topic,
        formatted=format_topic_list(stats),
    )
