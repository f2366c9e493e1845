"""Claude-powered extraction of product advice from transcript chunks."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from anthropic import Anthropic, APIError
from anthropic.types import TextBlock
from pydantic import ValidationError

from podcast_advisor.config import settings
from podcast_advisor.extraction.models import (
    AdviceFields,
    ExtractionPayload,
    ExtractionResult,
)
from podcast_advisor.topics import TOPICS, filter_topics

logger = logging.getLogger(__name__)

# First "{" through last "}" in the response; the oracle wraps JSON in prose.
JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

EXTRACTION_PROMPT = """You are extracting product advice from a podcast transcript segment.

Guest: {guest}
Episode: {episode}

Transcript segment:
---
{chunk}
---

Analyze this segment and extract any actionable product advice. If there's meaningful \
advice for product managers, founders, or tech leaders, extract it.

Available topics: {topics}

Respond in JSON format:
{{
  "hasAdvice": true/false,
  "topics": ["topic1", "topic2"],
  "insight": "1-2 sentence summary of the advice",
  "quote": "The most impactful direct quote (keep it concise, under 200 chars)",
  "context": "What question or situation prompted this advice"
}}

If the segment is just small talk, introductions, ads, or doesn't contain actionable \
advice, return:
{{"hasAdvice": false}}

Important:
- Only extract genuine insights, not obvious statements
- The quote should be a direct excerpt from the transcript
- Topics must be from the provided list
- Be selective - not every segment has advice worth extracting"""


def build_prompt(chunk: str, guest: str, episode: str) -> str:
    """Render the extraction prompt for one chunk."""
    return EXTRACTION_PROMPT.format(
        guest=guest,
        episode=episode,
        chunk=chunk,
        topics=", ".join(TOPICS),
    )


def response_text(response: Any) -> str:
    """Join the text blocks of a Messages API response."""
    return "".join(block.text for block in response.content if isinstance(block, TextBlock))


def parse_extraction_response(text: str) -> ExtractionResult:
    """Parse the oracle's free-text answer into a tagged result.

    The first brace-delimited span is decoded as JSON and validated. Topics
    outside the taxonomy are dropped silently; an empty topic list is still
    a valid result and left to the caller to discard.

    Args:
        text: Raw text returned by the oracle.

    Returns:
        An :class:`ExtractionResult`; never raises.
    """
    match = JSON_OBJECT_RE.search(text)
    if not match:
        return ExtractionResult.unparseable("No JSON found in response")

    try:
        payload = ExtractionPayload.model_validate(json.loads(match.group(0)))
    except (json.JSONDecodeError, ValidationError) as exc:
        return ExtractionResult.unparseable(f"Invalid extraction JSON: {exc}")

    if not payload.has_advice:
        return ExtractionResult.no_advice()

    if payload.insight is None or payload.quote is None:
        return ExtractionResult.unparseable("Advice is missing insight or quote")

    return ExtractionResult.valid(
        AdviceFields(
            topics=tuple(filter_topics(payload.topics or [])),
            insight=payload.insight,
            quote=payload.quote,
            context=payload.context or "",
        )
    )


def extract_advice(
    chunk: str,
    guest: str,
    episode: str,
    client: Anthropic | None = None,
    model: str | None = None,
    max_tokens: int | None = None,
) -> ExtractionResult:
    """Ask Claude for the advice contained in one transcript chunk.

    API and parse failures are logged and returned as ``failed`` /
    ``unparseable`` results so that a batch run never aborts on one chunk.

    Args:
        chunk: Chunk text (``"Speaker: text"`` blocks).
        guest: Guest display name.
        episode: Episode identifier.
        client: Anthropic client; created from settings when omitted.
        model: Model override; defaults to ``settings.ingest_model``.
        max_tokens: Output bound; defaults to ``settings.extraction_max_tokens``.

    Returns:
        The tagged :class:`ExtractionResult`.
    """
    client = client or Anthropic(api_key=settings.anthropic_api_key or None)

    try:
        response = client.messages.create(
            model=model or settings.ingest_model,
            max_tokens=max_tokens or settings.extraction_max_tokens,
            messages=[{"role": "user", "content": build_prompt(chunk, guest, episode)}],
        )
    except APIError as exc:
        logger.error("Error extracting advice for %s: %s", guest, exc)
        return ExtractionResult.failed(str(exc))

    result = parse_extraction_response(response_text(response))
    if result.error:
        logger.warning("Unusable extraction response for %s: %s", guest, result.error)
    return result
