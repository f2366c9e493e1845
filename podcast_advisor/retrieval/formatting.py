"""Markdown rendering of lookup results for the calling agent."""

from __future__ import annotations

from podcast_advisor.ingestion.models import AdviceRecord
from podcast_advisor.retrieval.search import IndexStats, SearchResult
from podcast_advisor.topics import TOPICS

_USAGE_NOTE = (
    "**How to use this advice:**\n"
    "Synthesize these insights against your specific plan. Consider:\n"
    "- Which advice directly applies to decisions you're making?\n"
    "- Are there conflicting perspectives? How do you reconcile them?\n"
    "- What context from your situation changes how this advice applies?"
)


def _format_record(position: int, record: AdviceRecord) -> str:
    episode = record.episode
    if record.timestamp:
        episode += f" ({record.timestamp})"
    return (
        f"## {position}. {record.guest}\n"
        f"**Topics:** {', '.join(record.topics)}\n"
        f"**Context:** {record.context}\n\n"
        f"**Insight:** {record.insight}\n\n"
        f'> "{record.quote}"\n\n'
        f"*Episode: {episode}*"
    )


def format_advice_markdown(result: SearchResult, requested_topics: list[str]) -> str:
    """Render a search result, or a hint listing valid topics when nothing matched."""
    if not result.advice:
        return (
            f"No advice found for topics: {', '.join(requested_topics)}\n\n"
            f"Try different topics from: {', '.join(TOPICS)}"
        )

    sections = [_format_record(i, r) for i, r in enumerate(result.advice, 1)]
    return "\n\n".join(
        [
            f"Found {result.total_matches} relevant advice chunks "
            f"(showing top {len(result.advice)}).",
            f"Topics matched: {', '.join(result.topics_matched)}",
            "---",
            "\n\n---\n\n".join(sections),
            "---",
            _USAGE_NOTE,
        ]
    )


def format_topic_list(stats: IndexStats) -> str:
    """Render per-topic record counts."""
    lines = [f"- **{t}**: {stats.chunks_by_topic.get(t, 0)} advice chunks" for t in TOPICS]
    return (
        "# Available Topics\n\n"
        f"Total advice chunks: {stats.total_chunks}\n\n"
        + "\n".join(lines)
        + "\n\nUse these topics with `get_product_advice` to find relevant insights."
    )
