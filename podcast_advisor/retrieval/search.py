"""In-memory topic search over the advice index."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType

from podcast_advisor.ingestion.models import AdviceIndex, AdviceRecord
from podcast_advisor.topics import TOPIC_VALUES, TOPICS, Topic, normalize_topic

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 5


@dataclass(frozen=True)
class SearchResult:
    """Matched advice, best first."""

    advice: list[AdviceRecord] = field(default_factory=list)
    topics_matched: list[Topic] = field(default_factory=list)
    total_matches: int = 0


@dataclass(frozen=True)
class IndexStats:
    """Record counts for the loaded index."""

    total_chunks: int
    chunks_by_topic: dict[str, int]


class AdviceSearch:
    """Read-only topic index built once from an :class:`AdviceIndex`.

    Nothing is mutated after construction, so one instance can serve any
    number of concurrent lookups.
    """

    def __init__(self, index: AdviceIndex) -> None:
        self._index = index
        self._records: tuple[AdviceRecord, ...] = tuple(index.chunks)
        self._topic_index = self._build_topic_index(self._records)

    @staticmethod
    def _build_topic_index(
        records: tuple[AdviceRecord, ...],
    ) -> MappingProxyType[Topic, tuple[int, ...]]:
        """Map every taxonomy topic to the positions of its records."""
        buckets: dict[Topic, list[int]] = {topic: [] for topic in TOPICS}
        for position, record in enumerate(records):
            # A record listing the same topic twice still lands in the bucket once.
            for topic in dict.fromkeys(t for t in record.topics if isinstance(t, str)):
                if topic in TOPIC_VALUES:
                    buckets[Topic(topic)].append(position)
                else:
                    logger.debug("Ignoring unknown topic %r on %s", topic, record.id)
        return MappingProxyType({topic: tuple(positions) for topic, positions in buckets.items()})

    @property
    def index(self) -> AdviceIndex:
        return self._index

    def search(self, topics: list[str], max_results: int = DEFAULT_MAX_RESULTS) -> SearchResult:
        """Find advice matching any of *topics*, ranked by how many they match.

        Args:
            topics: Free-form topic strings; unknown ones are ignored.
            max_results: Maximum number of records to return.

        Returns:
            A :class:`SearchResult` with the top records, the canonical topics
            used, and the number of matches before truncation.
        """
        normalized: list[Topic] = []
        for value in topics:
            topic = normalize_topic(value)
            if topic is not None and topic not in normalized:
                normalized.append(topic)

        if not normalized:
            return SearchResult()

        # Scores are keyed by index position so records sharing an id stay distinct.
        # dict preserves first-seen order; sorted() below is stable.
        scores: dict[int, int] = {}
        for topic in normalized:
            for position in self._topic_index[topic]:
                scores[position] = scores.get(position, 0) + 1

        ranked = sorted(scores, key=lambda pos: scores[pos], reverse=True)

        return SearchResult(
            advice=[self._records[pos] for pos in ranked[: max(max_results, 0)]],
            topics_matched=normalized,
            total_matches=len(ranked),
        )

    def get_product_advice(
        self,
        topics: list[str],
        plan_summary: str | None = None,
        max_results: int | None = None,
    ) -> SearchResult:
        """Lookup entry point; *plan_summary* is caller context only."""
        if plan_summary:
            logger.debug("Advice lookup for plan: %s", plan_summary)
        return self.search(topics, max_results=DEFAULT_MAX_RESULTS if max_results is None else max_results)

    def get_stats(self) -> IndexStats:
        return IndexStats(
            total_chunks=len(self._records),
            chunks_by_topic={str(t): len(positions) for t, positions in self._topic_index.items()},
        )

    def list_topics(self) -> dict[str, int]:
        """Record count per taxonomy topic."""
        return self.get_stats().chunks_by_topic
