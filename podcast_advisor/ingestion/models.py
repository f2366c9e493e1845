"""Data models for the ingestion pipeline and the persisted advice index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from podcast_advisor.topics import Topic

INDEX_VERSION = "1.0.0"


@dataclass
class TranscriptSegment:
    """One contiguous speaker turn, before chunking."""

    speaker: str
    timestamp: str
    text: str

    @property
    def word_count(self) -> int:
        return len(self.text.split())


@dataclass
class Chunk:
    """A word-bounded block of segments sent to the extraction oracle in one call."""

    text: str
    timestamp: str
    segments: tuple[TranscriptSegment, ...] = field(default=(), repr=False)

    @property
    def word_count(self) -> int:
        return sum(s.word_count for s in self.segments)


@dataclass(frozen=True)
class AdviceRecord:
    """A single piece of advice extracted from a podcast transcript."""

    id: str
    guest: str
    episode: str
    topics: tuple[Topic, ...]
    insight: str
    quote: str
    context: str
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "guest": self.guest,
            "episode": self.episode,
            "topics": [str(t) for t in self.topics],
            "insight": self.insight,
            "quote": self.quote,
            "context": self.context,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AdviceRecord:
        """Build a record from its JSON form.

        Topics outside the taxonomy are kept as plain strings so that the
        search index, not the loader, decides to ignore them. Non-string
        topic values are dropped.
        """
        raw_topics = data.get("topics")
        topics: list[Any] = []
        for value in raw_topics if isinstance(raw_topics, list) else []:
            if not isinstance(value, str):
                continue
            try:
                topics.append(Topic(value))
            except ValueError:
                topics.append(value)
        return cls(
            id=data["id"],
            guest=data["guest"],
            episode=data.get("episode", data["guest"]),
            topics=tuple(topics),
            insight=data.get("insight", ""),
            quote=data.get("quote", ""),
            context=data.get("context", ""),
            timestamp=data.get("timestamp"),
        )


@dataclass
class AdviceIndex:
    """The versioned collection of advice records written by ingestion."""

    generated_at: str
    transcript_count: int
    chunks: list[AdviceRecord] = field(default_factory=list)
    version: str = INDEX_VERSION

    @property
    def guests(self) -> set[str]:
        """Distinct guests represented in the index."""
        return {c.guest for c in self.chunks}

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "generatedAt": self.generated_at,
            "transcriptCount": self.transcript_count,
            "chunks": [c.to_dict() for c in self.chunks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AdviceIndex:
        return cls(
            version=data.get("version", INDEX_VERSION),
            generated_at=data.get("generatedAt", ""),
            transcript_count=int(data.get("transcriptCount", 0)),
            chunks=[AdviceRecord.from_dict(c) for c in data.get("chunks", [])],
        )
