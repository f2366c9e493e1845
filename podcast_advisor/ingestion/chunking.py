"""Group transcript segments into word-bounded chunks for extraction."""

from __future__ import annotations

from podcast_advisor.ingestion.ad_filter import is_ad_segment
from podcast_advisor.ingestion.models import Chunk, TranscriptSegment


def _first_name(guest_name: str) -> str:
    """First whitespace-separated token of the guest name, lowercased."""
    tokens = guest_name.lower().split()
    return tokens[0] if tokens else ""


def chunk_segments(
    segments: list[TranscriptSegment],
    guest_name: str,
    target_words: int = 500,
    max_words: int = 800,
) -> list[Chunk]:
    """Accumulate segments into chunks that prefer to end on a guest turn.

    Sponsor segments are dropped before they reach the buffer. A chunk is
    flushed before a segment that would push it past *max_words*, and right
    after a guest segment once *target_words* has been reached. A single
    segment longer than *max_words* still becomes one (oversized) chunk.

    The guest is recognised by the first token of *guest_name* appearing in
    the speaker label, so labels such as ``"Dr. Jane Smith"`` for guest
    ``"Jane Smith"`` still match, but a guest named ``"Dr. Jane Smith"``
    would only match speakers containing ``"dr."``.

    Args:
        segments: Parsed transcript segments in source order.
        guest_name: Display name of the episode's guest.
        target_words: Word count after which a guest turn ends the chunk.
        max_words: Word count a chunk may not exceed by appending.

    Returns:
        List of :class:`Chunk` instances in source order.
    """
    first_name = _first_name(guest_name)

    chunks: list[Chunk] = []
    buffer: list[TranscriptSegment] = []
    text = ""
    timestamp = ""
    word_count = 0

    def flush() -> None:
        nonlocal buffer, text, timestamp, word_count
        if text.strip():
            chunks.append(Chunk(text=text.strip(), timestamp=timestamp, segments=tuple(buffer)))
        buffer = []
        text = ""
        timestamp = ""
        word_count = 0

    for segment in segments:
        if is_ad_segment(segment):
            continue

        segment_words = segment.word_count

        if word_count > 0 and word_count + segment_words > max_words:
            flush()

        if not buffer:
            timestamp = segment.timestamp

        buffer.append(segment)
        text += f"{segment.speaker}: {segment.text}\n\n"
        word_count += segment_words

        if word_count >= target_words and first_name in segment.speaker.lower():
            flush()

    flush()
    return chunks
