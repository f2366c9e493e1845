"""Transcript parser: split raw text into speaker-attributed segments."""

from __future__ import annotations

import re

from podcast_advisor.ingestion.models import TranscriptSegment

# "Speaker Name (HH:MM:SS)" alone on a line, optionally followed by a colon.
SPEAKER_MARKER_RE = re.compile(r"^(.+?)\s*\((\d{2}:\d{2}:\d{2})\):?\s*$")


def parse_transcript(content: str) -> list[TranscriptSegment]:
    """Parse a plain-text transcript with ``Speaker (HH:MM:SS)`` markers.

    Each marker line starts a new segment; every other non-blank line is
    appended to the current segment's text. Text that appears before the
    first marker has no speaker and is discarded. A transcript without any
    marker yields no segments.

    Args:
        content: Raw transcript text.

    Returns:
        Segments in source order, each with non-empty text.
    """
    segments: list[TranscriptSegment] = []

    speaker = ""
    timestamp = ""
    text = ""

    for line in content.splitlines():
        match = SPEAKER_MARKER_RE.match(line)
        if match:
            if speaker and text.strip():
                segments.append(
                    TranscriptSegment(speaker=speaker, timestamp=timestamp, text=text.strip())
                )
            speaker = match.group(1).strip()
            timestamp = match.group(2)
            text = ""
        elif line.strip():
            text += " " + line.strip()

    if speaker and text.strip():
        segments.append(TranscriptSegment(speaker=speaker, timestamp=timestamp, text=text.strip()))

    return segments
