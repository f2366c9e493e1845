"""Sponsor-read detection for transcript segments."""

from __future__ import annotations

import re

from podcast_advisor.ingestion.models import TranscriptSegment

# Phrases that mark a segment as a sponsor read. Any hit excludes the whole
# segment; missed ads are acceptable.
AD_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"this episode is brought to you by", re.IGNORECASE),
    re.compile(r"let me tell you about", re.IGNORECASE),
    re.compile(r"our sponsor", re.IGNORECASE),
    re.compile(r"sidebar\.com", re.IGNORECASE),
    re.compile(r"useanvil\.com", re.IGNORECASE),
    re.compile(r"sponsored by", re.IGNORECASE),
]


def is_ad_segment(segment: TranscriptSegment) -> bool:
    """Return True if the segment text matches any sponsor-read pattern."""
    return any(p.search(segment.text) for p in AD_PATTERNS)
