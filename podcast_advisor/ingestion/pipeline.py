"""End-to-end ingestion: parse -> chunk -> extract -> checkpoint, resumable per transcript."""

from __future__ import annotations

import logging
import re
import time
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from anthropic import Anthropic

from podcast_advisor.config import Settings, get_settings
from podcast_advisor.errors import TranscriptDirectoryError
from podcast_advisor.extraction.extractor import extract_advice
from podcast_advisor.ingestion.chunking import chunk_segments
from podcast_advisor.ingestion.models import AdviceRecord
from podcast_advisor.ingestion.parsers import parse_transcript
from podcast_advisor.ingestion.storage import load_existing_index, save_index

logger = logging.getLogger(__name__)

TRANSCRIPT_SUFFIX = ".txt"

# Transcripts used for prototyping runs (--sample)
SAMPLE_TRANSCRIPTS = [
    "Ami Vora.txt",
    "Shreyas Doshi.txt",
    "Lenny Rachitsky.txt",
]
SAMPLE_SIZE = 3


@dataclass
class IngestionSummary:
    """What a corpus run did."""

    candidates: int
    skipped: int
    processed: int
    transcript_count: int
    total_records: int
    new_records: int
    output_path: Path


def make_record_id(guest: str, sequence: int) -> str:
    """Slug the guest name and append the per-transcript chunk sequence number."""
    slug = re.sub(r"\s+", "-", guest.strip().lower())
    return f"{slug}-{sequence}"


def process_transcript(
    path: str | Path,
    client: Anthropic | None = None,
    settings: Settings | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> list[AdviceRecord]:
    """Extract advice records from a single transcript file.

    The file stem is used as both guest and episode name. Chunks are sent to
    the oracle one at a time with a short pause between calls; a chunk whose
    extraction fails or yields no valid topic is skipped.

    Args:
        path: Transcript ``.txt`` file.
        client: Anthropic client shared across calls.
        settings: Settings override (tests); defaults to the cached settings.
        sleep: Pause function between oracle calls.

    Returns:
        Advice records in chunk order.
    """
    settings = settings or get_settings()
    path = Path(path)
    guest = path.stem
    content = path.read_text(encoding="utf-8")

    logger.info("Processing: %s", guest)

    segments = parse_transcript(content)
    logger.info("  Parsed %d segments", len(segments))

    chunks = chunk_segments(
        segments,
        guest,
        target_words=settings.chunk_target_words,
        max_words=settings.chunk_max_words,
    )
    logger.info("  Created %d chunks", len(chunks))

    records: list[AdviceRecord] = []
    for sequence, chunk in enumerate(chunks, 1):
        if sequence > 1 and settings.request_delay_seconds > 0:
            sleep(settings.request_delay_seconds)

        try:
            result = extract_advice(
                chunk.text,
                guest,
                guest,
                client=client,
                model=settings.ingest_model,
                max_tokens=settings.extraction_max_tokens,
            )
        except Exception:
            logger.exception("Extraction failed for %s chunk %d", guest, sequence)
            continue

        if not result.has_advice or result.advice is None:
            logger.debug("  Chunk %d/%d: skip (%s)", sequence, len(chunks), result.status)
            continue
        if not result.advice.topics:
            logger.debug("  Chunk %d/%d: skip (no valid topics)", sequence, len(chunks))
            continue

        records.append(
            AdviceRecord(
                id=make_record_id(guest, sequence),
                guest=guest,
                episode=guest,
                topics=result.advice.topics,
                insight=result.advice.insight,
                quote=result.advice.quote,
                context=result.advice.context,
                timestamp=chunk.timestamp or None,
            )
        )
        logger.info(
            "  Chunk %d/%d: advice [%s]",
            sequence,
            len(chunks),
            ", ".join(result.advice.topics),
        )

    logger.info("  Extracted %d advice chunks", len(records))
    return records


def list_transcript_files(directory: str | Path, sample: bool = False) -> list[Path]:
    """List transcript files in name order.

    Raises:
        TranscriptDirectoryError: If *directory* is missing or has no transcripts.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise TranscriptDirectoryError(f"Transcript directory not found: {directory}")

    files = sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == TRANSCRIPT_SUFFIX)
    if not files:
        raise TranscriptDirectoryError(f"No {TRANSCRIPT_SUFFIX} transcripts found in {directory}")

    if sample:
        preferred = [directory / name for name in SAMPLE_TRANSCRIPTS]
        if all(p.is_file() for p in preferred):
            return preferred
        return files[:SAMPLE_SIZE]
    return files


def ingest_corpus(
    transcripts_dir: str | Path,
    index_path: str | Path,
    sample: bool = False,
    client: Anthropic | None = None,
    settings: Settings | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> IngestionSummary:
    """Process every transcript not yet in the index, checkpointing after each one.

    Guests already present in the index at *index_path* are skipped. After
    each transcript the full record list is rewritten, so an interrupted run
    loses at most the transcript in progress.

    Args:
        transcripts_dir: Directory of ``.txt`` transcripts.
        index_path: Advice index JSON file (read for resume, rewritten per transcript).
        sample: Only consider the small prototyping sample.
        client: Anthropic client; created from settings when omitted.
        settings: Settings override (tests).
        sleep: Pause function between oracle calls.

    Returns:
        An :class:`IngestionSummary` for the run.

    Raises:
        TranscriptDirectoryError: If there are no transcripts to consider.
    """
    settings = settings or get_settings()
    index_path = Path(index_path)
    files = list_transcript_files(transcripts_dir, sample=sample)

    existing = load_existing_index(index_path)
    records: list[AdviceRecord] = list(existing.chunks) if existing else []
    processed_guests = existing.guests if existing else set()
    transcript_count = len(processed_guests)

    remaining = [f for f in files if f.stem not in processed_guests]
    logger.info("Found %d transcripts, %d remaining", len(files), len(remaining))

    if remaining and client is None:
        client = Anthropic(api_key=settings.anthropic_api_key or None)

    new_records = 0
    for path in remaining:
        produced = process_transcript(path, client=client, settings=settings, sleep=sleep)
        records.extend(produced)
        new_records += len(produced)
        transcript_count = len({r.guest for r in records})

        save_index(index_path, records, transcript_count)
        logger.info("  [SAVED] %d/%d transcripts", transcript_count, len(files))

    return IngestionSummary(
        candidates=len(files),
        skipped=len(files) - len(remaining),
        processed=len(remaining),
        transcript_count=transcript_count,
        total_records=len(records),
        new_records=new_records,
        output_path=index_path,
    )


def topic_distribution(records: list[AdviceRecord]) -> list[tuple[str, int]]:
    """Count records per topic, most common first."""
    counts: Counter[str] = Counter(str(t) for r in records for t in r.topics)
    return counts.most_common()
