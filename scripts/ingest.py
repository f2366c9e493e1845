"""Extract advice from podcast transcripts into the advice index.

Usage::

    python scripts/ingest.py --sample   # 3 prototyping transcripts
    python scripts/ingest.py            # every transcript (resumable)
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from podcast_advisor.config import get_settings
from podcast_advisor.errors import TranscriptDirectoryError
from podcast_advisor.ingestion.pipeline import ingest_corpus, topic_distribution
from podcast_advisor.ingestion.storage import load_index


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--sample", action="store_true", help="Process the 3-transcript sample")
    parser.add_argument("--transcripts-dir", default=settings.transcripts_dir)
    parser.add_argument("--output", default=settings.index_path)
    parser.add_argument("--model", default=None, help="Override INGEST_MODEL")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )
    if args.model:
        settings = settings.model_copy(update={"ingest_model": args.model})

    print("=" * 60)
    print("Podcast Advice Ingestion")
    print("=" * 60)
    print(f"Using model: {settings.ingest_model}")
    print("Mode: SAMPLE (3 transcripts)" if args.sample else "Mode: ALL transcripts")

    try:
        summary = ingest_corpus(
            args.transcripts_dir,
            args.output,
            sample=args.sample,
            settings=settings,
        )
    except TranscriptDirectoryError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print("\n" + "=" * 60)
    print("Ingestion Complete")
    print("=" * 60)
    print(f"Transcripts considered: {summary.candidates} ({summary.skipped} already done)")
    print(f"Transcripts processed: {summary.transcript_count}")
    print(f"Total advice chunks: {summary.total_records} ({summary.new_records} new)")
    print(f"Output: {summary.output_path}")

    if summary.output_path.exists():
        print("\nTopic distribution:")
        for topic, count in topic_distribution(load_index(summary.output_path).chunks):
            print(f"  {topic}: {count}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
