"""Compare advice extraction across Claude models on one sample chunk."""

import argparse
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from anthropic import Anthropic

from podcast_advisor.config import settings
from podcast_advisor.extraction.extractor import build_prompt, response_text
from podcast_advisor.ingestion.chunking import chunk_segments
from podcast_advisor.ingestion.parsers import parse_transcript
from podcast_advisor.ingestion.pipeline import list_transcript_files

MODELS = [
    ("claude-haiku-4-5-20251001", "Haiku 4.5", "$1/$5"),
    ("claude-sonnet-4-5-20250929", "Sonnet 4.5", "$3/$15"),
]


def sample_chunk(transcripts_dir: str) -> tuple[str, str]:
    """Return ``(chunk_text, guest)`` from the middle of the first transcript."""
    path = list_transcript_files(transcripts_dir)[0]
    guest = path.stem
    chunks = chunk_segments(parse_transcript(path.read_text(encoding="utf-8")), guest)
    if not chunks:
        raise SystemExit(f"No chunks produced from {path}")
    # Skip the intro when possible
    return chunks[len(chunks) // 2].text, guest


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--transcripts-dir", default=settings.transcripts_dir)
    args = parser.parse_args()

    chunk, guest = sample_chunk(args.transcripts_dir)
    prompt = build_prompt(chunk, guest, guest)
    client = Anthropic(api_key=settings.anthropic_api_key or None)

    print("=" * 60)
    print(f"Sample from: {guest} ({len(chunk.split())} words)")
    print("=" * 60)

    for model_id, name, cost in MODELS:
        print("-" * 60)
        print(f"{name} ({cost})")
        print("-" * 60)

        start = time.perf_counter()
        response = client.messages.create(
            model=model_id,
            max_tokens=settings.extraction_max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        elapsed_ms = (time.perf_counter() - start) * 1000

        print(f"Time: {elapsed_ms:.0f}ms")
        print(f"Tokens: {response.usage.input_tokens} in / {response.usage.output_tokens} out")
        print(f"\nExtraction:\n{response_text(response)}\n")


if __name__ == "__main__":
    main()
