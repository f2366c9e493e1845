"""JSON file storage for the advice index."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from podcast_advisor.errors import IndexLoadError
from podcast_advisor.ingestion.models import AdviceIndex, AdviceRecord

logger = logging.getLogger(__name__)


def _utc_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def save_index(
    path: str | Path,
    records: list[AdviceRecord],
    transcript_count: int,
    generated_at: str | None = None,
) -> AdviceIndex:
    """Write the complete index, replacing any previous file atomically.

    The document is written to a temporary file next to *path* and moved
    over it with :func:`os.replace`, so a reader never sees a partial file.

    Args:
        path: Destination JSON file.
        records: Every advice record to persist (existing and new).
        transcript_count: Number of transcripts processed so far.
        generated_at: ISO timestamp; defaults to now (UTC).

    Returns:
        The :class:`AdviceIndex` that was written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    index = AdviceIndex(
        generated_at=generated_at or _utc_now(),
        transcript_count=transcript_count,
        chunks=list(records),
    )

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(index.to_dict(), f, indent=2, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    return index


def load_index(path: str | Path) -> AdviceIndex:
    """Load an index strictly.

    Raises:
        IndexLoadError: If the file is missing, unreadable, or not a valid index.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return AdviceIndex.from_dict(data)
    except FileNotFoundError as exc:
        raise IndexLoadError(f"Advice index not found: {path}", [str(path)]) from exc
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as exc:
        raise IndexLoadError(f"Advice index unreadable: {path} ({exc})", [str(path)]) from exc


def load_existing_index(path: str | Path) -> AdviceIndex | None:
    """Load a previous run's index for resuming, or None if there is nothing usable."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        index = load_index(path)
    except IndexLoadError:
        logger.exception("Ignoring unreadable index at %s; starting fresh", path)
        return None

    logger.info(
        "Resuming: found %d existing chunks from %d guests",
        len(index.chunks),
        len(index.guests),
    )
    return index


def resolve_index_path(candidates: Iterable[str | Path]) -> Path:
    """Return the first existing path among *candidates*.

    Raises:
        IndexLoadError: Naming every attempted path when none exists.
    """
    tried: list[str] = []
    for candidate in candidates:
        path = Path(candidate)
        tried.append(str(path))
        if path.is_file():
            return path
    raise IndexLoadError(f"Advice index not found. Tried: {', '.join(tried)}", tried)
