"""Exceptions raised for fatal ingestion and lookup conditions."""

from __future__ import annotations


class PodcastAdvisorError(Exception):
    """Base class for podcast advisor errors."""


class IndexLoadError(PodcastAdvisorError):
    """The advice index could not be found, read, or decoded."""

    def __init__(self, message: str, paths: list[str] | None = None) -> None:
        super().__init__(message)
        self.paths = paths or []


class TranscriptDirectoryError(PodcastAdvisorError):
    """The transcript directory is missing or holds no transcripts."""
