"""Tests for Settings defaults and environment overrides."""

from __future__ import annotations

import pytest

from podcast_advisor.config import Settings, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.ingest_model == "claude-haiku-4-5-20251001"
        assert cfg.extraction_max_tokens == 500
        assert cfg.chunk_target_words == 500
        assert cfg.chunk_max_words == 800
        assert cfg.request_delay_seconds == 0.1
        assert cfg.index_path == "data/advice-index.json"
        assert cfg.transcripts_dir == "transcripts"

    def test_ingest_model_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INGEST_MODEL", "claude-sonnet-4-5-20250929")
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.ingest_model == "claude-sonnet-4-5-20250929"

    def test_numeric_env_values_are_validated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHUNK_MAX_WORDS", "1200")
        cfg = Settings(_env_file=None)  # type: ignore[call-arg]
        assert cfg.chunk_max_words == 1200

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
