from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""

    # Extraction oracle
    ingest_model: str = "claude-haiku-4-5-20251001"
    extraction_max_tokens: int = 500
    request_delay_seconds: float = 0.1

    # Paths
    transcripts_dir: str = "transcripts"
    index_path: str = "data/advice-index.json"

    # Chunking (word counts)
    chunk_target_words: int = 500
    chunk_max_words: int = 800

    # Lookup API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
