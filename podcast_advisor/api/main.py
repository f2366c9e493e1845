"""FastAPI app exposing advice lookup over a load-once index.

Run with::

    uvicorn podcast_advisor.api.main:app

or ``python -m podcast_advisor.api.main``. The app refuses to start when no
advice index can be found.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from podcast_advisor.api.routes.advice import router as advice_router
from podcast_advisor.config import settings
from podcast_advisor.errors import IndexLoadError
from podcast_advisor.ingestion.storage import load_index, resolve_index_path
from podcast_advisor.retrieval.search import AdviceSearch

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def index_candidates(index_path: str | Path | None = None) -> list[Path]:
    """Locations searched for the advice index, in priority order."""
    if index_path is not None:
        return [Path(index_path)]
    configured = Path(settings.index_path)
    candidates = [configured]
    if not configured.is_absolute():
        candidates.append(_PROJECT_ROOT / configured)
    return candidates


def load_search(index_path: str | Path | None = None) -> AdviceSearch:
    """Resolve, load, and index the advice file.

    Raises:
        IndexLoadError: If no candidate exists or the file cannot be read.
    """
    path = resolve_index_path(index_candidates(index_path))
    search = AdviceSearch(load_index(path))
    logger.info("Loaded %d advice chunks from %s", search.get_stats().total_chunks, path)
    return search


def create_app(index_path: str | Path | None = None) -> FastAPI:
    """Build the API; the index is loaded once when the app starts."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.search = load_search(index_path)
        yield

    app = FastAPI(
        title="Podcast Advisor API",
        description="Topic search over advice extracted from podcast transcripts",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(advice_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        # Fail before binding the port when there is no usable index.
        load_search()
    except IndexLoadError as exc:
        print(f"Failed to load advice index: {exc}", file=sys.stderr)
        sys.exit(1)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
