"""FastAPI application for PeerReview."""

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from peerreview import __version__
from peerreview.api.responses import register_exception_handlers
from peerreview.api.routers import common, papers, reviews, users
from peerreview.api.state import build_state
from peerreview.config import Settings
from peerreview.database.repository import Database

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    """Build the application around an explicit settings object and database.

    ``uvicorn --factory peerreview.api.app:create_app`` calls this with no
    arguments, which loads the singleton settings from disk.
    """
    settings = settings or Settings.load()

    app = FastAPI(
        title="PeerReview",
        version=__version__,
    )
    app.state.ctx = build_state(settings, db)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        # 500 unless a response comes back
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method, request.url.path, status_code, elapsed_ms,
            )

    register_exception_handlers(app)

    app.include_router(common.router)
    app.include_router(users.router)
    app.include_router(papers.router)
    app.include_router(reviews.router)

    logger.info("PeerReview %s ready (db=%s, env=%s)", __version__, settings.db_path, settings.environment)
    return app
