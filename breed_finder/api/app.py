"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from breed_finder.config import get_config
from breed_finder.data.loader import load_breed_table
from breed_finder.matching.matcher import BreedMatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the breed matcher on startup unless one was provided.

    ``create_app`` may be handed a ready matcher; otherwise the breed
    table is loaded from ``config.data_path``.
    """
    config = app.state.config

    if getattr(app.state, "matcher", None) is None:
        table = load_breed_table(config.data_path)
        app.state.matcher = BreedMatcher.from_records(table, default_k=config.default_k)

    logger.info("Serving %d breeds", app.state.matcher.population_size)
    yield


def create_app(matcher: BreedMatcher | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        matcher: Prebuilt matcher. Built from the configured CSV at
            startup when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Breed Finder",
        description="Find similar dog breeds by example or by trait preferences",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = get_config()
    app.state.matcher = matcher

    from breed_finder.api.routes import register_error_handlers, router

    register_error_handlers(app)
    app.include_router(router)

    return app
