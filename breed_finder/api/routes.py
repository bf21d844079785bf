"""FastAPI routes for breed matching, stats and health check."""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from breed_finder.data.schemas import (
    FEATURE_NAMES,
    FeatureStats,
    MatchResponse,
    PreferenceRequest,
    StatsResponse,
)
from breed_finder.errors import (
    BreedFinderError,
    BreedNotFoundError,
    DataError,
    DegenerateFeatureError,
    InvalidKError,
    InvalidPreferenceError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_STATUS: dict[type[BreedFinderError], int] = {
    BreedNotFoundError: 404,
    InvalidKError: 422,
    InvalidPreferenceError: 422,
    DataError: 500,
    DegenerateFeatureError: 500,
}


async def _breed_finder_error_handler(
    request: Request, exc: BreedFinderError
) -> JSONResponse:
    status_code = _ERROR_STATUS.get(type(exc), 400)
    if status_code < 500:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    else:
        logger.error("Dataset error on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Map breed finder errors to JSON error responses on ``app``."""
    app.add_exception_handler(BreedFinderError, _breed_finder_error_handler)


def _resolve_k(request: Request, k: int | None) -> int | None:
    """Apply the configured upper bound to a requested k."""
    config = request.app.state.config
    if k is not None and k > config.max_k:
        raise InvalidKError(k, 1, config.max_k)
    return k


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Health check endpoint for monitoring.

    Returns:
        Dict with status and the number of breeds available.
    """
    matcher = request.app.state.matcher
    return {"status": "healthy", "breeds": matcher.population_size}


@router.get("/api/breeds")
async def list_breeds(request: Request) -> list[str]:
    """Breed names available for by-example matching, in population order."""
    return request.app.state.matcher.session.breed_names


@router.get("/api/stats", response_model=StatsResponse)
async def normalization_stats(request: Request) -> StatsResponse:
    """Fitted per-feature mean and standard deviation."""
    session = request.app.state.matcher.session
    stats = session.stats
    return StatsResponse(
        population_size=session.population_size,
        features=[
            FeatureStats(feature=name, mean=mean, std=std)
            for name, mean, std in zip(FEATURE_NAMES, stats.means, stats.stds, strict=True)
        ],
    )


@router.get("/api/similar", response_model=MatchResponse)
async def similar_breeds(
    request: Request, breed: str, k: int | None = None
) -> MatchResponse:
    """Breeds most similar to an existing breed.

    Args:
        request: FastAPI request object.
        breed: Exact breed name.
        k: Number of similar breeds to return.

    Returns:
        MatchResponse as JSON.
    """
    matcher = request.app.state.matcher
    return matcher.find_similar(breed, k=_resolve_k(request, k))


@router.post("/api/match", response_model=MatchResponse)
async def match_preferences(
    request: Request, preferences: PreferenceRequest
) -> MatchResponse:
    """Breeds closest to the submitted trait preferences.

    Args:
        request: FastAPI request object.
        preferences: Raw trait values and optional k.

    Returns:
        MatchResponse as JSON.
    """
    matcher = request.app.state.matcher
    preferences = preferences.model_copy(
        update={"k": _resolve_k(request, preferences.k)}
    )
    return matcher.find_by_preferences(preferences)
