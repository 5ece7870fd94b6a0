"""
Recommendations HTTP API.

Endpoints:
- GET  /api/recommendations/jobs              personalized jobs (candidates)
- GET  /api/recommendations/similar/{job_id}  similar jobs (any caller)
- POST /api/recommendations/refresh           recompute recommendations (candidates)
- GET  /api/recommendations/profile-insights  profile completeness (candidates)
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from loguru import logger

from recommender.engine import RecommendationEngine
from recommender.observer import RecommendationObserver
from recommender.ranking import clamp_limit
from recommender.similar import SimilarJobsFinder
from recommender.store import MongoRecommendationStore, RecommendationStore
from shared.config import Settings, get_settings, load_scoring_weights
from shared.database import Database
from shared.logging import setup_logging
from shared.models import MatchResponse, SimilarityResponse

from .auth import CANDIDATE_ROLE, CurrentUser, get_current_user, require_role

router = APIRouter(prefix="/api/recommendations")


def _error(message: str, error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": message, "error": str(error)},
    )


def get_engine(request: Request) -> RecommendationEngine:
    return request.app.state.engine


def get_finder(request: Request) -> SimilarJobsFinder:
    return request.app.state.finder


@router.get("/jobs", response_model=MatchResponse)
async def recommended_jobs(
    request: Request,
    limit: Optional[str] = Query(default=None),
    user: CurrentUser = Depends(require_role(CANDIDATE_ROLE)),
    engine: RecommendationEngine = Depends(get_engine),
):
    """Personalized job recommendations for the logged-in candidate."""
    settings: Settings = request.app.state.settings
    try:
        limit_n = clamp_limit(
            limit, settings.recommendation_default_limit, settings.recommendation_max_limit
        )
        results = await engine.recommend(user.id, limit_n)
        return MatchResponse(success=True, count=len(results), data=results)
    except Exception as e:
        logger.error(f"Recommendations API error: {e}")
        return _error("Failed to get job recommendations", e)


@router.get("/similar/{job_id}", response_model=SimilarityResponse)
async def similar_jobs(
    request: Request,
    job_id: str,
    limit: Optional[str] = Query(default=None),
    user: CurrentUser = Depends(get_current_user),
    finder: SimilarJobsFinder = Depends(get_finder),
):
    """Jobs similar to the given job."""
    settings: Settings = request.app.state.settings
    try:
        limit_n = clamp_limit(limit, settings.similar_default_limit, settings.similar_max_limit)
        results = await finder.similar_to(job_id, limit_n)
        return SimilarityResponse(success=True, count=len(results), data=results)
    except Exception as e:
        logger.error(f"Similar jobs API error: {e}")
        return _error("Failed to get similar jobs", e)


@router.post("/refresh", response_model=MatchResponse)
async def refresh_recommendations(
    user: CurrentUser = Depends(require_role(CANDIDATE_ROLE)),
    engine: RecommendationEngine = Depends(get_engine),
):
    """Recompute recommendations. There is no cache to clear."""
    try:
        results = await engine.refresh(user.id)
        return MatchResponse(
            success=True,
            message="Recommendations refreshed",
            count=len(results),
            data=results,
        )
    except Exception as e:
        logger.error(f"Refresh recommendations error: {e}")
        return _error("Failed to refresh recommendations", e)


@router.get("/profile-insights")
async def profile_insights(
    user: CurrentUser = Depends(require_role(CANDIDATE_ROLE)),
    engine: RecommendationEngine = Depends(get_engine),
):
    """Profile completeness and suggestions for the logged-in candidate."""
    try:
        insights = await engine.profile_insights(user.id)
        return {"success": True, "data": insights.to_dict() if insights else None}
    except Exception as e:
        logger.error(f"Profile insights API error: {e}")
        return _error("Failed to analyze profile", e)


def _attach_services(
    app: FastAPI,
    store: RecommendationStore,
    settings: Settings,
    observer: Optional[RecommendationObserver],
) -> None:
    match_weights, similarity_weights = load_scoring_weights(settings.scoring_path)
    app.state.store = store
    app.state.engine = RecommendationEngine(
        store, settings=settings, weights=match_weights, observer=observer
    )
    app.state.finder = SimilarJobsFinder(
        store, settings=settings, weights=similarity_weights, observer=observer
    )


def create_app(
    store: Optional[RecommendationStore] = None,
    settings: Optional[Settings] = None,
    observer: Optional[RecommendationObserver] = None,
) -> FastAPI:
    """
    Build the API.

    Without a store, the app connects to MongoDB on startup and
    disconnects on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db: Optional[Database] = None
        if store is None:
            setup_logging(settings)
            db = Database(settings)
            await db.connect()
            _attach_services(app, MongoRecommendationStore(db), settings, observer)
        try:
            yield
        finally:
            if db is not None:
                await db.disconnect()

    app = FastAPI(title="Job Recommendations API", lifespan=lifespan)
    app.state.settings = settings
    if store is not None:
        _attach_services(app, store, settings, observer)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(router)
    return app
