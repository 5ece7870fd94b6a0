"""
Similar jobs finder - "you might also like" for a job posting.
"""

import asyncio
from typing import Any, Optional

from loguru import logger

from shared.config import Settings, SimilarityWeights, get_settings
from shared.errors import ReadTimeoutError
from shared.models import JobPosting, JobStatus, SimilarityResult

from .observer import LoggingObserver, RecommendationObserver, notify
from .ranking import clamp_limit, rank_key
from .similarity import DEFAULT_SIMILARITY_WEIGHTS, calculate_similarity
from .store import RecommendationStore


class SimilarJobsFinder:
    """Ranks active jobs by similarity to a target job. Never raises."""

    def __init__(
        self,
        store: RecommendationStore,
        settings: Optional[Settings] = None,
        weights: Optional[SimilarityWeights] = None,
        observer: Optional[RecommendationObserver] = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.weights = weights or DEFAULT_SIMILARITY_WEIGHTS
        self.observer = observer if observer is not None else LoggingObserver()

    async def _load(
        self, job_id: str, cap: int
    ) -> Optional[tuple[JobPosting, list[JobPosting]]]:
        target = await self.store.get_job(job_id)
        if target is None:
            return None
        related = await self.store.query_related_jobs(target, job_id, cap)
        return target, related

    async def similar_to(self, job_id: str, limit: Any = None) -> list[SimilarityResult]:
        """
        Get jobs similar to a given job.

        Fetches twice the limit of loosely related jobs (shared skill, same
        job type or same location), scores them and keeps the best.
        """
        limit = clamp_limit(
            limit,
            self.settings.similar_default_limit,
            self.settings.similar_max_limit,
        )
        timeout = self.settings.read_timeout_seconds

        try:
            loaded = await asyncio.wait_for(
                self._load(job_id, limit * 2), timeout=timeout
            )
        except asyncio.TimeoutError:
            error = ReadTimeoutError("similar_to", timeout)
            logger.error(f"Similar jobs for {job_id} failed: {error}")
            notify(self.observer, "read_failed", "similar_to", error)
            return []
        except Exception as e:
            logger.error(f"Similar jobs for {job_id} failed: {e}")
            notify(self.observer, "read_failed", "similar_to", e)
            return []

        if loaded is None:
            logger.debug(f"Job {job_id} not found")
            return []

        target, related = loaded
        results = [
            SimilarityResult.model_validate(
                {
                    **job.model_dump(),
                    "similarity_score": calculate_similarity(target, job, self.weights),
                }
            )
            for job in related[: limit * 2]
            if job.id != target.id and job.id != job_id
            and job.status == JobStatus.ACTIVE.value
        ]
        results.sort(key=lambda r: rank_key(r.similarity_score, r))
        results = results[:limit]

        notify(self.observer, "similar_ranked", job_id, results)
        return results
