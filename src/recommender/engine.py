"""
Recommendation engine - ranks active jobs for a candidate.

Loads the candidate's profile and application history, scores a bounded
set of active jobs they have not applied to, and returns the best matches
with explanations.
"""

import asyncio
from typing import Any, Optional

from loguru import logger

from shared.config import MatchWeights, Settings, get_settings
from shared.errors import ReadTimeoutError
from shared.models import CandidateProfile, JobPosting, JobStatus, MatchResult

from .observer import LoggingObserver, RecommendationObserver, notify
from .profile_analyzer import ProfileInsights, analyze_profile
from .ranking import clamp_limit, rank_key
from .scoring import DEFAULT_MATCH_WEIGHTS, reasons_from_breakdown, score_breakdown
from .store import RecommendationStore


def build_match_result(
    profile: CandidateProfile,
    job: JobPosting,
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> MatchResult:
    """Score a job for a candidate and attach the explanation."""
    breakdown = score_breakdown(profile, job, weights)
    return MatchResult.model_validate(
        {
            **job.model_dump(),
            "match_score": breakdown.total,
            "match_reasons": reasons_from_breakdown(breakdown, job),
        }
    )


class RecommendationEngine:
    """
    Ranks jobs for a candidate.

    Never raises: missing profiles, storage failures and timeouts all
    produce an empty list. Only the newest `recommendation_candidate_cap`
    active jobs are considered, so very large catalogs are not searched
    exhaustively.
    """

    def __init__(
        self,
        store: RecommendationStore,
        settings: Optional[Settings] = None,
        weights: Optional[MatchWeights] = None,
        observer: Optional[RecommendationObserver] = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.weights = weights or DEFAULT_MATCH_WEIGHTS
        self.observer = observer if observer is not None else LoggingObserver()

    async def _load(
        self, candidate_id: str
    ) -> Optional[tuple[CandidateProfile, set[str], list[JobPosting]]]:
        # The job query needs the exclusion set, so these reads stay sequential
        profile = await self.store.get_profile(candidate_id)
        if profile is None:
            return None

        applied_ids = await self.store.get_application_job_ids(candidate_id)
        jobs = await self.store.query_active_jobs(
            applied_ids, self.settings.recommendation_candidate_cap
        )
        return profile, applied_ids, jobs

    async def recommend(
        self, candidate_id: str, limit: Any = None
    ) -> list[MatchResult]:
        """
        Get personalized job recommendations for a candidate.

        Args:
            candidate_id: ID of the candidate (student) user
            limit: Maximum recommendations, clamped to the configured maximum

        Returns:
            Match results sorted by score, newest posting first on ties
        """
        limit = clamp_limit(
            limit,
            self.settings.recommendation_default_limit,
            self.settings.recommendation_max_limit,
        )
        timeout = self.settings.read_timeout_seconds

        try:
            loaded = await asyncio.wait_for(self._load(candidate_id), timeout=timeout)
        except asyncio.TimeoutError:
            error = ReadTimeoutError("recommend", timeout)
            logger.error(f"Recommendations for {candidate_id} failed: {error}")
            notify(self.observer, "read_failed", "recommend", error)
            return []
        except Exception as e:
            logger.error(f"Recommendations for {candidate_id} failed: {e}")
            notify(self.observer, "read_failed", "recommend", e)
            return []

        if loaded is None:
            notify(self.observer, "profile_missing", candidate_id)
            return []

        profile, applied_ids, jobs = loaded
        candidates = [
            job
            for job in jobs[: self.settings.recommendation_candidate_cap]
            if job.status == JobStatus.ACTIVE.value and job.id not in applied_ids
        ]
        notify(self.observer, "candidates_loaded", candidate_id, len(applied_ids), len(candidates))

        results = [build_match_result(profile, job, self.weights) for job in candidates]
        results.sort(key=lambda r: rank_key(r.match_score, r))
        results = results[:limit]

        notify(self.observer, "ranked", candidate_id, results)
        return results

    async def profile_insights(self, candidate_id: str) -> Optional[ProfileInsights]:
        """Completeness and suggestions for a candidate's profile, None if absent."""
        timeout = self.settings.read_timeout_seconds
        try:
            profile = await asyncio.wait_for(
                self.store.get_profile(candidate_id), timeout=timeout
            )
        except asyncio.TimeoutError:
            error = ReadTimeoutError("profile_insights", timeout)
            logger.error(f"Profile insights for {candidate_id} failed: {error}")
            notify(self.observer, "read_failed", "profile_insights", error)
            return None
        except Exception as e:
            logger.error(f"Profile insights for {candidate_id} failed: {e}")
            notify(self.observer, "read_failed", "profile_insights", e)
            return None

        if profile is None:
            notify(self.observer, "profile_missing", candidate_id)
            return None
        return analyze_profile(profile)

    async def refresh(self, candidate_id: str) -> list[MatchResult]:
        """Recompute recommendations. Nothing is cached, so this is recommend()."""
        return await self.recommend(
            candidate_id, self.settings.recommendation_default_limit
        )
