"""
Observability hook for the recommendation orchestrators.
"""

from typing import Optional, Sequence

from loguru import logger

from shared.models import MatchResult, SimilarityResult


class RecommendationObserver:
    """Receives recommendation events. All methods are no-ops by default."""

    def profile_missing(self, candidate_id: str) -> None:
        pass

    def candidates_loaded(
        self, candidate_id: str, applied_count: int, job_count: int
    ) -> None:
        pass

    def ranked(self, candidate_id: str, results: Sequence[MatchResult]) -> None:
        pass

    def similar_ranked(self, job_id: str, results: Sequence[SimilarityResult]) -> None:
        pass

    def read_failed(self, operation: str, error: BaseException) -> None:
        pass


class LoggingObserver(RecommendationObserver):
    """Forwards recommendation events to loguru at DEBUG level."""

    def profile_missing(self, candidate_id: str) -> None:
        logger.debug(f"No profile found for candidate {candidate_id}")

    def candidates_loaded(
        self, candidate_id: str, applied_count: int, job_count: int
    ) -> None:
        logger.debug(
            f"Candidate {candidate_id}: {applied_count} applications excluded, "
            f"{job_count} active jobs to score"
        )

    def ranked(self, candidate_id: str, results: Sequence[MatchResult]) -> None:
        logger.debug(
            f"Returning {len(results)} recommendations for {candidate_id}: "
            f"{[(r.title, r.match_score) for r in results]}"
        )

    def similar_ranked(self, job_id: str, results: Sequence[SimilarityResult]) -> None:
        logger.debug(
            f"Returning {len(results)} similar jobs for {job_id}: "
            f"{[(r.title, r.similarity_score) for r in results]}"
        )

    def read_failed(self, operation: str, error: BaseException) -> None:
        logger.debug(f"{operation} read failed: {error}")


def notify(observer: Optional[RecommendationObserver], event: str, *args) -> None:
    """Call an observer method, logging and ignoring anything it raises."""
    if observer is None:
        return
    try:
        getattr(observer, event)(*args)
    except Exception as e:
        logger.warning(f"Observer {type(observer).__name__}.{event} failed: {e}")
