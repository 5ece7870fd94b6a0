"""
Ordering and limit helpers shared by the orchestrators.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.models import JobPosting


def _timestamp(created_at: Optional[datetime]) -> float:
    if created_at is None:
        return float("-inf")
    if created_at.tzinfo is None:
        # Mongo returns naive UTC datetimes
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.timestamp()


def rank_key(score: int, job: JobPosting) -> tuple[int, float, str]:
    """
    Sort key: score descending, newest posting first, then job id.

    Postings without a creation time sort after dated ones with the same score.
    """
    return (-score, -_timestamp(job.created_at), job.id)


def clamp_limit(value: Any, default: int, maximum: int) -> int:
    """
    Coerce a caller-supplied limit into [1, maximum].

    Missing or non-numeric values give the default.
    """
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    return max(1, min(limit, maximum))
