"""
Shared fixtures: an in-memory RecommendationStore and model builders.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional

import pytest

from recommender.store import RecommendationStore
from shared.config import Settings
from shared.errors import CollaboratorError
from shared.models import CandidateProfile, JobPosting

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_job(
    id: str = "job-1",
    title: str = "Software Engineer",
    skills: Optional[list[str]] = None,
    location: str = "Pune",
    job_type: str = "Full-time",
    salary: Optional[str] = None,
    status: str = "Active",
    age_days: Optional[int] = None,
    **extra,
) -> JobPosting:
    """Build a job; age_days sets created_at relative to BASE_TIME."""
    created_at = BASE_TIME - timedelta(days=age_days) if age_days is not None else None
    return JobPosting(
        id=id,
        title=title,
        skills=skills if skills is not None else ["python"],
        location=location,
        job_type=job_type,
        salary=salary,
        status=status,
        created_at=created_at,
        **extra,
    )


def make_profile(
    skills: Optional[list[str]] = None,
    city: Optional[str] = None,
    preferred_job_type: Optional[str] = None,
    expected_salary: float = 0,
    **extra,
) -> CandidateProfile:
    return CandidateProfile(
        skills=skills or [],
        city=city,
        preferences={
            "preferred_job_type": preferred_job_type,
            "expected_salary": expected_salary,
        },
        **extra,
    )


class InMemoryStore(RecommendationStore):
    """RecommendationStore over plain dicts, with failure and delay injection."""

    def __init__(
        self,
        profiles: Optional[dict[str, CandidateProfile]] = None,
        applications: Optional[dict[str, set[str]]] = None,
        jobs: Iterable[JobPosting] = (),
        fail_on: Iterable[str] = (),
        delay: float = 0.0,
    ):
        self.profiles = profiles or {}
        self.applications = applications or {}
        self.jobs = {job.id: job for job in jobs}
        self.fail_on = set(fail_on)
        self.delay = delay
        self.calls: list[tuple] = []

    async def _enter(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if self.delay:
            await asyncio.sleep(self.delay)
        if operation in self.fail_on:
            raise CollaboratorError(operation, RuntimeError("connection reset"))

    async def get_profile(self, candidate_id):
        await self._enter("get_profile", candidate_id)
        return self.profiles.get(candidate_id)

    async def get_application_job_ids(self, candidate_id):
        await self._enter("get_application_job_ids", candidate_id)
        return set(self.applications.get(candidate_id, set()))

    async def query_active_jobs(self, exclude_ids, cap):
        await self._enter("query_active_jobs", frozenset(exclude_ids), cap)
        jobs = [
            job for job in self.jobs.values()
            if job.status == "Active" and job.id not in exclude_ids
        ]
        return jobs[:cap]

    async def get_job(self, job_id):
        await self._enter("get_job", job_id)
        return self.jobs.get(job_id)

    async def query_related_jobs(self, target, exclude_id, cap):
        await self._enter("query_related_jobs", target.id, exclude_id, cap)
        jobs = [
            job for job in self.jobs.values()
            if job.status == "Active"
            and job.id != exclude_id
            and (
                set(job.skills) & set(target.skills)
                or job.job_type == target.job_type
                or job.location == target.location
            )
        ]
        return jobs[:cap]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        read_timeout_seconds=1.0,
        scoring_path=tmp_path / "missing-scoring.yaml",
    )
