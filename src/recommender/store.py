"""
Read contracts the recommender needs from storage, and the MongoDB
implementation of them.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from loguru import logger
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from shared.database import Database
from shared.errors import CollaboratorError
from shared.models import CandidateProfile, JobPosting


class RecommendationStore(ABC):
    """
    Read-only view of profiles, applications and jobs.

    Implementations raise CollaboratorError when storage fails and return
    None / empty results when the data simply does not exist.
    """

    @abstractmethod
    async def get_profile(self, candidate_id: str) -> Optional[CandidateProfile]:
        raise NotImplementedError

    @abstractmethod
    async def get_application_job_ids(self, candidate_id: str) -> set[str]:
        raise NotImplementedError

    @abstractmethod
    async def query_active_jobs(self, exclude_ids: set[str], cap: int) -> list[JobPosting]:
        raise NotImplementedError

    @abstractmethod
    async def get_job(self, job_id: str) -> Optional[JobPosting]:
        raise NotImplementedError

    @abstractmethod
    async def query_related_jobs(
        self, target: JobPosting, exclude_id: str, cap: int
    ) -> list[JobPosting]:
        """Active jobs sharing a skill, the job type or the exact location."""
        raise NotImplementedError


def _to_jobs(docs: Iterable[dict[str, Any]]) -> list[JobPosting]:
    jobs = []
    for doc in docs:
        try:
            jobs.append(JobPosting.model_validate(doc))
        except ValidationError as e:
            logger.warning(f"Skipping malformed job {doc.get('_id')}: {e}")
    return jobs


class MongoRecommendationStore(RecommendationStore):
    """RecommendationStore backed by the job portal's MongoDB collections."""

    def __init__(self, db: Database):
        self.db = db

    async def get_profile(self, candidate_id: str) -> Optional[CandidateProfile]:
        try:
            doc = await self.db.get_student_profile(candidate_id)
        except PyMongoError as e:
            raise CollaboratorError("get_profile", e) from e
        if doc is None:
            return None
        try:
            return CandidateProfile.model_validate(doc)
        except ValidationError as e:
            raise CollaboratorError("get_profile", e) from e

    async def get_application_job_ids(self, candidate_id: str) -> set[str]:
        try:
            return set(await self.db.get_applied_job_ids(candidate_id))
        except PyMongoError as e:
            raise CollaboratorError("get_application_job_ids", e) from e

    async def query_active_jobs(self, exclude_ids: set[str], cap: int) -> list[JobPosting]:
        try:
            docs = await self.db.find_active_jobs(exclude_ids, cap)
        except PyMongoError as e:
            raise CollaboratorError("query_active_jobs", e) from e
        return _to_jobs(docs)

    async def get_job(self, job_id: str) -> Optional[JobPosting]:
        try:
            doc = await self.db.get_job(job_id)
        except PyMongoError as e:
            raise CollaboratorError("get_job", e) from e
        if doc is None:
            return None
        jobs = _to_jobs([doc])
        return jobs[0] if jobs else None

    async def query_related_jobs(
        self, target: JobPosting, exclude_id: str, cap: int
    ) -> list[JobPosting]:
        try:
            docs = await self.db.find_related_jobs(
                skills=target.skills,
                job_type=target.job_type,
                location=target.location,
                exclude_id=exclude_id,
                limit=cap,
            )
        except PyMongoError as e:
            raise CollaboratorError("query_related_jobs", e) from e
        return _to_jobs(docs)
