"""
MongoDB database connection and read operations using Motor (async driver).

The collections are owned by the job portal; this service only reads them.
"""

from typing import Any, Iterable, Optional

from bson import ObjectId
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, IndexModel

from .config import Settings, get_settings
from .models import ApplicationRecord, JobStatus

PROFILES = "studentprofiles"
APPLICATIONS = "applications"
JOBS = "jobs"


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Convert an id string to ObjectId, None if it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if value is None or not ObjectId.is_valid(str(value)):
        return None
    return ObjectId(str(value))


def _object_ids(values: Iterable[Any]) -> list[ObjectId]:
    ids = (to_object_id(v) for v in values)
    return [i for i in ids if i is not None]


class Database:
    """Async MongoDB database wrapper."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Establish database connection."""
        if self._client is not None:
            return

        logger.info(f"Connecting to MongoDB: {self.settings.mongodb_database}")
        self._client = AsyncIOMotorClient(self.settings.mongodb_uri)
        self._db = self._client[self.settings.mongodb_database]

        # Verify connection
        await self._client.admin.command("ping")
        logger.info("MongoDB connection established")

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._client:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("MongoDB connection closed")

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get database instance."""
        if self._db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._db

    # -------------------------------------------------------------------------
    # Profiles Collection
    # -------------------------------------------------------------------------

    async def get_student_profile(self, user_id: str) -> Optional[dict[str, Any]]:
        """Get a student profile by owning user ID."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await self.db[PROFILES].find_one({"userId": oid})

    # -------------------------------------------------------------------------
    # Applications Collection
    # -------------------------------------------------------------------------

    async def get_applied_job_ids(self, student_id: str) -> list[str]:
        """Get IDs of all jobs a student has applied to."""
        oid = to_object_id(student_id)
        if oid is None:
            return []

        cursor = self.db[APPLICATIONS].find({"studentId": oid}, {"jobId": 1, "studentId": 1})
        records = [
            ApplicationRecord.model_validate(doc) async for doc in cursor if doc.get("jobId")
        ]
        return [r.job_id for r in records]

    # -------------------------------------------------------------------------
    # Jobs Collection
    # -------------------------------------------------------------------------

    async def get_job(self, job_id: str) -> Optional[dict[str, Any]]:
        """Get job by ID."""
        oid = to_object_id(job_id)
        if oid is None:
            return None
        return await self.db[JOBS].find_one({"_id": oid})

    async def find_active_jobs(
        self, exclude_ids: Iterable[str], limit: int
    ) -> list[dict[str, Any]]:
        """Get newest active jobs, skipping the excluded IDs."""
        query = {
            "status": JobStatus.ACTIVE.value,
            "_id": {"$nin": _object_ids(exclude_ids)},
        }
        cursor = self.db[JOBS].find(query).sort("createdAt", DESCENDING).limit(limit)
        return await cursor.to_list(length=limit)

    async def find_related_jobs(
        self,
        skills: list[str],
        job_type: str,
        location: str,
        exclude_id: str,
        limit: int,
    ) -> list[dict[str, Any]]:
        """
        Get active jobs sharing a skill, the job type or the exact location.
        """
        query: dict[str, Any] = {
            "status": JobStatus.ACTIVE.value,
            "$or": [
                {"skills": {"$in": skills}},
                {"jobType": job_type},
                {"location": location},
            ],
        }
        oid = to_object_id(exclude_id)
        if oid is not None:
            query["_id"] = {"$ne": oid}

        cursor = self.db[JOBS].find(query).limit(limit)
        return await cursor.to_list(length=limit)

    # -------------------------------------------------------------------------
    # Index Setup
    # -------------------------------------------------------------------------

    async def ensure_indexes(self) -> None:
        """Create the indexes the recommendation queries rely on."""
        job_indexes = [
            IndexModel([("status", ASCENDING)]),
            IndexModel([("skills", ASCENDING)]),
            IndexModel([("jobType", ASCENDING)]),
            IndexModel([("location", ASCENDING)]),
            IndexModel([("createdAt", DESCENDING)]),
        ]
        await self.db[JOBS].create_indexes(job_indexes)

        await self.db[APPLICATIONS].create_indexes(
            [IndexModel([("studentId", ASCENDING)])]
        )
        await self.db[PROFILES].create_indexes(
            [IndexModel([("userId", ASCENDING)])]
        )

        logger.info("Database indexes created")

