"""Tests for the MongoDB database wrapper and store, using fake collections."""

from datetime import datetime

import pytest
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import ServerSelectionTimeoutError

from recommender.store import MongoRecommendationStore
from shared.database import APPLICATIONS, JOBS, PROFILES, Database, to_object_id
from shared.errors import CollaboratorError

STUDENT = ObjectId()
JOB_A = ObjectId()
JOB_B = ObjectId()


class FakeCursor:
    def __init__(self, docs):
        self.docs = list(docs)
        self.sorted_by = None
        self.limited_to = None

    def sort(self, key, direction):
        self.sorted_by = (key, direction)
        return self

    def limit(self, n):
        self.limited_to = n
        self.docs = self.docs[:n]
        return self

    async def to_list(self, length):
        return self.docs[:length]

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self.docs:
            yield doc


class FakeCollection:
    """Records queries and returns canned documents."""

    def __init__(self, docs=(), error=None):
        self.docs = list(docs)
        self.error = error
        self.queries = []
        self.cursors = []
        self.indexes = []

    def find(self, query, projection=None):
        if self.error:
            raise self.error
        self.queries.append(query)
        cursor = FakeCursor(self.docs)
        self.cursors.append(cursor)
        return cursor

    async def create_indexes(self, models):
        self.indexes.extend(models)

    async def find_one(self, query):
        if self.error:
            raise self.error
        self.queries.append(query)
        return self.docs[0] if self.docs else None


def connected(settings, **collections):
    db = Database(settings)
    db._db = {
        PROFILES: collections.get("profiles", FakeCollection()),
        APPLICATIONS: collections.get("applications", FakeCollection()),
        JOBS: collections.get("jobs", FakeCollection()),
    }
    return db


def job_doc(oid, **overrides):
    doc = {
        "_id": oid,
        "title": "Backend Developer",
        "company": "Acme",
        "skills": ["Python", "MongoDB"],
        "location": "Pune",
        "jobType": "Full-time",
        "salary": "60k-80k",
        "status": "Active",
        "postedBy": ObjectId(),
        "applicationCount": 3,
        "createdAt": datetime(2024, 3, 1),
    }
    doc.update(overrides)
    return doc


class TestToObjectId:
    def test_valid_string(self):
        assert to_object_id(str(JOB_A)) == JOB_A

    def test_object_id_passthrough(self):
        assert to_object_id(JOB_A) is JOB_A

    @pytest.mark.parametrize("value", [None, "", "not-an-id", "123"])
    def test_invalid(self, value):
        assert to_object_id(value) is None


class TestDatabaseQueries:
    def test_requires_connection(self, settings):
        with pytest.raises(RuntimeError):
            Database(settings).db

    async def test_profile_looked_up_by_user_id(self, settings):
        profiles = FakeCollection([{"userId": STUDENT, "skills": ["Python"]}])
        db = connected(settings, profiles=profiles)

        doc = await db.get_student_profile(str(STUDENT))

        assert doc["skills"] == ["Python"]
        assert profiles.queries == [{"userId": STUDENT}]

    async def test_invalid_profile_id_skips_query(self, settings):
        profiles = FakeCollection([{"userId": STUDENT}])
        db = connected(settings, profiles=profiles)

        assert await db.get_student_profile("bogus") is None
        assert profiles.queries == []

    async def test_applied_job_ids_are_strings(self, settings):
        applications = FakeCollection(
            [{"jobId": JOB_A, "studentId": STUDENT},
             {"jobId": JOB_B, "studentId": STUDENT},
             {"jobId": None, "studentId": STUDENT}]
        )
        db = connected(settings, applications=applications)

        ids = await db.get_applied_job_ids(str(STUDENT))

        assert ids == [str(JOB_A), str(JOB_B)]
        assert applications.queries == [{"studentId": STUDENT}]

    async def test_active_jobs_query(self, settings):
        jobs = FakeCollection([job_doc(JOB_B)])
        db = connected(settings, jobs=jobs)

        await db.find_active_jobs([str(JOB_A), "bogus"], 50)

        assert jobs.queries == [{"status": "Active", "_id": {"$nin": [JOB_A]}}]
        assert jobs.cursors[0].sorted_by == ("createdAt", DESCENDING)
        assert jobs.cursors[0].limited_to == 50

    async def test_related_jobs_query(self, settings):
        jobs = FakeCollection()
        db = connected(settings, jobs=jobs)

        await db.find_related_jobs(
            skills=["python"], job_type="Contract", location="Pune",
            exclude_id=str(JOB_A), limit=10,
        )

        assert jobs.queries == [
            {
                "status": "Active",
                "$or": [
                    {"skills": {"$in": ["python"]}},
                    {"jobType": "Contract"},
                    {"location": "Pune"},
                ],
                "_id": {"$ne": JOB_A},
            }
        ]
        assert jobs.cursors[0].limited_to == 10

    async def test_indexes_on_portal_collections_are_not_unique(self, settings):
        profiles, applications, jobs = FakeCollection(), FakeCollection(), FakeCollection()
        db = connected(settings, profiles=profiles, applications=applications, jobs=jobs)

        await db.ensure_indexes()

        assert [dict(m.document["key"]) for m in profiles.indexes] == [{"userId": 1}]
        assert [dict(m.document["key"]) for m in applications.indexes] == [{"studentId": 1}]
        assert len(jobs.indexes) == 5
        for model in profiles.indexes + applications.indexes + jobs.indexes:
            assert not model.document.get("unique")


class TestMongoRecommendationStore:
    async def test_profile_conversion(self, settings):
        profiles = FakeCollection([
            {
                "_id": ObjectId(),
                "userId": STUDENT,
                "skills": ["Python", "python", "React"],
                "city": "Pune",
                "preferences": {"preferredJobType": "internship", "expectedSalary": 40000},
                "phoneNumber": "9999999999",
            }
        ])
        store = MongoRecommendationStore(connected(settings, profiles=profiles))

        profile = await store.get_profile(str(STUDENT))

        assert profile.user_id == str(STUDENT)
        assert profile.skills == ["Python", "React"]
        assert profile.preferences.preferred_job_type == "Internship"
        assert profile.preferences.expected_salary == 40000
        assert profile.phone_number == "9999999999"

    async def test_missing_profile(self, settings):
        store = MongoRecommendationStore(connected(settings))
        assert await store.get_profile(str(STUDENT)) is None

    async def test_malformed_profile_is_a_storage_error(self, settings):
        profiles = FakeCollection([{"userId": STUDENT, "preferences": {"expectedSalary": -5}}])
        store = MongoRecommendationStore(connected(settings, profiles=profiles))

        with pytest.raises(CollaboratorError) as exc_info:
            await store.get_profile(str(STUDENT))
        assert exc_info.value.operation == "get_profile"

    async def test_job_conversion(self, settings):
        jobs = FakeCollection([job_doc(JOB_A)])
        store = MongoRecommendationStore(connected(settings, jobs=jobs))

        job = await store.get_job(str(JOB_A))

        assert job.id == str(JOB_A)
        assert job.job_type == "Full-time"
        assert job.status == "Active"
        assert job.application_count == 3
        assert isinstance(job.posted_by, str)
        assert job.created_at == datetime(2024, 3, 1)

    async def test_malformed_jobs_are_skipped(self, settings):
        jobs = FakeCollection([
            job_doc(JOB_A),
            job_doc(JOB_B, title=None),
            job_doc(ObjectId(), jobType="Gig"),
        ])
        store = MongoRecommendationStore(connected(settings, jobs=jobs))

        result = await store.query_active_jobs(set(), 50)

        assert [j.id for j in result] == [str(JOB_A)]

    async def test_application_ids_as_set(self, settings):
        applications = FakeCollection(
            [{"jobId": JOB_A, "studentId": STUDENT}, {"jobId": JOB_A, "studentId": STUDENT}]
        )
        store = MongoRecommendationStore(connected(settings, applications=applications))

        assert await store.get_application_job_ids(str(STUDENT)) == {str(JOB_A)}

    async def test_related_jobs_use_target_fields(self, settings):
        jobs = FakeCollection([job_doc(JOB_B)])
        store = MongoRecommendationStore(connected(settings, jobs=jobs))
        target = await MongoRecommendationStore(
            connected(settings, jobs=FakeCollection([job_doc(JOB_A)]))
        ).get_job(str(JOB_A))

        related = await store.query_related_jobs(target, str(JOB_A), 10)

        assert [j.id for j in related] == [str(JOB_B)]
        assert jobs.queries[0]["$or"][0] == {"skills": {"$in": ["Python", "MongoDB"]}}

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.get_profile(str(STUDENT)),
            lambda s: s.get_application_job_ids(str(STUDENT)),
            lambda s: s.query_active_jobs(set(), 10),
            lambda s: s.get_job(str(JOB_A)),
        ],
        ids=["get_profile", "get_application_job_ids", "query_active_jobs", "get_job"],
    )
    async def test_driver_errors_are_wrapped(self, settings, call):
        error = ServerSelectionTimeoutError("no servers")
        failing = FakeCollection(error=error)
        store = MongoRecommendationStore(
            connected(settings, profiles=failing, applications=failing, jobs=failing)
        )

        with pytest.raises(CollaboratorError) as exc_info:
            await call(store)
        assert exc_info.value.cause is error
