"""Tests for the similar jobs finder."""

import pytest

from recommender.similar import SimilarJobsFinder
from shared.errors import CollaboratorError

from conftest import InMemoryStore, make_job


class LeakyStore(InMemoryStore):
    """Returns every job, including the target and closed postings."""

    async def query_related_jobs(self, target, exclude_id, cap):
        await self._enter("query_related_jobs", target.id, exclude_id, cap)
        return list(self.jobs.values())


@pytest.fixture
def target():
    return make_job(id="t", skills=["python", "django"], location="Pune")


def finder_for(store, settings):
    return SimilarJobsFinder(store, settings=settings)


async def test_ranks_related_jobs(settings, target):
    store = InMemoryStore(
        jobs=[
            target,
            make_job(id="close", skills=["python", "flask"], location="Pune"),
            make_job(id="twin", skills=["python", "django"], location="Pune"),
            make_job(id="far", skills=["java"], job_type="Contract", location="Goa"),
        ]
    )

    results = await finder_for(store, settings).similar_to("t")

    assert [(r.id, r.similarity_score) for r in results] == [("twin", 100), ("close", 75)]


async def test_target_is_never_returned(settings, target):
    store = LeakyStore(jobs=[target, make_job(id="other", skills=["python"])])
    results = await finder_for(store, settings).similar_to("t")
    assert [r.id for r in results] == ["other"]


async def test_inactive_jobs_are_filtered(settings, target):
    store = LeakyStore(
        jobs=[target, make_job(id="closed", status="Closed"), make_job(id="open")]
    )
    results = await finder_for(store, settings).similar_to("t")
    assert [r.id for r in results] == ["open"]


async def test_missing_job_returns_empty(settings):
    store = InMemoryStore(jobs=[make_job(id="a")])

    assert await finder_for(store, settings).similar_to("missing") == []
    assert [c[0] for c in store.calls] == ["get_job"]


@pytest.mark.parametrize("limit,cap", [(None, 10), (3, 6), (50, 20), ("x", 10), (0, 2)])
async def test_fetches_twice_the_limit(settings, target, limit, cap):
    store = InMemoryStore(
        jobs=[target] + [make_job(id=f"j{i:02d}") for i in range(30)]
    )

    results = await finder_for(store, settings).similar_to("t", limit)

    assert ("query_related_jobs", "t", "t", cap) in store.calls
    assert len(results) == cap // 2


async def test_ties_prefer_newest_then_id(settings, target):
    store = InMemoryStore(
        jobs=[
            target,
            make_job(id="b", age_days=5),
            make_job(id="a", age_days=5),
            make_job(id="c", age_days=1),
        ]
    )
    results = await finder_for(store, settings).similar_to("t")
    assert [r.id for r in results] == ["c", "a", "b"]


@pytest.mark.parametrize("operation", ["get_job", "query_related_jobs"])
async def test_storage_failure_returns_empty(settings, target, operation):
    store = InMemoryStore(jobs=[target, make_job(id="x")], fail_on=[operation])
    assert await finder_for(store, settings).similar_to("t") == []


async def test_timeout_returns_empty(settings, target):
    settings.read_timeout_seconds = 0.05
    store = InMemoryStore(jobs=[target, make_job(id="x")], delay=0.2)
    assert await finder_for(store, settings).similar_to("t") == []


async def test_failure_is_reported_to_observer(settings, target):
    seen = []

    class Observer:
        def read_failed(self, operation, error):
            seen.append((operation, error))

    store = InMemoryStore(jobs=[target], fail_on=["get_job"])
    finder = SimilarJobsFinder(store, settings=settings, observer=Observer())

    assert await finder.similar_to("t") == []
    [(operation, error)] = seen
    assert operation == "similar_to"
    assert isinstance(error, CollaboratorError)
