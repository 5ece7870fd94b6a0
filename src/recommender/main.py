"""
Recommender Service - Main entry point.
Prints recommendations, similar jobs and profile insights, or serves the API.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable

import click
from loguru import logger

from shared.config import get_settings, load_scoring_weights
from shared.database import Database
from shared.logging import setup_logging

from .engine import RecommendationEngine
from .similar import SimilarJobsFinder
from .store import MongoRecommendationStore


async def _with_store(run: Callable[[MongoRecommendationStore], Awaitable[Any]]) -> Any:
    """Connect to MongoDB, run against a store, always disconnect."""
    db = Database()
    await db.connect()
    try:
        return await run(MongoRecommendationStore(db))
    finally:
        await db.disconnect()


def _build_engine(store: MongoRecommendationStore) -> RecommendationEngine:
    match_weights, _ = load_scoring_weights()
    return RecommendationEngine(store, weights=match_weights)


def _build_finder(store: MongoRecommendationStore) -> SimilarJobsFinder:
    _, similarity_weights = load_scoring_weights()
    return SimilarJobsFinder(store, weights=similarity_weights)


@click.group()
def main():
    """Job Recommender - Explainable job recommendations."""
    setup_logging()


@main.command()
@click.argument("candidate_id")
@click.option(
    "--limit",
    "-l",
    type=int,
    default=None,
    help="Maximum recommendations (default 10, max 20)",
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def recommend(candidate_id: str, limit: int, as_json: bool):
    """Recommend jobs for a candidate."""
    results = asyncio.run(
        _with_store(lambda store: _build_engine(store).recommend(candidate_id, limit))
    )

    if as_json:
        click.echo(
            json.dumps([r.model_dump(mode="json", by_alias=True) for r in results], indent=2)
        )
        return

    if not results:
        click.echo("No recommendations.")
        return

    for r in results:
        click.echo(f"{r.match_score:>3}  {r.title} ({r.location}, {r.job_type})")
        for reason in r.match_reasons:
            click.echo(f"       - {reason}")


@main.command()
@click.argument("job_id")
@click.option(
    "--limit",
    "-l",
    type=int,
    default=None,
    help="Maximum similar jobs (default 5, max 10)",
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def similar(job_id: str, limit: int, as_json: bool):
    """List jobs similar to a job."""
    results = asyncio.run(
        _with_store(lambda store: _build_finder(store).similar_to(job_id, limit))
    )

    if as_json:
        click.echo(
            json.dumps([r.model_dump(mode="json", by_alias=True) for r in results], indent=2)
        )
        return

    if not results:
        click.echo("No similar jobs.")
        return

    for r in results:
        click.echo(f"{r.similarity_score:>3}  {r.title} ({r.location}, {r.job_type})")


@main.command()
@click.argument("candidate_id")
def insights(candidate_id: str):
    """Show profile completeness and suggestions for a candidate."""
    result = asyncio.run(
        _with_store(lambda store: _build_engine(store).profile_insights(candidate_id))
    )

    if result is None:
        click.echo("No profile found.")
        return

    click.echo(f"Profile completeness: {result.profile_completeness}%")
    for s in result.suggestions:
        click.echo(f"  [{s.impact}] {s.title}: {s.message}")
    if result.suggested_skills:
        click.echo(f"Suggested skills: {', '.join(result.suggested_skills)}")


@main.command("init-db")
def init_db():
    """Create the indexes the recommendation queries use."""

    async def run() -> None:
        db = Database()
        await db.connect()
        try:
            await db.ensure_indexes()
        finally:
            await db.disconnect()

    asyncio.run(run())
    click.echo("Indexes created.")


@main.command()
@click.option("--host", default=None, help="Bind address")
@click.option("--port", "-p", type=int, default=None, help="Bind port")
def serve(host: str, port: int):
    """Serve the recommendations API."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    logger.info(f"Starting recommendations API on {host}:{port}")
    uvicorn.run("api.app:create_app", factory=True, host=host, port=port)


if __name__ == "__main__":
    main()
