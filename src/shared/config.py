"""
Application configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatchWeights(BaseModel):
    """Weight distribution for candidate/job matching. Must sum to 100."""

    skills: int = Field(default=70, ge=0)
    location: int = Field(default=10, ge=0)
    job_type: int = Field(default=10, ge=0)
    salary: int = Field(default=10, ge=0)

    @model_validator(mode="after")
    def _check_total(self) -> "MatchWeights":
        total = self.skills + self.location + self.job_type + self.salary
        if total != 100:
            raise ValueError(f"Match weights must sum to 100 (got {total})")
        return self


class SimilarityWeights(BaseModel):
    """Weight distribution for job/job similarity. Must sum to 100."""

    skills: int = Field(default=50, ge=0)
    job_type: int = Field(default=25, ge=0)
    location: int = Field(default=25, ge=0)

    @model_validator(mode="after")
    def _check_total(self) -> "SimilarityWeights":
        total = self.skills + self.job_type + self.location
        if total != 100:
            raise ValueError(f"Similarity weights must sum to 100 (got {total})")
        return self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # MongoDB (shared with the job portal that owns the data)
    mongodb_uri: str = Field(default="mongodb://127.0.0.1:27017")
    mongodb_database: str = Field(default="jobPortalDB")

    # Recommendation settings
    recommendation_candidate_cap: int = Field(
        default=50, description="Maximum active jobs scored per recommendation request"
    )
    recommendation_default_limit: int = Field(default=10)
    recommendation_max_limit: int = Field(default=20)

    # Similar jobs settings
    similar_default_limit: int = Field(default=5)
    similar_max_limit: int = Field(default=10)

    read_timeout_seconds: float = Field(
        default=5.0, description="Deadline for the storage reads of one request"
    )

    # Scoring
    scoring_path: Path = Field(default=Path("config/scoring.yaml"))

    # API server
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_scoring_weights(
    path: Optional[Path] = None,
) -> tuple[MatchWeights, SimilarityWeights]:
    """
    Load weight overrides from YAML.

    Missing file or missing blocks fall back to the default weights.
    Invalid weights raise a validation error.
    """
    path = path or get_settings().scoring_path
    if not path.exists():
        logger.warning(f"Scoring file not found: {path}, using default weights")
        return MatchWeights(), SimilarityWeights()

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    match_weights = MatchWeights(**(data.get("match_weights") or {}))
    similarity_weights = SimilarityWeights(**(data.get("similarity_weights") or {}))

    logger.info(f"Loaded scoring weights from {path}")
    return match_weights, similarity_weights
