# Shared module for common utilities, models, and configuration
from .config import MatchWeights, Settings, SimilarityWeights, get_settings
from .database import Database
from .errors import CollaboratorError, ReadTimeoutError, RecommenderError
from .models import (
    ApplicationRecord,
    CandidateProfile,
    JobPosting,
    JobStatus,
    JobType,
    MatchResult,
    SimilarityResult,
)

__all__ = [
    "Settings",
    "get_settings",
    "MatchWeights",
    "SimilarityWeights",
    "Database",
    "RecommenderError",
    "CollaboratorError",
    "ReadTimeoutError",
    "ApplicationRecord",
    "CandidateProfile",
    "JobPosting",
    "JobStatus",
    "JobType",
    "MatchResult",
    "SimilarityResult",
]
