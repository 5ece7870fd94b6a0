"""
Job/job similarity scoring, independent of any candidate.
"""

from shared.config import SimilarityWeights
from shared.models import JobPosting

from .scoring import normalize_skills, round_half_up

DEFAULT_SIMILARITY_WEIGHTS = SimilarityWeights()


def calculate_similarity(
    job1: JobPosting,
    job2: JobPosting,
    weights: SimilarityWeights = DEFAULT_SIMILARITY_WEIGHTS,
) -> int:
    """
    Similarity score 0-100 between two jobs.

    Skill overlap is measured against the longer skill list, and job type and
    location must be exactly equal. Every term is symmetric, so
    calculate_similarity(a, b) == calculate_similarity(b, a).
    """
    score = 0.0

    skills1 = set(normalize_skills(job1.skills))
    skills2 = set(normalize_skills(job2.skills))
    if skills1 and skills2:
        common = skills1 & skills2
        score += len(common) / max(len(skills1), len(skills2)) * weights.skills

    if job1.job_type == job2.job_type:
        score += weights.job_type

    # Exact match only, unlike the substring rule used for candidate cities
    if job1.location and job1.location == job2.location:
        score += weights.location

    return round_half_up(score)
