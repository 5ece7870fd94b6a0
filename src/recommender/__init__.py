"""
Recommender Service - explainable job recommendations.

Scores jobs against a candidate profile with a fixed weighted heuristic
and ranks jobs against each other by similarity.
"""

from .engine import RecommendationEngine, build_match_result
from .observer import LoggingObserver, RecommendationObserver
from .scoring import calculate_match_score, get_match_reasons, score_breakdown
from .similar import SimilarJobsFinder
from .similarity import calculate_similarity
from .store import MongoRecommendationStore, RecommendationStore

__all__ = [
    "RecommendationEngine",
    "build_match_result",
    "SimilarJobsFinder",
    "RecommendationStore",
    "MongoRecommendationStore",
    "RecommendationObserver",
    "LoggingObserver",
    "calculate_match_score",
    "get_match_reasons",
    "score_breakdown",
    "calculate_similarity",
]
