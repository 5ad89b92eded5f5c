"""Matching engine: scoring, ranking and statistics."""

from .engine import MatchingEngine
from .models import DEFAULT_WEIGHTS, MatchingStats, ScoringWeights
from .utils import build_result_dict, format_match_summary, skill_match_percentage

__all__ = [
    "MatchingEngine",
    "MatchingStats",
    "ScoringWeights",
    "DEFAULT_WEIGHTS",
    "format_match_summary",
    "build_result_dict",
    "skill_match_percentage",
]
