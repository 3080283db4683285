"""Rule-based matching engine for company profiles and bandi."""

from .engine import MIN_MATCH_SCORE, days_to_deadline, score_all, score_bando
from .weights import DEFAULT_WEIGHTS, MatchingWeights, load_weights, save_weights
from .related_goals import RELATED_GOALS, get_related_goals, has_related_goal

__all__ = [
    "score_bando",
    "score_all",
    "days_to_deadline",
    "MIN_MATCH_SCORE",
    "DEFAULT_WEIGHTS",
    "MatchingWeights",
    "load_weights",
    "save_weights",
    "RELATED_GOALS",
    "get_related_goals",
    "has_related_goal",
]
