"""Shared Pydantic models - contract between the engine and its collaborators."""

from .bando import Bando
from .company_profile import CompanyProfile
from .match_result import MatchCriteria, MatchResult, ScoreDetails

__all__ = [
    "Bando",
    "CompanyProfile",
    "MatchCriteria",
    "MatchResult",
    "ScoreDetails",
]
