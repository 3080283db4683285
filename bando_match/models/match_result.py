"""MatchResult - scored association between a company and one bando."""

from pydantic import BaseModel, Field

from .enums import ConfidenceLevel, Priority


class ScoreDetails(BaseModel):
    """Per-criterion points that add up to the total score."""

    model_config = {"frozen": True}

    sector_score: float = 0.0
    region_score: float = 0.0
    size_score: float = 0.0
    goal_score: float = 0.0
    bonus_score: float = 0.0
    penalty_score: float = 0.0

    @property
    def base_score(self) -> float:
        return self.sector_score + self.region_score + self.size_score + self.goal_score


class MatchCriteria(BaseModel):
    """Structured explanation of a match.

    A ``*_match`` flag is true only on full credit; partial credit shows
    up in ``score_details`` and ``suggestions`` with the flag left false.
    """

    model_config = {"frozen": True}

    sector_match: bool = False
    region_match: bool = False
    size_match: bool = False
    goal_match: bool = False
    score_details: ScoreDetails = Field(default_factory=ScoreDetails)
    matching_features: tuple[str, ...] = ()
    missing_requirements: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()

    @property
    def match_count(self) -> int:
        """Number of criteria with full credit (0-4)."""
        return sum([self.sector_match, self.region_match, self.size_match, self.goal_match])


class MatchResult(BaseModel):
    """Engine output for one (company, bando) pair."""

    model_config = {"frozen": True}

    bando_id: str = Field(..., description="Links to Bando.id")
    company_id: str = Field(default="", description="Links to CompanyProfile.id, empty if unsaved")
    total_score: int = Field(..., ge=0, le=100, description="Clamped, rounded compatibility score")
    criteria: MatchCriteria
    confidence_level: ConfidenceLevel
    estimated_success_rate: int = Field(..., ge=0, le=95, description="Estimated chance of funding (%)")
    priority: Priority

    @property
    def match_count(self) -> int:
        return self.criteria.match_count

    def match_reasons(self) -> dict:
        """Flattened explanation payload stored alongside the match row."""
        criteria = self.criteria
        return {
            "sector_match": criteria.sector_match,
            "region_match": criteria.region_match,
            "size_match": criteria.size_match,
            "goal_match": criteria.goal_match,
            "score_details": criteria.score_details.model_dump(),
            "matching_features": list(criteria.matching_features),
            "missing_requirements": list(criteria.missing_requirements),
            "suggestions": list(criteria.suggestions),
            "confidence_level": self.confidence_level,
            "estimated_success_rate": self.estimated_success_rate,
            "priority": self.priority,
        }
