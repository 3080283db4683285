"""Rule-based matching engine between a company profile and the bandi.

Implements four weighted criteria with partial credit, bonus and penalty
adjustments, and urgency-based prioritization.

Score range 0-100:
- 90-100: excellent match
- 70-89: good match
- 50-69: fair match
- 30-49: poor but still worth showing
- 0-29: discarded by ``score_all``
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Tuple, Union

from ..models import Bando, CompanyProfile, MatchCriteria, MatchResult, ScoreDetails
from .related_goals import has_related_goal
from .weights import DEFAULT_WEIGHTS, MatchingWeights

logger = logging.getLogger(__name__)

MIN_MATCH_SCORE = 30
NO_DEADLINE_DAYS = 999

# Partial credit, as a fraction of the criterion weight
SECTOR_PARTIAL_RATIO = 0.3
REGION_PARTIAL_RATIO = 0.5
SIZE_PARTIAL_RATIO = 0.4
GOAL_PARTIAL_RATIO = 0.5

BROAD_SECTOR_COUNT = 3  # more than this many sectors makes "services" plausible
NATIONAL_REGION_COUNT = 10  # more than this many regions is a national call

# Company size -> the next tier up that still earns partial credit
SIZE_BORDER = {
    "micro": "small",
    "small": "medium",
}

PERFECT_MATCH_BONUS = 5
URGENCY_BONUS = 3
URGENCY_DAYS = 15
HIGH_BUDGET_BONUS = 2
HIGH_BUDGET_AMOUNT = 50_000

NO_MATCH_PENALTY = -10
SINGLE_MATCH_PENALTY = -5
NARROW_SECTOR_PENALTY = -5


class _Notes:
    """Explanation lists collected while scoring a single bando."""

    def __init__(self) -> None:
        self.matching_features: List[str] = []
        self.missing_requirements: List[str] = []
        self.suggestions: List[str] = []


def score_bando(
    company: CompanyProfile,
    bando: Bando,
    weights: MatchingWeights = DEFAULT_WEIGHTS,
    now: Optional[datetime] = None,
) -> MatchResult:
    """Score one bando against a company profile.

    Criteria (default weights):
    1. Sector (35): exact match, or 30% for "services" on broad calls
    2. Region (25): exact match, or 50% on national calls (>10 regions)
    3. Size (20): exact match, or 40% one tier below an eligible size
    4. Goal (20): exact match, or 50% when a related goal is eligible

    Bonuses (capped at ``weights.bonus_max``) and penalties (floored at
    ``weights.penalty_max``) are then added and the sum is clamped to
    0-100.

    Args:
        company: Company profile to evaluate
        bando: Candidate bando (its status is not checked here)
        weights: Matching weights configuration
        now: Reference instant for deadline arithmetic, defaults to utcnow

    Returns:
        MatchResult with score breakdown and explanations
    """

    if now is None:
        now = datetime.now(timezone.utc)

    notes = _Notes()

    sector_match, sector_score = _score_sector(company, bando, weights, notes)
    region_match, region_score = _score_region(company, bando, weights, notes)
    size_match, size_score = _score_size(company, bando, weights, notes)
    goal_match, goal_score = _score_goal(company, bando, weights, notes)

    match_count = sum([sector_match, region_match, size_match, goal_match])

    days = days_to_deadline(bando.closing_date, now) if bando.closing_date else None

    bonus_score = _calculate_bonus(bando, match_count, days, weights, notes)
    penalty_score = _calculate_penalty(bando, match_count, sector_match, weights, notes)

    base_score = sector_score + region_score + size_score + goal_score
    total_score = _round_half_up(
        max(0.0, min(100.0, base_score + bonus_score + penalty_score))
    )

    criteria = MatchCriteria(
        sector_match=sector_match,
        region_match=region_match,
        size_match=size_match,
        goal_match=goal_match,
        score_details=ScoreDetails(
            sector_score=sector_score,
            region_score=region_score,
            size_score=size_score,
            goal_score=goal_score,
            bonus_score=bonus_score,
            penalty_score=penalty_score,
        ),
        matching_features=tuple(notes.matching_features),
        missing_requirements=tuple(notes.missing_requirements),
        suggestions=tuple(notes.suggestions),
    )

    priority = _determine_priority(
        total_score, days if days is not None else NO_DEADLINE_DAYS
    )

    logger.debug(
        "scored bando=%s score=%d base=%g bonus=%g penalty=%g matches=%d priority=%s",
        bando.id,
        total_score,
        base_score,
        bonus_score,
        penalty_score,
        match_count,
        priority,
    )

    return MatchResult(
        bando_id=bando.id,
        company_id=company.id or "",
        total_score=total_score,
        criteria=criteria,
        confidence_level=_get_confidence_level(match_count),
        estimated_success_rate=_estimate_success_rate(total_score, match_count),
        priority=priority,
    )


def score_all(
    company: CompanyProfile,
    bandi: Iterable[Bando],
    weights: MatchingWeights = DEFAULT_WEIGHTS,
    min_score: int = MIN_MATCH_SCORE,
    now: Optional[datetime] = None,
) -> List[MatchResult]:
    """Score every bando and return the retained matches, best first.

    Results below ``min_score`` are dropped. The sort is stable, so bandi
    with the same score keep their input order.
    """

    if now is None:
        now = datetime.now(timezone.utc)

    evaluated = 0
    results: List[MatchResult] = []
    for bando in bandi:
        evaluated += 1
        result = score_bando(company, bando, weights, now)
        if result.total_score >= min_score:
            results.append(result)

    results.sort(key=lambda r: r.total_score, reverse=True)

    logger.info(
        "matching_complete company=%s evaluated=%d retained=%d min_score=%d",
        company.id or company.company_name,
        evaluated,
        len(results),
        min_score,
    )
    return results


def days_to_deadline(
    closing_date: Union[datetime, date],
    now: Optional[datetime] = None,
) -> int:
    """Whole days until the deadline, rounded up.

    Negative for deadlines already past. Naive datetimes are read as UTC.
    """

    if now is None:
        now = datetime.now(timezone.utc)

    delta = _as_utc(closing_date) - _as_utc(now)
    return math.ceil(delta.total_seconds() / 86400)


# ---------------------------------------------------------------------------
# Base criteria
# ---------------------------------------------------------------------------

def _score_sector(
    company: CompanyProfile, bando: Bando, weights: MatchingWeights, notes: _Notes
) -> Tuple[bool, float]:
    if company.sector in bando.eligible_sectors:
        notes.matching_features.append("Settore aziendale compatibile")
        return True, weights.sector

    notes.missing_requirements.append("Settore non ammesso dal bando")
    # "services" is generic enough to fit calls open to many sectors
    if company.sector == "services" and len(bando.eligible_sectors) > BROAD_SECTOR_COUNT:
        notes.suggestions.append('Il settore "servizi" potrebbe essere parzialmente compatibile')
        return False, weights.sector * SECTOR_PARTIAL_RATIO
    return False, 0.0


def _score_region(
    company: CompanyProfile, bando: Bando, weights: MatchingWeights, notes: _Notes
) -> Tuple[bool, float]:
    if company.region in bando.eligible_regions:
        notes.matching_features.append("Regione ammessa")
        return True, weights.region

    notes.missing_requirements.append("Regione non coperta dal bando")
    if len(bando.eligible_regions) > NATIONAL_REGION_COUNT:
        notes.suggestions.append("Verifica se ci sono eccezioni per la tua regione")
        return False, weights.region * REGION_PARTIAL_RATIO
    return False, 0.0


def _score_size(
    company: CompanyProfile, bando: Bando, weights: MatchingWeights, notes: _Notes
) -> Tuple[bool, float]:
    if company.company_size in bando.eligible_company_sizes:
        notes.matching_features.append("Dimensione aziendale idonea")
        return True, weights.size

    notes.missing_requirements.append("Dimensione aziendale non compatibile")
    if _is_on_size_border(company.company_size, bando.eligible_company_sizes):
        notes.suggestions.append("Potresti qualificarti con piccole modifiche strutturali")
        return False, weights.size * SIZE_PARTIAL_RATIO
    return False, 0.0


def _score_goal(
    company: CompanyProfile, bando: Bando, weights: MatchingWeights, notes: _Notes
) -> Tuple[bool, float]:
    if company.investment_goal in bando.eligible_investment_goals:
        notes.matching_features.append("Obiettivi di investimento allineati")
        return True, weights.goal

    notes.missing_requirements.append("Obiettivi non allineati con il bando")
    if has_related_goal(company.investment_goal, bando.eligible_investment_goals):
        notes.suggestions.append("Gli obiettivi sono parzialmente correlati")
        return False, weights.goal * GOAL_PARTIAL_RATIO
    return False, 0.0


def _is_on_size_border(company_size: str, eligible_sizes: List[str]) -> bool:
    """True when the company is one tier below an eligible size."""
    next_tier = SIZE_BORDER.get(company_size)
    return next_tier is not None and next_tier in eligible_sizes


# ---------------------------------------------------------------------------
# Adjustments
# ---------------------------------------------------------------------------

def _calculate_bonus(
    bando: Bando,
    match_count: int,
    days: Optional[int],
    weights: MatchingWeights,
    notes: _Notes,
) -> float:
    """Stackable bonuses, capped at ``weights.bonus_max``.

    An expired bando (negative ``days``) still earns the urgency bonus;
    status filtering is the caller's job.
    """

    bonus = 0.0

    if match_count == 4:
        bonus += PERFECT_MATCH_BONUS
        notes.matching_features.append("Match perfetto su tutti i criteri!")

    if days is not None and days <= URGENCY_DAYS:
        bonus += URGENCY_BONUS
        notes.matching_features.append("Bando in scadenza imminente")

    if bando.max_amount and bando.max_amount > HIGH_BUDGET_AMOUNT:
        bonus += HIGH_BUDGET_BONUS
        notes.matching_features.append("Budget elevato disponibile")

    return min(bonus, weights.bonus_max)


def _calculate_penalty(
    bando: Bando,
    match_count: int,
    sector_match: bool,
    weights: MatchingWeights,
    notes: _Notes,
) -> float:
    """Penalties summed across sources, then floored at ``weights.penalty_max``."""

    penalty = 0.0

    if match_count == 0:
        penalty += NO_MATCH_PENALTY
        notes.missing_requirements.append("Nessun criterio principale soddisfatto")
    elif match_count == 1:
        penalty += SINGLE_MATCH_PENALTY
        notes.suggestions.append("Solo un criterio soddisfatto - candidatura difficile")

    if len(bando.eligible_sectors) == 1 and not sector_match:
        penalty += NARROW_SECTOR_PENALTY
        notes.missing_requirements.append("Bando molto specifico per settore")

    return max(penalty, weights.penalty_max)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def _get_confidence_level(match_count: int) -> str:
    """Confidence from full-credit criteria only.

    Thresholds:
    - high: 3-4 criteria
    - medium: 2 criteria
    - low: 0-1 criteria
    """

    if match_count >= 3:
        return "high"
    elif match_count == 2:
        return "medium"
    else:
        return "low"


def _estimate_success_rate(total_score: int, match_count: int) -> int:
    """80% of the score plus 5 points per full-credit criterion, capped at 95."""
    rate = total_score * 0.8 + 5 * match_count
    return min(95, _round_half_up(rate))


def _determine_priority(total_score: int, days: int) -> str:
    """Classify by score and days to deadline, first rule wins.

    - urgent: score >= 70 and deadline within 15 days
    - high: score >= 85 or deadline within 7 days
    - normal: score >= 50
    - low: everything else

    A past deadline (negative days) satisfies both deadline rules.
    """

    if total_score >= 70 and days <= 15:
        return "urgent"
    elif total_score >= 85 or days <= 7:
        return "high"
    elif total_score >= 50:
        return "normal"
    else:
        return "low"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _as_utc(value: Union[datetime, date]) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
