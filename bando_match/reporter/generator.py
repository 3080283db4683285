"""Plain-text match reports and score-band grouping for the results page."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..models import Bando, MatchResult
from ..models.enums import CONTRIBUTION_TYPES, PRIORITIES
from ..scorer.weights import DEFAULT_WEIGHTS, MatchingWeights

# Lower bound of each band, best first
SCORE_BANDS = (
    ("excellent", 90),
    ("good", 70),
    ("fair", 50),
    ("poor", 30),
)
INSUFFICIENT_BAND = "insufficient"

BAND_LABELS = {
    "excellent": "Match ECCELLENTE",
    "good": "Match OTTIMO",
    "fair": "Match BUONO",
    "poor": "Match SUFFICIENTE",
    "insufficient": "Match SCARSO",
}


def format_report(
    result: MatchResult,
    bando: Bando,
    weights: MatchingWeights = DEFAULT_WEIGHTS,
) -> str:
    """Render the full breakdown of one match as plain text.

    Sections with no entries are omitted, as are a zero bonus and a zero
    penalty. No I/O is performed.

    Args:
        result: Match to render.
        bando: The bando the match refers to (title and issuing body).
        weights: Weights used for the ``score/weight`` breakdown.

    Returns:
        Multi-line report ending with a newline.
    """
    criteria = result.criteria
    details = criteria.score_details

    lines = [
        "📊 REPORT DI COMPATIBILITÀ",
        "=" * 50,
        "",
        f"Bando: {bando.title}",
        f"Ente: {bando.ente_erogatore}",
    ]
    if bando.contribution_type:
        lines.append(f"Contributo: {CONTRIBUTION_TYPES[bando.contribution_type]}")
    lines += [
        "",
        f"PUNTEGGIO TOTALE: {result.total_score}%",
        f"Livello di Confidenza: {result.confidence_level.upper()}",
        f"Probabilità di Successo: {result.estimated_success_rate}%",
        f"Priorità: {result.priority.upper()}",
        "",
        "ANALISI DETTAGLIATA:",
        "-" * 30,
    ]

    lines.extend(_bullet_section("✅ Punti di Forza:", criteria.matching_features))
    lines.extend(_bullet_section("❌ Requisiti Mancanti:", criteria.missing_requirements))
    lines.extend(_bullet_section("💡 Suggerimenti:", criteria.suggestions))

    lines.append("DETTAGLIO PUNTEGGI:")
    lines.append(f"   Settore: {_fmt_points(details.sector_score)}/{_fmt_points(weights.sector)}")
    lines.append(f"   Regione: {_fmt_points(details.region_score)}/{_fmt_points(weights.region)}")
    lines.append(f"   Dimensione: {_fmt_points(details.size_score)}/{_fmt_points(weights.size)}")
    lines.append(f"   Obiettivi: {_fmt_points(details.goal_score)}/{_fmt_points(weights.goal)}")

    if details.bonus_score > 0:
        lines.append(f"   Bonus: +{_fmt_points(details.bonus_score)}")
    if details.penalty_score < 0:
        lines.append(f"   Penalità: {_fmt_points(details.penalty_score)}")

    return "\n".join(lines) + "\n"


def score_band(total_score: int) -> str:
    """Map a score onto excellent/good/fair/poor/insufficient."""
    for band, lower_bound in SCORE_BANDS:
        if total_score >= lower_bound:
            return band
    return INSUFFICIENT_BAND


def group_by_band(results: Iterable[MatchResult]) -> dict[str, list[MatchResult]]:
    """Group results by score band, best band first.

    Every band is present in the output (possibly empty); the order of
    results inside a band follows the input.
    """
    groups: dict[str, list[MatchResult]] = {band: [] for band, _ in SCORE_BANDS}
    groups[INSUFFICIENT_BAND] = []
    for result in results:
        groups[score_band(result.total_score)].append(result)
    return groups


def filter_by_priority(
    results: Iterable[MatchResult], priority: Optional[str] = None
) -> list[MatchResult]:
    """Keep results with the given priority; ``None`` keeps everything.

    Raises:
        ValueError: If ``priority`` is not one of urgent/high/normal/low.
    """
    if priority is None:
        return list(results)
    if priority not in PRIORITIES:
        raise ValueError(
            f"Unknown priority '{priority}'. Use one of: {', '.join(PRIORITIES)}"
        )
    return [r for r in results if r.priority == priority]


def _bullet_section(title: str, entries: Sequence[str]) -> list[str]:
    if not entries:
        return []
    return [title, *(f"   • {entry}" for entry in entries), ""]


def _fmt_points(value: float) -> str:
    """35.0 -> '35', 10.5 -> '10.5'."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
