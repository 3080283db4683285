"""Form-submission handler and offline command-line entry point.

Flow for a submitted profile:
- Validate the form into a CompanyProfile
- Insert the company, load the active bandi
- Score every bando, keep matches at or above the floor
- Persist the matches for the results page
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, List, Mapping, Optional

from .config import Config, load_config
from .database import SupabaseClient
from .models import Bando, CompanyProfile, MatchResult
from .models.enums import PRIORITIES
from .reporter import BAND_LABELS, filter_by_priority, format_report, group_by_band
from .scorer import DEFAULT_WEIGHTS, MIN_MATCH_SCORE, MatchingWeights, load_weights, score_all

logger = logging.getLogger(__name__)


@dataclass
class MatchingRun:
    """Outcome of one profile submission.

    Attributes:
        company_id: Id of the inserted company.
        grants_evaluated: Active bandi scored.
        results: Retained matches, best first.
    """

    company_id: str
    grants_evaluated: int
    results: List[MatchResult] = field(default_factory=list)


def submit_company_profile(
    form_data: Mapping[str, Any],
    db_client: Any,
    weights: MatchingWeights = DEFAULT_WEIGHTS,
    min_score: int = MIN_MATCH_SCORE,
    now: Optional[datetime] = None,
) -> MatchingRun:
    """Handle a profile form submission end to end.

    Args:
        form_data: Raw form fields (camelCase or snake_case keys).
        db_client: SupabaseClient or any object with the same methods.
        weights: Matching weights configuration.
        min_score: Matches below this score are not stored.
        now: Reference instant for deadline arithmetic.

    Returns:
        MatchingRun with the stored matches.

    Raises:
        pydantic.ValidationError: If required form fields are missing.
    """
    profile = CompanyProfile.model_validate(form_data)

    try:
        row = db_client.insert_company(profile)
        profile = profile.model_copy(update={"id": str(row["id"])})

        bandi = db_client.get_active_bandi()
        logger.info("Scoring %d active bandi for %s", len(bandi), profile.company_name)

        results = score_all(profile, bandi, weights=weights, min_score=min_score, now=now)
        saved = db_client.save_matches(results)
    except Exception as e:
        logger.error(f"Matching failed for {profile.company_name}: {e}", exc_info=True)
        raise

    logger.info("✓ Stored %d matches for company %s", saved, profile.id)
    return MatchingRun(company_id=profile.id, grants_evaluated=len(bandi), results=results)


def handle_submission(form_data: Mapping[str, Any], config: Optional[Config] = None) -> MatchingRun:
    """Production entry point: wire settings, database and weights, then submit."""
    config = config or load_config()
    logging.getLogger().setLevel(config.log_level.upper())

    db_client = SupabaseClient(url=config.supabase_url, key=config.supabase_key)
    weights = load_weights(config.weights_file)
    return submit_company_profile(
        form_data, db_client, weights=weights, min_score=config.min_match_score
    )


def run_offline(
    company_path: str,
    bandi_path: str,
    weights: MatchingWeights = DEFAULT_WEIGHTS,
    min_score: int = MIN_MATCH_SCORE,
    priority: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[str]:
    """Score bandi from JSON files and return one report per match.

    Bandi that are not active are skipped before scoring, as the
    database path does.
    """
    company = CompanyProfile.model_validate(_load_json(company_path))
    raw_bandi = _load_json(bandi_path)
    bandi = [Bando.model_validate(item) for item in raw_bandi]

    active = [b for b in bandi if b.status == "active"]
    if len(active) < len(bandi):
        logger.info("Skipped %d inactive bandi", len(bandi) - len(active))

    by_id = {b.id: b for b in active}
    results = score_all(company, active, weights=weights, min_score=min_score, now=now)
    results = filter_by_priority(results, priority)

    reports = []
    for band, band_results in group_by_band(results).items():
        if not band_results:
            continue
        logger.debug("%s: %d matches", BAND_LABELS[band], len(band_results))
        for result in band_results:
            reports.append(format_report(result, by_id[result.bando_id], weights))
    return reports


def _load_json(path: str) -> Any:
    with open(Path(path), "r", encoding="utf-8") as f:
        return json.load(f)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bando_match",
        description="Score bandi against a company profile and print the reports.",
    )
    parser.add_argument("--company", required=True, help="JSON file with the company profile")
    parser.add_argument("--bandi", required=True, help="JSON file with a list of bandi")
    parser.add_argument(
        "--priority",
        choices=PRIORITIES,
        default=None,
        help="Only show matches with this priority",
    )
    parser.add_argument("--weights", default=None, help="JSON or YAML weights file")
    parser.add_argument("--min-score", type=int, default=MIN_MATCH_SCORE)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    weights = load_weights(args.weights)
    reports = run_offline(
        args.company,
        args.bandi,
        weights=weights,
        min_score=args.min_score,
        priority=args.priority,
    )

    if not reports:
        print("Nessun bando compatibile trovato.")
        return 0

    print("\n".join(reports))
    return 0


if __name__ == "__main__":
    sys.exit(main())
