"""Tests for the form-submission handler and the offline CLI."""

import json
import logging
from typing import List
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from bando_match.config import Config
from bando_match.main import handle_submission, main, run_offline, submit_company_profile
from bando_match.models import Bando, CompanyProfile, MatchResult


FORM_DATA = {
    "companyName": "Rossi Software S.r.l.",
    "firstName": "Mario",
    "lastName": "Rossi",
    "email": "mario@rossisoftware.it",
    "sector": "tech",
    "region": "lombardia",
    "companySize": "small",
    "investmentGoal": "digitalization",
}


class MockDBClient:
    """In-memory replacement for SupabaseClient."""

    def __init__(self, bandi: List[Bando]):
        self.companies: List[CompanyProfile] = []
        self.matches: List[MatchResult] = []
        self._bandi = bandi

    def insert_company(self, profile: CompanyProfile) -> dict:
        self.companies.append(profile)
        return {"id": len(self.companies), **profile.to_record()}

    def get_active_bandi(self) -> List[Bando]:
        return [b for b in self._bandi if b.status == "active"]

    def save_matches(self, results: List[MatchResult]) -> int:
        self.matches.extend(results)
        return len(results)


class FailingDBClient(MockDBClient):
    def save_matches(self, results):
        raise ConnectionError("matches table unavailable")


@pytest.fixture
def catalog(make_bando):
    return [
        make_bando(id="perfect", days_to_close=30),
        make_bando(
            id="poor",
            eligible_sectors=["food", "energy"],
            eligible_regions=["lazio"],
            eligible_company_sizes=["large"],
            eligible_investment_goals=["green"],
        ),
        make_bando(id="closed", status="closed"),
        make_bando(id="fair", eligible_company_sizes=["large"], eligible_investment_goals=["green"]),
    ]


class TestSubmitCompanyProfile:
    def test_happy_path(self, catalog, now):
        db = MockDBClient(catalog)

        run = submit_company_profile(FORM_DATA, db, now=now)

        assert run.company_id == "1"
        assert run.grants_evaluated == 3
        assert [r.bando_id for r in run.results] == ["perfect", "fair"]
        assert all(r.company_id == "1" for r in db.matches)
        assert db.companies[0].company_name == "Rossi Software S.r.l."

    def test_invalid_form_writes_nothing(self, catalog, now):
        db = MockDBClient(catalog)
        data = {k: v for k, v in FORM_DATA.items() if k != "companySize"}

        with pytest.raises(ValidationError):
            submit_company_profile(data, db, now=now)
        assert db.companies == []
        assert db.matches == []

    def test_min_score_passed_through(self, catalog, now):
        db = MockDBClient(catalog)

        run = submit_company_profile(FORM_DATA, db, min_score=80, now=now)

        assert [r.bando_id for r in run.results] == ["perfect"]

    def test_persistence_error_propagates(self, catalog, now, caplog):
        db = FailingDBClient(catalog)

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ConnectionError):
                submit_company_profile(FORM_DATA, db, now=now)
        assert "Matching failed for Rossi Software S.r.l." in caplog.text


def _write_inputs(tmp_path, catalog):
    company_path = tmp_path / "company.json"
    bandi_path = tmp_path / "bandi.json"
    company_path.write_text(json.dumps(FORM_DATA))
    bandi_path.write_text(json.dumps([b.model_dump(mode="json") for b in catalog]))
    return str(company_path), str(bandi_path)


class TestOffline:
    def test_run_offline_skips_inactive(self, tmp_path, catalog, now):
        company_path, bandi_path = _write_inputs(tmp_path, catalog)

        reports = run_offline(company_path, bandi_path, now=now)

        assert len(reports) == 2
        assert "PUNTEGGIO TOTALE: 100%" in reports[0]
        assert "PUNTEGGIO TOTALE: 60%" in reports[1]

    def test_run_offline_priority_filter(self, tmp_path, catalog, now):
        company_path, bandi_path = _write_inputs(tmp_path, catalog)

        reports = run_offline(company_path, bandi_path, priority="normal", now=now)

        assert len(reports) == 1
        assert "Priorità: NORMAL" in reports[0]

    def test_main_prints_reports(self, tmp_path, catalog, capsys):
        company_path, bandi_path = _write_inputs(tmp_path, catalog)

        exit_code = main(["--company", company_path, "--bandi", bandi_path])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert out.count("REPORT DI COMPATIBILITÀ") == 2

    def test_main_no_matches(self, tmp_path, catalog, capsys):
        company_path, bandi_path = _write_inputs(tmp_path, catalog)

        exit_code = main(["--company", company_path, "--bandi", bandi_path, "--min-score", "101"])

        assert exit_code == 0
        assert "Nessun bando compatibile trovato." in capsys.readouterr().out

    def test_main_with_weights_file(self, tmp_path, catalog, capsys):
        company_path, bandi_path = _write_inputs(tmp_path, catalog)
        weights_path = tmp_path / "weights.json"
        weights_path.write_text(json.dumps({"sector": 40, "region": 20, "size": 20, "goal": 20}))

        main(["--company", company_path, "--bandi", bandi_path, "--weights", str(weights_path)])

        assert "Settore: 40/40" in capsys.readouterr().out

    def test_main_rejects_unknown_priority(self, tmp_path, catalog, capsys):
        company_path, bandi_path = _write_inputs(tmp_path, catalog)

        with pytest.raises(SystemExit):
            main(["--company", company_path, "--bandi", bandi_path, "--priority", "critical"])
        assert "invalid choice" in capsys.readouterr().err


class TestHandleSubmission:
    def test_wires_config_into_the_handler(self, catalog, tmp_path):
        weights_path = tmp_path / "weights.yaml"
        weights_path.write_text("bonus_max: 0\n")
        config = Config(
            supabase_url="https://fake.supabase.co",
            supabase_key="fake-key",
            min_match_score=80,
            weights_file=str(weights_path),
        )
        db = MockDBClient(catalog)

        with patch("bando_match.main.SupabaseClient", return_value=db) as client_cls:
            run = handle_submission(FORM_DATA, config)

        client_cls.assert_called_once_with(url="https://fake.supabase.co", key="fake-key")
        assert [r.bando_id for r in run.results] == ["perfect"]
        assert run.results[0].criteria.score_details.bonus_score == 0

    def test_applies_configured_log_level(self, catalog):
        config = Config(
            supabase_url="https://fake.supabase.co",
            supabase_key="fake-key",
            log_level="debug",
            weights_file=None,
        )
        root = logging.getLogger()
        previous = root.level

        try:
            with patch("bando_match.main.SupabaseClient", return_value=MockDBClient(catalog)):
                handle_submission(FORM_DATA, config)
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)
