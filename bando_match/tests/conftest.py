"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from bando_match.models import Bando, CompanyProfile

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Reference instant used for every deadline computation in tests."""
    return FIXED_NOW


@pytest.fixture
def make_company():
    """Factory for a tech SME in Lombardy aiming at digitalization."""

    def _make(**overrides) -> CompanyProfile:
        defaults = dict(
            id="c-1",
            company_name="Rossi Software S.r.l.",
            first_name="Mario",
            last_name="Rossi",
            email="mario@rossisoftware.it",
            sector="tech",
            region="lombardia",
            company_size="small",
            investment_goal="digitalization",
        )
        defaults.update(overrides)
        return CompanyProfile(**defaults)

    return _make


@pytest.fixture
def make_bando():
    """Factory for a bando eligible on all four criteria of the default company.

    No deadline and a budget below the high-budget threshold, so no
    bonus other than the perfect-match one applies unless a test asks.
    """

    def _make(days_to_close=None, **overrides) -> Bando:
        defaults = dict(
            id="b-1",
            title="Voucher Digitalizzazione PMI",
            description="Contributi per la trasformazione digitale",
            ente_erogatore="Regione Lombardia",
            contribution_type="fondo_perduto",
            min_amount=5000,
            max_amount=30000,
            eligible_sectors=["tech", "manufacturing"],
            eligible_regions=["lombardia"],
            eligible_company_sizes=["small"],
            eligible_investment_goals=["digitalization"],
            closing_date=None,
            status="active",
        )
        if days_to_close is not None:
            defaults["closing_date"] = FIXED_NOW + timedelta(days=days_to_close)
        defaults.update(overrides)
        return Bando(**defaults)

    return _make
