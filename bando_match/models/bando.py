"""Bando - a public funding opportunity with its eligibility constraints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .enums import (
    BandoStatus,
    CompanySize,
    ContributionType,
    InvestmentGoal,
    RegionType,
    SectorType,
)


class Bando(BaseModel):
    """Grant record as stored in the bandi table.

    The four eligibility lists are required: a bando without them is a
    contract violation and fails validation instead of scoring zero.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
        "loc_by_alias": False,
        "json_schema_extra": {
            "example": {
                "id": "b-0001",
                "title": "Voucher Digitalizzazione PMI",
                "description": "Contributi a fondo perduto per progetti di trasformazione digitale",
                "ente_erogatore": "Regione Lombardia",
                "contribution_type": "fondo_perduto",
                "min_amount": 5000,
                "max_amount": 100000,
                "eligible_sectors": ["tech", "manufacturing", "services"],
                "eligible_regions": ["lombardia"],
                "eligible_company_sizes": ["micro", "small"],
                "eligible_investment_goals": ["digitalization", "innovation"],
                "opening_date": "2026-09-01T00:00:00Z",
                "closing_date": "2026-12-15T23:59:59Z",
                "status": "active",
            }
        },
    }

    # Identity
    id: str = Field(..., description="Record id")
    title: str = Field(..., description="Bando title")
    description: str = Field(default="", description="Short description")
    ente_erogatore: str = Field(default="", description="Issuing body")
    contribution_type: Optional[ContributionType] = Field(None, description="Form of the contribution")

    # Funding range
    min_amount: Optional[float] = Field(None, ge=0, description="Minimum contribution in EUR")
    max_amount: Optional[float] = Field(None, ge=0, description="Maximum contribution in EUR")

    # Eligibility
    eligible_sectors: list[SectorType] = Field(..., description="Admitted sectors")
    eligible_regions: list[RegionType] = Field(..., description="Admitted regions")
    eligible_company_sizes: list[CompanySize] = Field(..., description="Admitted size classes")
    eligible_investment_goals: list[InvestmentGoal] = Field(..., description="Admitted investment goals")

    # Dates
    opening_date: Optional[datetime] = Field(None, description="Application window opens")
    closing_date: Optional[datetime] = Field(None, description="Application deadline")

    status: BandoStatus = Field(default="active", description="active, closed, coming_soon, draft")
    official_url: Optional[str] = Field(None, description="Link to the official call")

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
