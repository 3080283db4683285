"""CompanyProfile - a visitor's company as submitted through the profile form."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .enums import CompanySize, InvestmentGoal, RegionType, SectorType


class CompanyProfile(BaseModel):
    """Company profile scored against the active bandi.

    Only sector, region, company_size and investment_goal take part in
    scoring; the identifying fields are carried through for persistence.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
        "loc_by_alias": False,
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "example": {
                "company_name": "Rossi Software S.r.l.",
                "first_name": "Mario",
                "last_name": "Rossi",
                "email": "mario@rossisoftware.it",
                "sector": "tech",
                "region": "lombardia",
                "company_size": "small",
                "investment_goal": "digitalization",
            }
        },
    }

    id: Optional[str] = Field(None, description="Record id, assigned on insert")

    # Contact
    company_name: str = Field(..., min_length=1, description="Ragione sociale")
    first_name: str = Field(..., min_length=1, description="Contact first name")
    last_name: str = Field(..., min_length=1, description="Contact last name")
    email: str = Field(..., min_length=3, description="Contact email")

    # Scoring attributes
    sector: SectorType = Field(..., description="Business sector")
    region: RegionType = Field(..., description="Italian region of the registered office")
    company_size: CompanySize = Field(..., description="Size class: micro, small, medium, large")
    investment_goal: InvestmentGoal = Field(..., description="Main investment goal")

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_record(self) -> dict:
        """Row payload for the companies table (snake_case, no id)."""
        return self.model_dump(
            mode="json",
            exclude={"id", "created_at", "updated_at"},
        )
