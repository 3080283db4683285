"""Categorical enumerations shared by company profiles and bandi.

Values match the record store's enum columns.
"""

from typing import Literal

SectorType = Literal[
    "tech", "manufacturing", "services", "retail", "healthcare", "construction",
    "food", "logistics", "energy", "agriculture", "tourism", "other",
]

RegionType = Literal[
    "lombardia", "lazio", "veneto", "emilia-romagna", "piemonte", "toscana",
    "campania", "sicilia", "puglia", "calabria", "sardegna", "friuli",
    "liguria", "marche", "abruzzo", "umbria", "basilicata", "molise",
    "trentino", "valle-aosta",
]

CompanySize = Literal["micro", "small", "medium", "large"]

InvestmentGoal = Literal[
    "digitalization", "research", "green", "international", "training",
    "innovation", "expansion", "other",
]

ContributionType = Literal[
    "fondo_perduto", "finanziamento_agevolato", "credito_imposta", "misto",
]

BandoStatus = Literal["active", "closed", "coming_soon", "draft"]

ConfidenceLevel = Literal["high", "medium", "low"]

Priority = Literal["urgent", "high", "normal", "low"]


CONTRIBUTION_TYPES = {
    "fondo_perduto": "Fondo Perduto",
    "finanziamento_agevolato": "Finanziamento Agevolato",
    "credito_imposta": "Credito d'Imposta",
    "misto": "Misto",
}

PRIORITIES = ("urgent", "high", "normal", "low")
