"""Related investment goals used for partial goal credit.

The table is not symmetric: green lists innovation but innovation does
not list green, and international lists training but not the reverse.
"""

from typing import Iterable

RELATED_GOALS: dict[str, list[str]] = {
    "digitalization": ["innovation", "research"],
    "innovation": ["digitalization", "research"],
    "green": ["innovation", "expansion"],
    "research": ["innovation", "digitalization"],
    "international": ["expansion", "training"],
    "expansion": ["international", "green"],
    "training": ["digitalization", "innovation"],
}


def get_related_goals(goal: str) -> list[str]:
    """Goals considered close to ``goal`` (empty for unmapped goals such as 'other')."""
    return RELATED_GOALS.get(goal, [])


def has_related_goal(goal: str, eligible_goals: Iterable[str]) -> bool:
    """True when any eligible goal is related to ``goal``."""
    related = get_related_goals(goal)
    return any(g in related for g in eligible_goals)
