"""Plain-text reporting for match results."""

from .generator import (
    BAND_LABELS,
    filter_by_priority,
    format_report,
    group_by_band,
    score_band,
)

__all__ = [
    "BAND_LABELS",
    "filter_by_priority",
    "format_report",
    "group_by_band",
    "score_band",
]
