"""Combination searches over preferred series values."""

from __future__ import annotations

from .core import (
    MAX_ERROR_THRESHOLD,
    MAX_SEARCH_VALUE,
    MIN_SEARCH_VALUE,
    SWEEP_LIMIT,
    SWEEP_START,
    Candidate,
    MatchCallback,
    SearchResult,
    Topology,
    check_threshold,
    relative_error,
)
from .pairs import find_parallel_pair, find_ratio_pair, find_series_pair, target_in_series
from .weighted import find_divider, find_weighted_set

__all__ = [
    "MAX_ERROR_THRESHOLD",
    "MAX_SEARCH_VALUE",
    "MIN_SEARCH_VALUE",
    "SWEEP_LIMIT",
    "SWEEP_START",
    "Candidate",
    "MatchCallback",
    "SearchResult",
    "Topology",
    "check_threshold",
    "relative_error",
    "find_parallel_pair",
    "find_series_pair",
    "find_ratio_pair",
    "find_weighted_set",
    "find_divider",
    "target_in_series",
]
