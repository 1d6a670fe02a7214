"""Request-level API on top of the rounding engine and searches.

Requests are pydantic models, so user input (strings such as ``"12k34"`` or
``"1%"``) is parsed and range-checked before any search runs. Each entry point
returns immutable result records.

Example
-------
>>> from restool.api import CombinationRequest, find_combinations
>>> report = find_combinations(CombinationRequest(target="150", series="E24"))
>>> report.parallel.error < 0.01
True
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rounding import round_ceil, round_floor, round_nearest
from .search import (
    MAX_ERROR_THRESHOLD,
    MatchCallback,
    SearchResult,
    find_divider,
    find_parallel_pair,
    find_ratio_pair,
    find_series_pair,
    find_weighted_set,
)
from .series import DEFAULT_SERIES_NAME, get_series
from .units import ErrorThreshold, Resistance
from .value import SeriesValue


class _RequestBase(BaseModel):
    """Base model with strict validation - no extra fields allowed."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    series: str = Field(DEFAULT_SERIES_NAME, description="Preferred series name (E6 ... E192)")
    threshold: ErrorThreshold = Field(
        0.0,
        ge=0.0,
        le=MAX_ERROR_THRESHOLD,
        description="Maximum relative error for a combination to be reported as a match",
    )

    @field_validator("series", mode="before")
    @classmethod
    def _canonical_series(cls, value: Any) -> str:
        return get_series(str(value)).name


class CombinationRequest(_RequestBase):
    """Approximate a single resistance with a parallel and a series pair."""

    target: Resistance = Field(..., gt=0.0, description="Target resistance")


class RatioRequest(_RequestBase):
    """Approximate a ratio (one value, read as ``value : 1``) or a set of weights."""

    weights: list[Resistance] = Field(..., min_length=1, description="Target ratio or relative weights")

    @field_validator("weights")
    @classmethod
    def _positive_weights(cls, weights: list[float]) -> list[float]:
        if any(weight <= 0 for weight in weights):
            raise ValueError("weights must be positive")
        return weights


class DividerRequest(_RequestBase):
    """Search a resistive divider; the first voltage is the input."""

    voltages: list[Resistance] = Field(..., min_length=2, description="Input voltage followed by outputs")


class RoundRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    value: Resistance = Field(..., ge=0.0)
    series: str = DEFAULT_SERIES_NAME

    @field_validator("series", mode="before")
    @classmethod
    def _canonical_series(cls, value: Any) -> str:
        return get_series(str(value)).name


@dataclass(frozen=True)
class CombinationReport:
    parallel: SearchResult
    series: SearchResult

    def to_dict(self) -> dict[str, Any]:
        return {"parallel": self.parallel.to_dict(), "series": self.series.to_dict()}


@dataclass(frozen=True)
class RoundingReport:
    value: float
    floor: SeriesValue
    nearest: SeriesValue
    ceil: SeriesValue

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "series": self.nearest.series.name,
            "floor": self.floor.evaluate(),
            "nearest": self.nearest.evaluate(),
            "ceil": self.ceil.evaluate(),
        }


def find_combinations(
    request: CombinationRequest,
    on_match: MatchCallback | None = None,
) -> CombinationReport:
    """Run the parallel-pair search, then the series-pair search, for one target."""
    parallel = find_parallel_pair(request.target, request.series, request.threshold, on_match)
    series = find_series_pair(request.target, request.series, request.threshold, on_match)
    return CombinationReport(parallel=parallel, series=series)


def find_ratio_set(
    request: RatioRequest,
    on_match: MatchCallback | None = None,
) -> SearchResult:
    """Search a ratio pair for one weight, or a weighted set for several."""
    if len(request.weights) == 1:
        return find_ratio_pair(request.weights[0], request.series, request.threshold, on_match)
    return find_weighted_set(request.weights, request.series, request.threshold, on_match)


def find_divider_set(
    request: DividerRequest,
    on_match: MatchCallback | None = None,
) -> SearchResult:
    return find_divider(request.voltages, request.series, request.threshold, on_match)


def round_value(request: RoundRequest) -> RoundingReport:
    """Return the floor, nearest and ceiling series values of ``request.value``."""
    series = get_series(request.series)
    return RoundingReport(
        value=request.value,
        floor=round_floor(request.value, series),
        nearest=round_nearest(request.value, series),
        ceil=round_ceil(request.value, series),
    )
