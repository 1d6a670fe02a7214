from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import InvalidInputError
from ..value import SeriesValue

MAX_ERROR_THRESHOLD = 0.101

# Relative tolerance under which a series value counts as equal to the target.
EXACT_REL_TOL = 1e-8

# Fixed absolute scale for ratio and weighted sweeps: start near 1k, stop at 10k.
SWEEP_START = 1_000.0
SWEEP_LIMIT = 10_000.0

# Accepted range of search targets, ratios and weights; keeps products of two
# values and the 1k-10k sweep scaling inside float range.
MIN_SEARCH_VALUE = 1e-100
MAX_SEARCH_VALUE = 1e100


class Topology(str, Enum):
    PARALLEL = "parallel"
    SERIES = "series"
    RATIO = "ratio"
    WEIGHTED = "weighted"
    DIVIDER = "divider"


@dataclass(frozen=True)
class Candidate:
    values: tuple[SeriesValue, ...]
    error: float

    def evaluated(self) -> tuple[float, ...]:
        return tuple(value.evaluate() for value in self.values)

    def to_dict(self) -> dict[str, Any]:
        return {"values": list(self.evaluated()), "error": self.error}


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one search call: the best candidate plus every reported match."""

    topology: Topology
    series_name: str
    targets: tuple[float, ...]
    best: Candidate
    matches: tuple[Candidate, ...]
    threshold: float
    iterations: int
    target_in_series: bool = False

    @property
    def values(self) -> tuple[SeriesValue, ...]:
        return self.best.values

    @property
    def error(self) -> float:
        return self.best.error

    def to_dict(self) -> dict[str, Any]:
        return {
            "topology": self.topology.value,
            "series": self.series_name,
            "targets": list(self.targets),
            "threshold": self.threshold,
            "iterations": self.iterations,
            "target_in_series": self.target_in_series,
            "best": self.best.to_dict(),
            "matches": [match.to_dict() for match in self.matches],
        }


MatchCallback = Callable[[Candidate], None]


@dataclass
class SearchState:
    """Working set of a single search: best-so-far candidate and reported matches."""

    threshold: float
    best: Candidate
    on_match: MatchCallback | None = None
    matches: list[Candidate] = field(default_factory=list)
    iterations: int = 0

    def consider(self, values: Sequence[SeriesValue], error: float) -> None:
        self.iterations += 1
        candidate = Candidate(tuple(values), error)
        if error <= self.threshold:
            self.matches.append(candidate)
            if self.on_match is not None:
                self.on_match(candidate)
        if error < self.best.error:
            self.best = candidate

    def result(
        self,
        topology: Topology,
        targets: Sequence[float],
        *,
        target_in_series: bool = False,
    ) -> SearchResult:
        return SearchResult(
            topology=topology,
            series_name=self.best.values[0].series.name,
            targets=tuple(targets),
            best=self.best,
            matches=tuple(self.matches),
            threshold=self.threshold,
            iterations=self.iterations,
            target_in_series=target_in_series,
        )


def relative_error(computed: float, target: float) -> float:
    """Return ``|computed / target - 1|``."""
    return abs(computed / target - 1.0)


def is_exact(value: SeriesValue, target: float) -> bool:
    return math.isclose(value.evaluate(), target, rel_tol=EXACT_REL_TOL)


def check_threshold(threshold: float) -> float:
    """Validate an error threshold, returning it as float."""
    if isinstance(threshold, bool):
        raise InvalidInputError("Error threshold does not accept boolean values.")
    try:
        number = float(threshold)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Error threshold must be a number, got {threshold!r}") from exc
    if math.isnan(number) or not 0.0 <= number <= MAX_ERROR_THRESHOLD:
        raise InvalidInputError(
            f"Error threshold must be within [0, {MAX_ERROR_THRESHOLD}], got {threshold!r}"
        )
    return number


def check_positive(value: float, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} does not accept boolean values.")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from exc
    if math.isnan(number) or math.isinf(number) or number <= 0.0:
        raise InvalidInputError(f"{name} must be a positive finite number, got {value!r}")
    if not MIN_SEARCH_VALUE <= number <= MAX_SEARCH_VALUE:
        raise InvalidInputError(
            f"{name} must be within [{MIN_SEARCH_VALUE:g}, {MAX_SEARCH_VALUE:g}], got {value!r}"
        )
    return number
