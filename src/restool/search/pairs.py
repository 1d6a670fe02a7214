"""Two-component searches: parallel pair, series pair and ratio pair.

Each search is a bounded monotonic sweep. One component steps through the
series while the other is recomputed as the exact complement and rounded to
the nearest series value, so only O(1) work happens per step.
"""

from __future__ import annotations

import logging

from ..rounding import round_ceil, round_floor, round_nearest
from ..series import Series, get_series
from ..value import SeriesValue
from .core import (
    SWEEP_LIMIT,
    SWEEP_START,
    Candidate,
    MatchCallback,
    SearchResult,
    SearchState,
    Topology,
    check_positive,
    check_threshold,
    is_exact,
    relative_error,
)

logger = logging.getLogger(__name__)


def target_in_series(target: float, series: Series | str | None = None) -> bool:
    """Return True when ``target`` is itself a value of ``series``.

    The parallel and series searches step past such a target, so they report
    a two-resistor combination rather than a single part.
    """
    r = check_positive(target, "Target resistance")
    return is_exact(round_ceil(r, get_series(series)), r)


def find_parallel_pair(
    target: float,
    series: Series | str | None = None,
    threshold: float = 0.0,
    on_match: MatchCallback | None = None,
) -> SearchResult:
    """Find two series values whose parallel combination approximates ``target``.

    The sweep starts at the ceiling of ``target`` and walks the first resistor
    upwards, pairing it with the nearest value to the exact complement
    ``a*r/(a-r)``. It stops once the first resistor exceeds the second, since
    the problem is symmetric in the two.

    If ``target`` is itself a series value the first resistor starts one step
    above it, so the search reports a genuine pair instead of a single part
    with an open circuit.

    Args:
        target: Desired resistance, strictly positive.
        series: Series (or its name) to draw values from. Defaults to E24.
        threshold: Maximum relative error for a pair to be reported as a match.
        on_match: Called with every pair whose error is within ``threshold``.

    Returns:
        SearchResult with the best pair and all reported matches.

    Raises:
        InvalidInputError: If ``target`` is not positive or ``threshold`` is
            outside ``[0, 0.101]``.
    """
    r = check_positive(target, "Target resistance")
    et = check_threshold(threshold)
    table = get_series(series)

    a = round_ceil(r, table)
    in_series = is_exact(a, r)
    if in_series:
        logger.info("%g is present in %s; searching pairs without a 0R or open circuit", r, table.name)
        a = a.increment()
    b = _parallel_complement(a, r, table)

    state = SearchState(et, Candidate((a, b), _parallel_error(a, b, r)), on_match)
    while a.evaluate() <= b.evaluate():
        state.consider((a, b), _parallel_error(a, b, r))
        a = a.increment()
        b = _parallel_complement(a, r, table)

    logger.debug("Parallel search for %g in %s finished after %d steps", r, table.name, state.iterations)
    return state.result(Topology.PARALLEL, (r,), target_in_series=in_series)


def find_series_pair(
    target: float,
    series: Series | str | None = None,
    threshold: float = 0.0,
    on_match: MatchCallback | None = None,
) -> SearchResult:
    """Find two series values whose sum approximates ``target``.

    Mirror image of :func:`find_parallel_pair`: the first resistor starts at
    the floor of ``target`` and walks downwards while the second one is the
    nearest value to the remainder. The sweep ends when the second resistor
    overtakes the first.
    """
    r = check_positive(target, "Target resistance")
    et = check_threshold(threshold)
    table = get_series(series)

    a = round_floor(r, table)
    in_series = is_exact(a, r)
    if in_series:
        logger.info("%g is present in %s; searching pairs without a 0R", r, table.name)
        a = a.decrement()
    b = _series_complement(a, r, table)

    state = SearchState(et, Candidate((a, b), _series_error(a, b, r)), on_match)
    while a.evaluate() >= b.evaluate():
        state.consider((a, b), _series_error(a, b, r))
        a = a.decrement()
        b = _series_complement(a, r, table)

    logger.debug("Series search for %g in %s finished after %d steps", r, table.name, state.iterations)
    return state.result(Topology.SERIES, (r,), target_in_series=in_series)


def find_ratio_pair(
    ratio: float,
    series: Series | str | None = None,
    threshold: float = 0.0,
    on_match: MatchCallback | None = None,
) -> SearchResult:
    """Find two series values ``a, b`` with ``a / b`` close to ``ratio``.

    The denominator sweeps every series value from 1k up to and including 10k;
    the numerator is the nearest series value to ``b * ratio``. The absolute
    scale is fixed and only anchors the sweep to sensible part values.
    """
    r = check_positive(ratio, "Target ratio")
    et = check_threshold(threshold)
    table = get_series(series)

    a = round_nearest(SWEEP_START * r, table)
    b = round_nearest(SWEEP_START, table)

    state = SearchState(et, Candidate((a, b), _ratio_error(a, b, r)), on_match)
    while b.evaluate() <= SWEEP_LIMIT:
        state.consider((a, b), _ratio_error(a, b, r))
        b = b.increment()
        a = round_nearest(b.evaluate() * r, table)

    logger.debug("Ratio search for %g in %s finished after %d steps", r, table.name, state.iterations)
    return state.result(Topology.RATIO, (r,))


def _parallel_complement(a: SeriesValue, r: float, series: Series) -> SeriesValue:
    av = a.evaluate()
    return round_nearest(av * r / (av - r), series)


def _series_complement(a: SeriesValue, r: float, series: Series) -> SeriesValue:
    return round_nearest(max(r - a.evaluate(), 0.0), series)


def _parallel_error(a: SeriesValue, b: SeriesValue, r: float) -> float:
    av, bv = a.evaluate(), b.evaluate()
    return relative_error(av * bv / (av + bv), r)


def _series_error(a: SeriesValue, b: SeriesValue, r: float) -> float:
    return relative_error(a.evaluate() + b.evaluate(), r)


def _ratio_error(a: SeriesValue, b: SeriesValue, r: float) -> float:
    return relative_error(a.evaluate() / b.evaluate(), r)
