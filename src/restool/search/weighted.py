"""N-component searches: weighted sets and resistive dividers.

The weighted search is a greedy hill climb. Starting from every value scaled
so that the lightest weight sits at 1k, it repeatedly increments only the
component with the lowest value/weight ratio, which is the one that most
under-shoots the common scale. The spread of the ratios is the error. The
climb stops once the smallest component has reached 10k.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..errors import InvalidInputError
from ..rounding import round_nearest
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
)

logger = logging.getLogger(__name__)


def find_weighted_set(
    weights: Sequence[float],
    series: Series | str | None = None,
    threshold: float = 0.0,
    on_match: MatchCallback | None = None,
) -> SearchResult:
    """Find one series value per weight so that ``value / weight`` is as uniform as possible.

    The error of a set is ``max(v/w) / min(v/w) - 1``. With weights
    ``1 2 4 8 16`` this yields the resistors of a 5-bit binary ladder.

    Raises:
        InvalidInputError: If fewer than two weights are given, any weight is
            not positive, or ``threshold`` is outside ``[0, 0.101]``.
    """
    checked = _check_weights(weights, "Weight", minimum=2)
    et = check_threshold(threshold)
    table = get_series(series)
    return _climb(checked, table, et, on_match, Topology.WEIGHTED)


def find_divider(
    voltages: Sequence[float],
    series: Series | str | None = None,
    threshold: float = 0.0,
    on_match: MatchCallback | None = None,
) -> SearchResult:
    """Search a resistive divider for ``voltages``; the first one is the input voltage.

    Voltages must be given in strictly decreasing order.
    """
    checked = _check_weights(voltages, "Voltage", minimum=2)
    for higher, lower in zip(checked, checked[1:]):
        if lower >= higher:
            raise InvalidInputError(
                f"Divider voltages must be strictly decreasing, got {lower:g} after {higher:g}"
            )
    et = check_threshold(threshold)
    table = get_series(series)
    # TODO: derive per-resistor weights from the tap voltages once the divider model is settled.
    logger.warning("Divider weights are provisional: voltages are used directly as resistor weights")
    return _climb(checked, table, et, on_match, Topology.DIVIDER)


def _climb(
    weights: tuple[float, ...],
    series: Series,
    threshold: float,
    on_match: MatchCallback | None,
    topology: Topology,
) -> SearchResult:
    lightest = min(weights)
    values = [round_nearest(SWEEP_START * w / lightest, series) for w in weights]

    state = SearchState(threshold, Candidate(tuple(values), _spread(values, weights)[0]), on_match)
    lowest = 0.0
    while lowest < SWEEP_LIMIT:
        lowest = min(value.evaluate() for value in values)
        error, minp = _spread(values, weights)
        state.consider(values, error)
        values[minp] = values[minp].increment()

    logger.debug(
        "%s search over %d weights in %s finished after %d steps",
        topology.value.capitalize(),
        len(weights),
        series.name,
        state.iterations,
    )
    return state.result(topology, weights)


def _spread(values: Sequence[SeriesValue], weights: Sequence[float]) -> tuple[float, int]:
    """Return the ratio spread error and the first index holding the minimum ratio."""
    ratios = [value.evaluate() / weight for value, weight in zip(values, weights)]
    minp = min(range(len(ratios)), key=ratios.__getitem__)
    return max(ratios) / ratios[minp] - 1.0, minp


def _check_weights(weights: Sequence[float], name: str, *, minimum: int) -> tuple[float, ...]:
    if isinstance(weights, (str, bytes)):
        raise InvalidInputError(f"{name}s must be a sequence of numbers, got {weights!r}")
    checked = tuple(check_positive(weight, name) for weight in weights)
    if len(checked) < minimum:
        raise InvalidInputError(f"At least {minimum} {name.lower()}s are required, got {len(checked)}")
    return checked
