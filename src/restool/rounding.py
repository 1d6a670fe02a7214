"""Conversion of arbitrary non-negative reals onto a preferred series.

Three policies are provided:

- :func:`round_nearest` picks the neighbour with the smaller multiplicative
  distance (ties go to the lower value),
- :func:`round_ceil` picks the smallest series value ``>=`` the input,
- :func:`round_floor` picks the largest series value ``<=`` the input.

All three map ``0`` onto the zero sentinel and reject negative or non-finite
input, or input outside ``[MIN_VALUE, MAX_VALUE]``, with
:class:`~restool.errors.InvalidInputError`.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from enum import Enum

from .errors import InvalidInputError, SeriesInvariantError
from .series import DECADE, Series, get_series
from .value import SeriesValue, scale10

# Relative tolerance under which a normalized mantissa counts as an exact table hit.
MANTISSA_REL_TOL = 1e-9

# Non-zero inputs must lie in this range so every rounded result, including a
# ceiling carried into the next decade, is a finite normal float.
MIN_VALUE = 1e-300
MAX_VALUE = 1e300


class RoundingMode(str, Enum):
    NEAREST = "nearest"
    CEIL = "ceil"
    FLOOR = "floor"


def round_nearest(value: float, series: Series | str | None = None) -> SeriesValue:
    """Round ``value`` to the series value closest in ratio."""
    table = get_series(series)
    checked = _check_input(value)
    if checked == 0.0:
        return SeriesValue.zero(table)
    mantissa, exponent = normalize(checked)
    position, exact = _locate(mantissa, table)
    if not exact and position > 0:
        lower = table.mantissa_at(position - 1)
        upper = table.mantissa_at(position)
        if mantissa / lower <= upper / mantissa:
            position -= 1
    return SeriesValue.normalized(table, position, exponent)


def round_ceil(value: float, series: Series | str | None = None) -> SeriesValue:
    """Return the smallest series value that is not below ``value``."""
    table = get_series(series)
    checked = _check_input(value)
    if checked == 0.0:
        return SeriesValue.zero(table)
    mantissa, exponent = normalize(checked)
    position, _exact = _locate(mantissa, table)
    return SeriesValue.normalized(table, position, exponent)


def round_floor(value: float, series: Series | str | None = None) -> SeriesValue:
    """Return the largest series value that is not above ``value``."""
    table = get_series(series)
    checked = _check_input(value)
    if checked == 0.0:
        return SeriesValue.zero(table)
    mantissa, exponent = normalize(checked)
    position, exact = _locate(mantissa, table)
    if not exact:
        if position == 0:
            raise SeriesInvariantError(
                f"Mantissa {mantissa!r} lies below the first entry of {table.name}"
            )
        position -= 1
    return SeriesValue.normalized(table, position, exponent)


_ROUNDERS: dict[RoundingMode, Callable[[float, Series | str | None], SeriesValue]] = {
    RoundingMode.NEAREST: round_nearest,
    RoundingMode.CEIL: round_ceil,
    RoundingMode.FLOOR: round_floor,
}


def round_to_series(
    value: float,
    series: Series | str | None = None,
    mode: RoundingMode | str = RoundingMode.NEAREST,
) -> SeriesValue:
    """Dispatch to one of the rounding policies by :class:`RoundingMode`."""
    try:
        rounding_mode = RoundingMode(mode)
    except ValueError:
        raise InvalidInputError(f"Unknown rounding mode: {mode!r}") from None
    return _ROUNDERS[rounding_mode](value, series)


def normalize(value: float) -> tuple[float, int]:
    """Split a positive ``value`` into ``(mantissa, exponent)`` with mantissa in ``[1, 10)``."""
    exponent = math.floor(math.log10(value))
    mantissa = scale10(value, -exponent)
    # log10 can land one decade off near exact powers of ten.
    while mantissa >= DECADE:
        mantissa /= DECADE
        exponent += 1
    while mantissa < 1.0:
        mantissa *= DECADE
        exponent -= 1
    return mantissa, exponent


def _locate(mantissa: float, series: Series) -> tuple[int, bool]:
    """Return the first scan position with a mantissa ``>=`` the input, and whether it is a hit.

    Entries within :data:`MANTISSA_REL_TOL` of the input count as equal, so
    decimal inputs such as ``0.3`` are not pushed to a neighbour by binary
    rounding noise.
    """
    position = series.search(mantissa)
    if position > 0 and math.isclose(series.mantissa_at(position - 1), mantissa, rel_tol=MANTISSA_REL_TOL):
        return position - 1, True
    if math.isclose(series.mantissa_at(position), mantissa, rel_tol=MANTISSA_REL_TOL):
        return position, True
    return position, False


def _check_input(value: float) -> float:
    if isinstance(value, bool):
        raise InvalidInputError("Resistance does not accept boolean values.")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Resistance must be a number, got {value!r}") from exc
    if math.isnan(number) or math.isinf(number):
        raise InvalidInputError(f"Resistance must be finite, got {value!r}")
    if number < 0:
        raise InvalidInputError(f"Resistance must not be negative, got {value!r}")
    if number != 0.0 and not MIN_VALUE <= number <= MAX_VALUE:
        raise InvalidInputError(
            f"Resistance must be zero or within [{MIN_VALUE:g}, {MAX_VALUE:g}], got {value!r}"
        )
    return number
