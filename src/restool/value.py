"""Normalized representation of a resistance drawn from a preferred series."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidInputError, SeriesInvariantError
from .series import Series

# Largest power of ten applied in one multiplication; 10.0**308 is the last finite one.
_POW10_STEP = 300


def scale10(value: float, exponent: int) -> float:
    """Return ``value * 10**exponent`` without forming an out-of-range power of ten.

    Negative exponents divide by the exact positive power, which keeps
    decimal mantissas such as ``4.7e-3`` closer than a multiplication would.
    """
    while exponent > _POW10_STEP:
        value *= 10.0**_POW10_STEP
        exponent -= _POW10_STEP
    while exponent < -_POW10_STEP:
        value /= 10.0**_POW10_STEP
        exponent += _POW10_STEP
    if exponent >= 0:
        return value * 10.0**exponent
    return value / 10.0 ** (-exponent)


@dataclass(frozen=True)
class SeriesValue:
    """A value ``series.mantissas[index] * 10**exponent``, or zero.

    Instances are immutable; :meth:`increment` and :meth:`decrement` return
    the neighbouring value and carry across decade boundaries, so stepping
    walks a total order isomorphic to the integers.
    """

    series: Series
    index: int = 0
    exponent: int = 0
    is_zero: bool = False

    def __post_init__(self) -> None:
        if not self.is_zero and not 0 <= self.index < self.series.n:
            raise SeriesInvariantError(
                f"Index {self.index} is outside series {self.series.name} (n={self.series.n})"
            )

    @classmethod
    def zero(cls, series: Series) -> SeriesValue:
        """Return the zero sentinel for ``series``."""
        return cls(series=series, is_zero=True)

    @classmethod
    def normalized(cls, series: Series, position: int, exponent: int) -> SeriesValue:
        """Build a value from a scan position in ``[0, n]``, folding ``n`` into the next decade."""
        if position == series.n:
            return cls(series=series, index=0, exponent=exponent + 1)
        return cls(series=series, index=position, exponent=exponent)

    @property
    def mantissa(self) -> float:
        return 0.0 if self.is_zero else self.series.mantissas[self.index]

    def evaluate(self) -> float:
        """Return the numeric value in ohms (or whatever unit the caller uses)."""
        if self.is_zero:
            return 0.0
        return scale10(self.series.mantissas[self.index], self.exponent)

    def increment(self) -> SeriesValue:
        """Return the next larger value in the series."""
        self._require_nonzero("increment")
        index = self.index + 1
        if index >= self.series.n:
            return SeriesValue(self.series, 0, self.exponent + 1)
        return SeriesValue(self.series, index, self.exponent)

    def decrement(self) -> SeriesValue:
        """Return the next smaller value in the series."""
        self._require_nonzero("decrement")
        index = self.index - 1
        if index < 0:
            return SeriesValue(self.series, self.series.n - 1, self.exponent - 1)
        return SeriesValue(self.series, index, self.exponent)

    def _require_nonzero(self, operation: str) -> None:
        if self.is_zero:
            raise InvalidInputError(f"Cannot {operation} the zero value of series {self.series.name}")

    def __float__(self) -> float:
        return self.evaluate()

    def to_dict(self) -> dict[str, object]:
        return {
            "series": self.series.name,
            "index": self.index,
            "exponent": self.exponent,
            "is_zero": self.is_zero,
            "value": self.evaluate(),
        }
