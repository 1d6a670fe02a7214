"""restool: preferred-value resistor combination finder.

Searches the IEC 60063 series (E6 ... E192) for parallel pairs, series pairs,
ratios and weighted sets of standard resistors that best approximate a
requested value.

Public API
----------
- :func:`get_series` - Look up a built-in series by name
- :func:`round_nearest`, :func:`round_ceil`, :func:`round_floor` - Map a real
  value onto a :class:`SeriesValue`
- :func:`find_parallel_pair`, :func:`find_series_pair` - Two-resistor
  approximations of a resistance
- :func:`find_ratio_pair`, :func:`find_weighted_set`, :func:`find_divider` -
  Ratio and weighted-set searches

Example
-------
>>> from restool import find_parallel_pair
>>> result = find_parallel_pair(12_340, "E24", threshold=0.01)
>>> [value.evaluate() for value in result.values]  # doctest: +SKIP
"""

from __future__ import annotations

__version__ = "0.1.0"

from restool.errors import InvalidInputError, RestoolError, SeriesInvariantError
from restool.rounding import RoundingMode, round_ceil, round_floor, round_nearest, round_to_series
from restool.search import (
    Candidate,
    SearchResult,
    Topology,
    find_divider,
    find_parallel_pair,
    find_ratio_pair,
    find_series_pair,
    find_weighted_set,
)
from restool.series import DEFAULT_SERIES_NAME, SERIES, Series, get_series
from restool.value import SeriesValue

__all__ = [
    "__version__",
    # Errors
    "RestoolError",
    "InvalidInputError",
    "SeriesInvariantError",
    # Series tables
    "DEFAULT_SERIES_NAME",
    "SERIES",
    "Series",
    "SeriesValue",
    "get_series",
    # Rounding
    "RoundingMode",
    "round_nearest",
    "round_ceil",
    "round_floor",
    "round_to_series",
    # Searches
    "Candidate",
    "SearchResult",
    "Topology",
    "find_parallel_pair",
    "find_series_pair",
    "find_ratio_pair",
    "find_weighted_set",
    "find_divider",
]
