"""Exception hierarchy shared by the rounding engine, searches and CLI."""

from __future__ import annotations


class RestoolError(Exception):
    """Base class for all restool errors."""


class InvalidInputError(RestoolError, ValueError):
    """Raised when a caller supplies a value the engine cannot work with.

    Covers negative or non-finite resistances, thresholds outside the
    accepted range, malformed numeric strings and unknown series names.
    """


class SeriesInvariantError(RestoolError, AssertionError):
    """Raised when a mantissa table or a scan over it breaks its invariants.

    This signals a defect in a series table or in the rounding engine and
    is never caught inside the package.
    """
