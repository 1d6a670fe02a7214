from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Annotated

from pydantic import BeforeValidator, WithJsonSchema

from .errors import InvalidInputError

_NUMBER = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_RESISTANCE_RE = re.compile(rf"^\s*({_NUMBER})\s*([numµkMG])?(\d+)?\s*$")
_THRESHOLD_RE = re.compile(rf"^\s*({_NUMBER})\s*(%)?\s*$")

# Multipliers for SI suffixes; case matters ("m" is milli, "M" is mega).
_SI_SCALES: dict[str, Decimal] = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "µ": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
}

# (lower bound, multiplier, prefix) in descending order of magnitude.
_SI_PREFIXES: tuple[tuple[float, float, str], ...] = (
    (1e9, 1e-9, "G"),
    (1e6, 1e-6, "M"),
    (1e3, 1e-3, "k"),
    (1.0, 1.0, ""),
    (1e-3, 1e3, "m"),
    (1e-6, 1e6, "u"),
)

_RESISTANCE_JSON_SCHEMA = {
    "anyOf": [
        {"type": "number"},
        {
            "type": "string",
            "pattern": r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*([numµkMG](\d+)?)?\s*$",
        },
    ],
    "title": "Resistance",
    "description": "A number, or a string with an optional SI suffix such as '12.34k' or '4k7'.",
}

_THRESHOLD_JSON_SCHEMA = {
    "anyOf": [
        {"type": "number", "minimum": 0},
        {"type": "string", "pattern": r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*%?\s*$"},
    ],
    "title": "ErrorThreshold",
    "description": "Relative error as a fraction (0.01) or a percentage string ('1%').",
}


def parse_resistance(value: str | int | float) -> float:
    """Parse a value with an optional SI suffix.

    Accepts:
      - Numbers: returned as float
      - "12.34", "1e3": plain numbers
      - "12.34k", "4.7M", "100m": SI suffix n/u/m/k/M/G (case sensitive)
      - "12k34", "4k7": digits after the suffix are the decimal fraction
    """
    if isinstance(value, bool):
        raise InvalidInputError("Resistance does not accept boolean values.")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise InvalidInputError(f"Unsupported resistance value: {value!r}")
    text = value.strip()
    if not text:
        raise InvalidInputError("Resistance requires a numeric value.")
    match = _RESISTANCE_RE.match(text)
    if not match:
        raise InvalidInputError(
            f"Resistance must be formatted like '12.34', '12.34k' or '12k34', got {value!r}"
        )
    number_text, suffix, fraction = match.groups()
    if fraction is not None:
        if not number_text.lstrip("+-").isdigit():
            raise InvalidInputError(f"Resistance {value!r} mixes a decimal point with an infix suffix")
        number_text = f"{number_text}.{fraction}"
    number = _decimal_from_text(number_text, "Resistance")
    if suffix is not None:
        number *= _SI_SCALES[suffix]
    return float(number)


def parse_error_threshold(value: str | int | float) -> float:
    """Parse a relative error given as a fraction ("0.03") or a percentage ("3%")."""
    if isinstance(value, bool):
        raise InvalidInputError("Error threshold does not accept boolean values.")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise InvalidInputError(f"Unsupported error threshold: {value!r}")
    match = _THRESHOLD_RE.match(value)
    if not match:
        raise InvalidInputError(f"Error threshold must be formatted like '0.01' or '1%', got {value!r}")
    number_text, percent = match.groups()
    number = _decimal_from_text(number_text, "Error threshold")
    if percent:
        number /= Decimal(100)
    return float(number)


def format_si(value: float) -> str:
    """Format ``value`` with ``%g`` and an SI prefix, e.g. ``12340.0 -> '12.34k'``."""
    if value == 0:
        return "0"
    if value < 0:
        return "-" + format_si(-value)
    for lower, multiplier, prefix in _SI_PREFIXES:
        if value >= lower:
            return f"{value * multiplier:g}{prefix}"
    return f"{value * 1e9:g}n"


def format_error(error: float) -> str:
    """Format a relative error as a percentage with two significant digits."""
    return f"{error * 100:.2g}%"


def _decimal_from_text(text: str, type_name: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise InvalidInputError(f"Invalid numeric value for {type_name}: {text!r}") from exc


Resistance = Annotated[float, BeforeValidator(parse_resistance), WithJsonSchema(_RESISTANCE_JSON_SCHEMA)]
ErrorThreshold = Annotated[float, BeforeValidator(parse_error_threshold), WithJsonSchema(_THRESHOLD_JSON_SCHEMA)]
