"""Quantity and ingredient-name parsing for free-text recipe ingredients.

Quantities produced by the AI generator or typed by users look like
``"2 cups"``, ``"1.5 lb"``, ``"3"`` or ``"to taste"``. Only the leading
number is treated as a magnitude; everything after it is the unit. Text
without a leading number has no magnitude at all and is excluded from
grocery aggregation by the caller.
"""

import re
from decimal import Decimal

_LEADING_NUMBER = re.compile(r"^([\d.]+)")
_NUMBER_AND_UNIT = re.compile(r"^[\d.]+(.*)", re.S)
_FLOAT_PREFIX = re.compile(r"^\d*\.?\d*")


def _as_text(value: str | None) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"Expected quantity text, got {type(value).__name__}")
    return value


def _lenient_float(token: str) -> float:
    """
    Parse the longest valid float prefix of a run of digits and dots.

    "1.5.2" -> 1.5, "2." -> 2.0, "." -> 0.0
    """
    prefix = _FLOAT_PREFIX.match(token).group(0)
    if not prefix or prefix == ".":
        return 0.0
    return float(prefix)


def parse_quantity(quantity_str: str | None) -> float:
    """
    Parse the leading numeric magnitude of a quantity string.

    Examples:
        "2 cups" -> 2.0
        "1.5lb" -> 1.5
        "to taste" -> 0.0
    """
    text = _as_text(quantity_str)
    match = _LEADING_NUMBER.match(text)
    if not match:
        return 0.0
    return _lenient_float(match.group(1))


def parse_unit(quantity_str: str | None) -> str:
    """
    Parse the unit that follows the leading number of a quantity string.

    Examples:
        "2 cups" -> "cups"
        "500g" -> "g"
        "3" -> ""
        "pinch of salt" -> ""
    """
    text = _as_text(quantity_str)
    match = _NUMBER_AND_UNIT.match(text)
    if not match:
        return ""
    return match.group(1).strip()


def extract_quantity_and_unit(quantity_str: str | None) -> tuple[float, str]:
    """Extract both the magnitude and the unit from a combined quantity string."""
    return parse_quantity(quantity_str), parse_unit(quantity_str)


def normalize_ingredient_name(name: str | None) -> str:
    """
    Normalize an ingredient name into its aggregation key.

    Lowercase and trimmed; display casing is kept separately by the caller.
    """
    return _as_text(name).strip().lower()


def format_quantity(value: float) -> str:
    """Render an aggregated magnitude without a trailing ".0" for whole numbers."""
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def number_to_quantity_text(value: int | float) -> str:
    """
    Render a numeric quantity as plain decimal text so it parses back to the same magnitude.

    1000000 -> "1000000", 2.50 -> "2.5", 1e-05 -> "0.00001"
    """
    text = format(Decimal(str(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
