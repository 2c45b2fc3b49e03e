"""Normalize free-text recipe data into aggregation-ready values."""

from grocerygo.normalize.dates import format_plan_date, parse_plan_date
from grocerygo.normalize.legacy import coerce_string_list, parse_array_from_string
from grocerygo.normalize.quantity import (
    extract_quantity_and_unit,
    format_quantity,
    normalize_ingredient_name,
    number_to_quantity_text,
    parse_quantity,
    parse_unit,
)

__all__ = [
    "coerce_string_list",
    "extract_quantity_and_unit",
    "format_plan_date",
    "format_quantity",
    "normalize_ingredient_name",
    "number_to_quantity_text",
    "parse_array_from_string",
    "parse_plan_date",
    "parse_quantity",
    "parse_unit",
]
