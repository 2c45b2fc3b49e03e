"""Grocery list aggregation from a week's scheduled recipes.

The AI generator returns its own grocery list, but once a user swaps a
recipe or changes a portion multiplier that list is stale. The list
computed here from the plan's recipes and multipliers is the authoritative
one.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from grocerygo.logging_config import get_logger
from grocerygo.normalize.quantity import (
    normalize_ingredient_name,
    parse_quantity,
    parse_unit,
)
from grocerygo.schemas import (
    CalculatedGroceryItem,
    MealPlanRecipe,
    Recipe,
    RecipeIngredient,
    resolve_portion_multiplier,
)

logger = get_logger(__name__)

# An occurrence is either a scheduled MealPlanRecipe or a (recipe, multiplier) pair
Occurrence = MealPlanRecipe | tuple[Recipe | None, Any]


@dataclass
class _Accumulator:
    item_name: str
    unit: str
    quantity: float = 0.0


def _iter_occurrences(occurrences: Iterable[Occurrence]) -> Iterator[tuple[Recipe, float]]:
    """Yield (recipe, multiplier) for every occurrence that has a recipe."""
    for occurrence in occurrences:
        if isinstance(occurrence, MealPlanRecipe):
            recipe = occurrence.recipe
            multiplier = occurrence.portion_multiplier
        else:
            recipe, raw_multiplier = occurrence
            multiplier = resolve_portion_multiplier(raw_multiplier)

        if recipe is None:
            continue
        yield recipe, multiplier


def _ingredient_unit(ingredient: RecipeIngredient) -> str:
    """Explicit unit when given, otherwise the unit embedded in the quantity text."""
    return ingredient.unit or parse_unit(ingredient.quantity)


def calculate_grocery_list(occurrences: Iterable[Occurrence]) -> list[CalculatedGroceryItem]:
    """
    Consolidate the ingredients of every scheduled recipe into one grocery list.

    - Each occurrence's portion multiplier scales all of its ingredient quantities.
    - Rows are merged on (case-insensitive item name, exact unit); the first
      occurrence of a key decides the displayed item name.
    - Ingredients whose scaled quantity is not positive (no leading number,
      zero multiplier) are left out.

    Args:
        occurrences: MealPlanRecipe entries or (recipe, multiplier) pairs.

    Returns:
        Grocery items sorted by item name (case-sensitive), then unit.
    """
    aggregated: dict[tuple[str, str], _Accumulator] = {}
    skipped = 0

    for recipe, multiplier in _iter_occurrences(occurrences):
        for ingredient in recipe.ingredients:
            if not ingredient.item:
                continue

            scaled = parse_quantity(ingredient.quantity) * multiplier
            if scaled <= 0:
                skipped += 1
                continue

            unit = _ingredient_unit(ingredient)
            key = (normalize_ingredient_name(ingredient.item), unit)

            entry = aggregated.get(key)
            if entry is None:
                entry = aggregated[key] = _Accumulator(item_name=ingredient.item, unit=unit)
            entry.quantity += scaled

    items = [
        CalculatedGroceryItem(item_name=entry.item_name, quantity=entry.quantity, unit=entry.unit)
        for entry in aggregated.values()
    ]
    items.sort(key=lambda item: (item.item_name, item.unit))

    logger.debug(f"Aggregated {len(items)} grocery items ({skipped} ingredient lines skipped)")
    return items


def find_unquantified_items(occurrences: Iterable[Occurrence]) -> list[str]:
    """
    List ingredient names left out of the grocery list for lack of a quantity.

    Covers lines such as "salt, to taste" whose quantity has no leading
    number. Names are de-duplicated case-insensitively, keep the first-seen
    casing and are returned sorted.
    """
    seen: dict[str, str] = {}
    for recipe, _ in _iter_occurrences(occurrences):
        for ingredient in recipe.ingredients:
            if not ingredient.item or parse_quantity(ingredient.quantity) > 0:
                continue
            seen.setdefault(normalize_ingredient_name(ingredient.item), ingredient.item)
    return sorted(seen.values())
