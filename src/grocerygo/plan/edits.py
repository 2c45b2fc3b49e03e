"""In-place edits users make to a recipe of their plan."""

from grocerygo.normalize.quantity import normalize_ingredient_name
from grocerygo.schemas import RecipeIngredient


def swap_ingredient(
    ingredients: list[RecipeIngredient],
    old_ingredient: str,
    new_ingredient: str,
) -> tuple[list[RecipeIngredient], int]:
    """
    Rename every ingredient whose name contains ``old_ingredient``.

    Matching is case-insensitive on the trimmed names. Quantities and units
    are kept. Returns the new ingredient list and the number of lines changed.

    Example:
        swap "butter" -> "olive oil" turns "Unsalted Butter" into "olive oil"
    """
    needle = normalize_ingredient_name(old_ingredient)
    replacement = new_ingredient.strip()
    if not needle or not replacement:
        return list(ingredients), 0

    swapped: list[RecipeIngredient] = []
    changed = 0
    for ingredient in ingredients:
        if needle in normalize_ingredient_name(ingredient.item):
            swapped.append(ingredient.model_copy(update={"item": replacement}))
            changed += 1
        else:
            swapped.append(ingredient)
    return swapped, changed
