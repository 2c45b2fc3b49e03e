"""Turn an AI-generated meal plan into schedule entries and grocery rows."""

from dataclasses import dataclass
from datetime import date

from grocerygo.logging_config import get_logger
from grocerygo.normalize.quantity import parse_quantity, parse_unit
from grocerygo.plan.calendar import date_for_offset, resolve_date
from grocerygo.schemas import GeneratedGroceryItem, GeneratedMealPlan, MealPlanRecipe

logger = get_logger(__name__)


@dataclass
class GroceryRow:
    """Grocery item as persisted from the generator's own list."""

    item_name: str
    quantity: float | None
    unit: str | None


def build_schedule_entries(
    meal_plan_id: str,
    week_of: date,
    generated: GeneratedMealPlan,
) -> list[MealPlanRecipe]:
    """
    Map the generator's schedule onto dated MealPlanRecipe entries.

    Each slot's day name is resolved inside the plan's week. Slots with an
    unknown day keep the name as ``day_hint`` and stay unscheduled; slots
    pointing at a recipe the generator did not return are skipped. When the
    generator returned no schedule, recipes are placed one per day in order.
    """
    recipes = {recipe.id: recipe for recipe in generated.recipes}

    if not generated.schedule:
        return [
            MealPlanRecipe(
                meal_plan_id=meal_plan_id,
                recipe_id=recipe.id,
                recipe=recipe,
                planned_for_date=date_for_offset(week_of, index),
                meal_type=recipe.meal_type[0] if recipe.meal_type else None,
            )
            for index, recipe in enumerate(generated.recipes)
        ]

    entries: list[MealPlanRecipe] = []
    for slot in generated.schedule:
        recipe = recipes.get(slot.recipe_id)
        if recipe is None:
            logger.warning(f"Schedule slot {slot.slot_label!r} references unknown recipe {slot.recipe_id}")
            continue

        planned = resolve_date(week_of, slot.day)
        entries.append(
            MealPlanRecipe(
                meal_plan_id=meal_plan_id,
                recipe_id=recipe.id,
                recipe=recipe,
                planned_for_date=planned,
                meal_type=slot.meal_type,
                portion_multiplier=slot.portion_multiplier,
                day_hint=None if planned else slot.day,
                slot_label=slot.slot_label or f"{slot.day} {slot.meal_type.value}",
            )
        )

    return entries


def parse_grocery_quantity(item: GeneratedGroceryItem) -> GroceryRow:
    """
    Split a generator grocery row into magnitude and unit for storage.

    Rows without a leading number keep their name but store no quantity or unit.
    """
    quantity = parse_quantity(item.quantity)
    unit = parse_unit(item.quantity)
    return GroceryRow(
        item_name=item.item,
        quantity=quantity if quantity > 0 else None,
        unit=unit or None,
    )
