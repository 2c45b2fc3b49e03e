"""Domain schemas shared by the planning core, the API and the record store.

Optional fields are resolved to their defaults here, when data enters the
application, so the planning functions never re-check for absence:

- ``meal_type`` missing or unrecognized -> dinner
- ``portion_multiplier`` missing -> 1
- ``ingredients`` / ``steps`` as a legacy string-encoded list, a structured
  list or absent -> always a list
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from grocerygo.normalize.dates import parse_plan_date
from grocerygo.normalize.legacy import coerce_string_list, parse_array_from_string
from grocerygo.normalize.quantity import number_to_quantity_text


class MealType(str, Enum):
    """Meal slot within a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"

    @classmethod
    def coerce(cls, value: Any) -> "MealType":
        """Resolve free text to a meal type, defaulting to dinner."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.DINNER


class PlanStatus(str, Enum):
    """Stored lifecycle status of a meal plan."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    GENERATING = "generating"


def _coerce_id(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def resolve_portion_multiplier(value: Any) -> float:
    """
    Resolve a stored portion multiplier.

    Absent values (None, empty string), unparseable text and non-finite
    numbers (nan, inf) default to 1. Explicit finite numbers, including 0
    and negatives, are kept as given.
    """
    if value is None or value == "":
        return 1.0
    try:
        multiplier = float(value)
    except (TypeError, ValueError):
        return 1.0
    return multiplier if math.isfinite(multiplier) else 1.0


# =============================================================================
# Recipes
# =============================================================================


class RecipeIngredient(BaseModel):
    """One ingredient line of a recipe."""

    item: str = ""
    quantity: str = ""
    unit: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_shapes(cls, data: Any) -> Any:
        # Legacy rows store a bare ingredient string, or use "ingredient" for the name
        if isinstance(data, str):
            return {"item": data}
        if isinstance(data, dict) and not data.get("item") and data.get("ingredient"):
            return {**data, "item": data["ingredient"]}
        return data

    @field_validator("item", mode="before")
    @classmethod
    def _item_text(cls, value: Any) -> str:
        return "" if value is None else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return number_to_quantity_text(value)
        return value

    @field_validator("unit", mode="before")
    @classmethod
    def _blank_unit_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class Recipe(BaseModel):
    """Recipe generated by the AI service or saved by a user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    prep_time_minutes: int | None = None
    cook_time_minutes: int | None = None
    servings: int | None = None
    difficulty: str | None = None
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    meal_type: list[str] = Field(default_factory=list)
    dietary_tags: list[str] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_text(cls, value: Any) -> Any:
        return _coerce_id(value)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _resolve_ingredients(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return parse_array_from_string(value)
        return value

    @field_validator("steps", "dietary_tags", mode="before")
    @classmethod
    def _resolve_string_list(cls, value: Any) -> list[str]:
        return coerce_string_list(value)

    @field_validator("meal_type", mode="before")
    @classmethod
    def _resolve_meal_tags(cls, value: Any) -> list[str]:
        if isinstance(value, str) and not value.strip().startswith("["):
            return [value] if value.strip() else []
        return coerce_string_list(value)


# =============================================================================
# Meal plans
# =============================================================================


class MealPlanRecipe(BaseModel):
    """One scheduled occurrence of a recipe within a meal plan."""

    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    meal_plan_id: str | None = None
    recipe_id: str | None = None
    recipe: Recipe | None = None
    planned_for_date: date | None = None
    meal_type: MealType = MealType.DINNER
    portion_multiplier: float = 1.0
    day_hint: str | None = None
    slot_label: str | None = None
    notes: str | None = None

    @field_validator("id", "meal_plan_id", "recipe_id", mode="before")
    @classmethod
    def _id_text(cls, value: Any) -> Any:
        return _coerce_id(value)

    @field_validator("planned_for_date", mode="before")
    @classmethod
    def _parse_planned_date(cls, value: Any) -> date | None:
        # Malformed dates leave the occurrence unscheduled instead of failing
        return parse_plan_date(value)

    @field_validator("meal_type", mode="before")
    @classmethod
    def _default_meal_type(cls, value: Any) -> MealType:
        return MealType.coerce(value)

    @field_validator("portion_multiplier", mode="before")
    @classmethod
    def _default_multiplier(cls, value: Any) -> float:
        return resolve_portion_multiplier(value)


class MealPlan(BaseModel):
    """A week-long container of scheduled recipes starting on ``week_of``."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str | None = None
    week_of: date
    status: PlanStatus = PlanStatus.PENDING
    total_meals: int = 0
    recipes: list[MealPlanRecipe] = Field(default_factory=list)

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _id_text(cls, value: Any) -> Any:
        return _coerce_id(value)

    @field_validator("week_of", mode="before")
    @classmethod
    def _parse_week_of(cls, value: Any) -> date:
        parsed = parse_plan_date(value)
        if parsed is None:
            raise ValueError(f"week_of must be a YYYY-MM-DD date, got {value!r}")
        return parsed


class CalculatedGroceryItem(BaseModel):
    """One consolidated grocery-list row."""

    item_name: str
    quantity: float
    unit: str = ""


class StoredGroceryItem(BaseModel):
    """Grocery row kept with a plan, checked off by the user while shopping."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    item_name: str
    quantity: float | None = None
    unit: str | None = None
    purchased: bool = False
    purchased_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_text(cls, value: Any) -> Any:
        return _coerce_id(value)

    @field_validator("purchased", mode="before")
    @classmethod
    def _unset_is_false(cls, value: Any) -> Any:
        return False if value is None else value


# =============================================================================
# AI generation payload
# =============================================================================


class ScheduleSlot(BaseModel):
    """Placement of a generated recipe into a day and meal slot."""

    model_config = ConfigDict(populate_by_name=True)

    slot_label: str | None = Field(None, alias="slotLabel")
    day: str = ""
    meal_type: MealType = Field(MealType.DINNER, alias="mealType")
    recipe_id: str = Field(alias="recipeId")
    portion_multiplier: float = Field(1.0, alias="portionMultiplier")

    @field_validator("recipe_id", mode="before")
    @classmethod
    def _id_text(cls, value: Any) -> Any:
        return _coerce_id(value)

    @field_validator("meal_type", mode="before")
    @classmethod
    def _default_meal_type(cls, value: Any) -> MealType:
        return MealType.coerce(value)

    @field_validator("portion_multiplier", mode="before")
    @classmethod
    def _default_multiplier(cls, value: Any) -> float:
        return resolve_portion_multiplier(value)


class GeneratedGroceryItem(BaseModel):
    """Grocery-list row as returned by the AI generator."""

    item: str
    quantity: str = ""

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity_text(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return number_to_quantity_text(value)
        return value


class GeneratedMealPlan(BaseModel):
    """Structured response of the AI meal-plan generator."""

    recipes: list[Recipe] = Field(default_factory=list)
    schedule: list[ScheduleSlot] = Field(default_factory=list)
    grocery_list: list[GeneratedGroceryItem] = Field(default_factory=list)
