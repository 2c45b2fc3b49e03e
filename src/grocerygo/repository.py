"""Record store access for meal plans, recipes and favorites.

All methods return the pydantic schemas from ``grocerygo.schemas`` so the
planning functions never see ORM objects.
"""

import uuid
from datetime import date, datetime

from fastapi import Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from grocerygo import models
from grocerygo.database import get_db
from grocerygo.logging_config import get_logger
from grocerygo.plan.edits import swap_ingredient
from grocerygo.plan.generation import GroceryRow, build_schedule_entries, parse_grocery_quantity
from grocerygo.schemas import (
    GeneratedMealPlan,
    MealPlan,
    MealPlanRecipe,
    MealType,
    PlanStatus,
    Recipe,
    StoredGroceryItem,
)

logger = get_logger(__name__)


class NotFoundError(Exception):
    """Raised when a requested record does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


def _plan_query():
    return select(models.MealPlan).options(
        selectinload(models.MealPlan.recipes).selectinload(models.MealPlanRecipe.recipe)
    )


def _entry_key(entry_id: str) -> int | None:
    return int(entry_id) if str(entry_id).isdigit() else None


class MealPlanRepository:
    """Async repository over an SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # =========================================================================
    # Meal plans
    # =========================================================================

    async def _load_plan(self, plan_id: str) -> models.MealPlan:
        result = await self.session.execute(_plan_query().where(models.MealPlan.id == plan_id))
        plan = result.scalar_one_or_none()
        if plan is None:
            raise NotFoundError("Meal plan", plan_id)
        return plan

    async def get_plan(self, plan_id: str) -> MealPlan:
        return MealPlan.model_validate(await self._load_plan(plan_id))

    async def list_plans(self, user_id: str) -> list[MealPlan]:
        """All plans of a user, most recent week first."""
        result = await self.session.execute(
            _plan_query()
            .where(models.MealPlan.user_id == user_id)
            .order_by(models.MealPlan.week_of.desc())
        )
        return [MealPlan.model_validate(plan) for plan in result.scalars().all()]

    async def _ensure_user(self, user_id: str) -> None:
        result = await self.session.execute(select(models.User).where(models.User.id == user_id))
        if result.scalar_one_or_none() is None:
            self.session.add(models.User(id=user_id, email=f"{user_id}@placeholder.local"))
            await self.session.flush()

    async def create_plan(
        self,
        user_id: str,
        week_of: date,
        status: PlanStatus = PlanStatus.PENDING,
    ) -> MealPlan:
        """Create an empty plan for the week starting on ``week_of``."""
        await self._ensure_user(user_id)

        plan = models.MealPlan(
            id=str(uuid.uuid4()),
            user_id=user_id,
            week_of=week_of,
            status=status.value,
            total_meals=0,
            recipes=[],
        )
        self.session.add(plan)
        await self.session.commit()

        logger.info(f"Created meal plan {plan.id} for week of {week_of}")
        return MealPlan.model_validate(plan)

    async def save_generated_plan(self, plan_id: str, generated: GeneratedMealPlan) -> MealPlan:
        """
        Store an AI-generated plan: its recipes, the dated schedule and the
        generator's own grocery list. Any previous schedule is replaced.
        """
        plan = await self._load_plan(plan_id)

        for recipe in generated.recipes:
            await self.session.merge(models.Recipe(**recipe.model_dump()))
        await self.session.flush()

        entries = build_schedule_entries(plan.id, plan.week_of, generated)
        plan.recipes = [
            models.MealPlanRecipe(
                recipe_id=entry.recipe_id,
                planned_for_date=entry.planned_for_date,
                meal_type=entry.meal_type.value,
                portion_multiplier=entry.portion_multiplier,
                day_hint=entry.day_hint,
                slot_label=entry.slot_label,
            )
            for entry in entries
        ]
        plan.total_meals = len(entries)
        plan.status = PlanStatus.PENDING.value
        plan.generation_method = "ai-generated"
        await self._set_grocery_rows(
            plan, [parse_grocery_quantity(item) for item in generated.grocery_list]
        )
        await self.session.commit()

        logger.info(f"Stored {len(entries)} generated meals for plan {plan_id}")
        self.session.expunge(plan)
        return await self.get_plan(plan_id)

    async def update_status(self, plan_id: str, status: PlanStatus) -> MealPlan:
        """Store a new lifecycle status for a plan."""
        plan = await self._load_plan(plan_id)
        plan.status = status.value
        await self.session.commit()

        logger.info(f"Plan {plan_id} marked {status.value}")
        return MealPlan.model_validate(plan)

    async def delete_plan(self, plan_id: str) -> None:
        """Delete a plan together with its schedule and grocery rows."""
        result = await self.session.execute(
            select(models.MealPlan.id).where(models.MealPlan.id == plan_id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Meal plan", plan_id)

        await self.session.execute(
            delete(models.GroceryItem).where(models.GroceryItem.meal_plan_id == plan_id)
        )
        await self.session.execute(
            delete(models.MealPlanRecipe).where(models.MealPlanRecipe.meal_plan_id == plan_id)
        )
        await self.session.execute(delete(models.MealPlan).where(models.MealPlan.id == plan_id))
        await self.session.commit()

        logger.info(f"Deleted meal plan {plan_id}")

    async def _set_grocery_rows(self, plan: models.MealPlan, rows: list[GroceryRow]) -> None:
        await self.session.execute(
            delete(models.GroceryItem).where(models.GroceryItem.meal_plan_id == plan.id)
        )
        for row in rows:
            self.session.add(
                models.GroceryItem(
                    meal_plan_id=plan.id,
                    item_name=row.item_name,
                    quantity=row.quantity,
                    unit=row.unit,
                )
            )

    async def list_grocery_items(self, plan_id: str) -> list[StoredGroceryItem]:
        """Stored grocery rows of a plan in insertion order."""
        await self._load_plan(plan_id)
        result = await self.session.execute(
            select(models.GroceryItem)
            .where(models.GroceryItem.meal_plan_id == plan_id)
            .order_by(models.GroceryItem.id)
        )
        return [StoredGroceryItem.model_validate(item) for item in result.scalars().all()]

    async def replace_grocery_items(self, plan_id: str, rows: list[GroceryRow]) -> list[StoredGroceryItem]:
        """Replace the stored grocery rows of a plan."""
        plan = await self._load_plan(plan_id)
        await self._set_grocery_rows(plan, rows)
        await self.session.commit()
        return await self.list_grocery_items(plan_id)

    async def set_grocery_item_purchased(
        self, plan_id: str, item_id: str, purchased: bool
    ) -> StoredGroceryItem:
        """Check a stored grocery row off, or back on, the shopping list."""
        key = _entry_key(item_id)
        item = None
        if key is not None:
            result = await self.session.execute(
                select(models.GroceryItem).where(
                    models.GroceryItem.id == key,
                    models.GroceryItem.meal_plan_id == plan_id,
                )
            )
            item = result.scalar_one_or_none()
        if item is None:
            raise NotFoundError("Grocery item", item_id)

        item.purchased = purchased
        item.purchased_at = datetime.utcnow() if purchased else None
        await self.session.commit()
        return StoredGroceryItem.model_validate(item)

    async def save_checkout_link(self, plan_id: str, link: str) -> None:
        plan = await self._load_plan(plan_id)
        plan.checkout_link = link
        plan.checkout_link_created_at = datetime.utcnow()
        await self.session.commit()

    # =========================================================================
    # Scheduled occurrences
    # =========================================================================

    async def _load_occurrence(self, plan_id: str, entry_id: str) -> models.MealPlanRecipe:
        key = _entry_key(entry_id)
        if key is None:
            raise NotFoundError("Meal plan entry", entry_id)
        result = await self.session.execute(
            select(models.MealPlanRecipe)
            .options(selectinload(models.MealPlanRecipe.recipe))
            .where(
                models.MealPlanRecipe.id == key,
                models.MealPlanRecipe.meal_plan_id == plan_id,
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError("Meal plan entry", entry_id)
        return entry

    async def update_occurrence(
        self,
        plan_id: str,
        entry_id: str,
        *,
        portion_multiplier: float | None = None,
        meal_type: MealType | None = None,
        planned_for_date: date | None = None,
    ) -> MealPlanRecipe:
        """Change the multiplier, meal slot or day of one scheduled recipe."""
        entry = await self._load_occurrence(plan_id, entry_id)
        if portion_multiplier is not None:
            entry.portion_multiplier = portion_multiplier
        if meal_type is not None:
            entry.meal_type = meal_type.value
        if planned_for_date is not None:
            entry.planned_for_date = planned_for_date
            entry.day_hint = None
        await self.session.commit()
        return MealPlanRecipe.model_validate(entry)

    async def replace_recipe(self, plan_id: str, entry_id: str, recipe_id: str) -> MealPlanRecipe:
        """Swap the recipe of a scheduled occurrence, keeping its slot and multiplier."""
        entry = await self._load_occurrence(plan_id, entry_id)
        recipe = await self.session.get(models.Recipe, recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        entry.recipe_id = recipe.id
        entry.recipe = recipe
        await self.session.commit()

        logger.info(f"Replaced recipe in entry {entry_id} of plan {plan_id} with {recipe_id}")
        return MealPlanRecipe.model_validate(entry)

    async def swap_recipe_ingredient(
        self, plan_id: str, entry_id: str, old_ingredient: str, new_ingredient: str
    ) -> tuple[MealPlanRecipe, int]:
        """
        Rename matching ingredients of the recipe scheduled in an occurrence.

        The recipe row itself is edited, so every plan using it sees the
        change. Returns the occurrence and the number of lines changed;
        nothing is written when no line matched.
        """
        entry = await self._load_occurrence(plan_id, entry_id)
        if entry.recipe is None:
            raise NotFoundError("Recipe", entry.recipe_id)

        current = Recipe.model_validate(entry.recipe).ingredients
        swapped, changed = swap_ingredient(current, old_ingredient, new_ingredient)
        if changed:
            entry.recipe.ingredients = [ingredient.model_dump() for ingredient in swapped]
            await self.session.commit()
            logger.info(
                f"Swapped {old_ingredient!r} for {new_ingredient!r} in {changed} line(s) "
                f"of recipe {entry.recipe_id}"
            )
        return MealPlanRecipe.model_validate(entry), changed

    # =========================================================================
    # Recipes and favorites
    # =========================================================================

    async def get_recipe(self, recipe_id: str) -> Recipe:
        recipe = await self.session.get(models.Recipe, recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe", recipe_id)
        return Recipe.model_validate(recipe)

    async def toggle_saved_recipe(self, user_id: str, recipe_id: str) -> bool:
        """Save or unsave a recipe for a user; returns True when it is now saved."""
        if await self.session.get(models.Recipe, recipe_id) is None:
            raise NotFoundError("Recipe", recipe_id)

        result = await self.session.execute(
            select(models.SavedRecipe).where(
                models.SavedRecipe.user_id == user_id,
                models.SavedRecipe.recipe_id == recipe_id,
            )
        )
        saved = result.scalar_one_or_none()
        if saved is not None:
            await self.session.delete(saved)
            await self.session.commit()
            return False

        await self._ensure_user(user_id)
        self.session.add(models.SavedRecipe(user_id=user_id, recipe_id=recipe_id))
        await self.session.commit()
        return True


async def get_repository(db: AsyncSession = Depends(get_db)) -> MealPlanRepository:
    """Dependency for FastAPI endpoints."""
    return MealPlanRepository(db)
