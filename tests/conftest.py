"""Pytest configuration and shared fixtures."""

import uuid
from datetime import date, datetime

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from grocerygo import models  # noqa: F401  registers the tables on Base
from grocerygo.database import Base
from grocerygo.main import app
from grocerygo.plan.edits import swap_ingredient
from grocerygo.plan.generation import GroceryRow, build_schedule_entries, parse_grocery_quantity
from grocerygo.repository import NotFoundError, get_repository
from grocerygo.schemas import (
    GeneratedMealPlan,
    MealPlan,
    MealPlanRecipe,
    MealType,
    PlanStatus,
    Recipe,
    StoredGroceryItem,
)

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Recipe Fixtures
# =============================================================================


@pytest.fixture
def lasagna():
    """Recipe with a single cheese line."""
    return Recipe(
        id="lasagna",
        name="Lasagna",
        ingredients=[{"item": "cheese", "quantity": "1 cup"}],
        meal_type=["dinner"],
    )


@pytest.fixture
def pancakes():
    """Breakfast recipe mixing quantified and unquantified lines."""
    return Recipe(
        id="pancakes",
        name="Fluffy Pancakes",
        ingredients=[
            {"item": "Flour", "quantity": "2 cups"},
            {"item": "egg", "quantity": "2"},
            {"item": "milk", "quantity": "1.5 cups"},
            {"item": "salt", "quantity": "a pinch"},
        ],
        steps=["Whisk the dry ingredients", "Add milk and eggs", "Fry in batches"],
        meal_type=["breakfast"],
    )


@pytest.fixture
def legacy_recipe_row():
    """Recipe row as written by the old importer, with string-encoded lists."""
    return {
        "id": 42,
        "name": "Grandma's Soup",
        "ingredients": "['carrots', \"onion\"]",
        "steps": "['Chop everything', 'Simmer for \\'an hour\\'']",
        "meal_type": "lunch",
    }


@pytest.fixture
def lasagna_plan(lasagna):
    """Monday plan with lasagna on Monday (x1) and Wednesday (x2)."""
    return MealPlan(
        id="plan-1",
        user_id="user-1",
        week_of="2024-01-01",
        recipes=[
            MealPlanRecipe(
                id="1",
                recipe_id="lasagna",
                recipe=lasagna,
                planned_for_date="2024-01-01",
                meal_type="dinner",
                portion_multiplier=1,
            ),
            MealPlanRecipe(
                id="2",
                recipe_id="lasagna",
                recipe=lasagna,
                planned_for_date="2024-01-03",
                meal_type="dinner",
                portion_multiplier=2,
            ),
        ],
    )


@pytest.fixture
def generated_plan():
    """Structured response of the AI generator for a two-recipe week."""
    return GeneratedMealPlan.model_validate(
        {
            "recipes": [
                {
                    "id": "r-oats",
                    "name": "Overnight Oats",
                    "ingredients": [{"item": "oats", "quantity": "1 cup"}],
                    "meal_type": ["breakfast"],
                },
                {
                    "id": "r-curry",
                    "name": "Chickpea Curry",
                    "ingredients": [
                        {"item": "chickpeas", "quantity": "2 cans"},
                        {"item": "Rice", "quantity": "1 cup"},
                    ],
                    "meal_type": ["dinner"],
                },
            ],
            "schedule": [
                {"slotLabel": "Monday Breakfast", "day": "Monday", "mealType": "breakfast", "recipeId": "r-oats"},
                {"day": "Wednesday", "mealType": "dinner", "recipeId": "r-curry", "portionMultiplier": 2},
                {"day": "Someday", "mealType": "lunch", "recipeId": "r-curry"},
            ],
            "grocery_list": [
                {"item": "oats", "quantity": "1 cup"},
                {"item": "chickpeas", "quantity": "2 cans"},
                {"item": "salt", "quantity": "to taste"},
            ],
        }
    )


# =============================================================================
# In-memory repository for API tests
# =============================================================================


class InMemoryRepository:
    """Stand-in for MealPlanRepository keeping schemas in dictionaries."""

    def __init__(self):
        self.plans: dict[str, MealPlan] = {}
        self.recipes: dict[str, Recipe] = {}
        self.saved: set[tuple[str, str]] = set()
        self.checkout_links: dict[str, str] = {}
        self.grocery_items: dict[str, list[StoredGroceryItem]] = {}
        self._next_entry_id = 1
        self._next_item_id = 1

    def add_recipe(self, recipe: Recipe) -> Recipe:
        self.recipes[recipe.id] = recipe
        return recipe

    def add_plan(self, plan: MealPlan) -> MealPlan:
        for entry in plan.recipes:
            if entry.recipe is not None:
                self.recipes.setdefault(entry.recipe.id, entry.recipe)
        self.plans[plan.id] = plan
        return plan

    async def get_plan(self, plan_id: str) -> MealPlan:
        if plan_id not in self.plans:
            raise NotFoundError("Meal plan", plan_id)
        return self.plans[plan_id]

    async def list_plans(self, user_id: str) -> list[MealPlan]:
        plans = [plan for plan in self.plans.values() if plan.user_id == user_id]
        return sorted(plans, key=lambda plan: plan.week_of, reverse=True)

    async def create_plan(
        self, user_id: str, week_of: date, status: PlanStatus = PlanStatus.PENDING
    ) -> MealPlan:
        return self.add_plan(
            MealPlan(id=str(uuid.uuid4()), user_id=user_id, week_of=week_of, status=status)
        )

    async def save_generated_plan(self, plan_id: str, generated: GeneratedMealPlan) -> MealPlan:
        plan = await self.get_plan(plan_id)
        for recipe in generated.recipes:
            self.add_recipe(recipe)
        entries = build_schedule_entries(plan_id, plan.week_of, generated)
        for entry in entries:
            entry.id = str(self._next_entry_id)
            self._next_entry_id += 1
        plan.recipes = entries
        plan.total_meals = len(entries)
        await self.replace_grocery_items(plan_id, [parse_grocery_quantity(item) for item in generated.grocery_list])
        return plan

    async def update_status(self, plan_id: str, status: PlanStatus) -> MealPlan:
        plan = await self.get_plan(plan_id)
        plan.status = status
        return plan

    async def delete_plan(self, plan_id: str) -> None:
        if plan_id not in self.plans:
            raise NotFoundError("Meal plan", plan_id)
        del self.plans[plan_id]
        self.grocery_items.pop(plan_id, None)

    async def list_grocery_items(self, plan_id: str) -> list[StoredGroceryItem]:
        await self.get_plan(plan_id)
        return list(self.grocery_items.get(plan_id, []))

    async def replace_grocery_items(self, plan_id: str, rows: list[GroceryRow]) -> list[StoredGroceryItem]:
        await self.get_plan(plan_id)
        items = []
        for row in rows:
            items.append(
                StoredGroceryItem(
                    id=str(self._next_item_id), item_name=row.item_name, quantity=row.quantity, unit=row.unit
                )
            )
            self._next_item_id += 1
        self.grocery_items[plan_id] = items
        return list(items)

    async def set_grocery_item_purchased(
        self, plan_id: str, item_id: str, purchased: bool
    ) -> StoredGroceryItem:
        for item in self.grocery_items.get(plan_id, []):
            if item.id == item_id:
                item.purchased = purchased
                item.purchased_at = datetime(2024, 1, 2, 18, 30) if purchased else None
                return item
        raise NotFoundError("Grocery item", item_id)

    def _find_entry(self, plan_id: str, entry_id: str) -> MealPlanRecipe:
        for entry in self.plans[plan_id].recipes:
            if entry.id == entry_id:
                return entry
        raise NotFoundError("Meal plan entry", entry_id)

    async def update_occurrence(
        self,
        plan_id: str,
        entry_id: str,
        *,
        portion_multiplier: float | None = None,
        meal_type: MealType | None = None,
        planned_for_date: date | None = None,
    ) -> MealPlanRecipe:
        entry = self._find_entry(plan_id, entry_id)
        if portion_multiplier is not None:
            entry.portion_multiplier = portion_multiplier
        if meal_type is not None:
            entry.meal_type = meal_type
        if planned_for_date is not None:
            entry.planned_for_date = planned_for_date
            entry.day_hint = None
        return entry

    async def replace_recipe(self, plan_id: str, entry_id: str, recipe_id: str) -> MealPlanRecipe:
        entry = self._find_entry(plan_id, entry_id)
        if recipe_id not in self.recipes:
            raise NotFoundError("Recipe", recipe_id)
        entry.recipe_id = recipe_id
        entry.recipe = self.recipes[recipe_id]
        return entry

    async def swap_recipe_ingredient(
        self, plan_id: str, entry_id: str, old_ingredient: str, new_ingredient: str
    ) -> tuple[MealPlanRecipe, int]:
        entry = self._find_entry(plan_id, entry_id)
        swapped, changed = swap_ingredient(entry.recipe.ingredients, old_ingredient, new_ingredient)
        if changed:
            entry.recipe.ingredients = swapped
        return entry, changed

    async def save_checkout_link(self, plan_id: str, link: str) -> None:
        self.checkout_links[plan_id] = link

    async def get_recipe(self, recipe_id: str) -> Recipe:
        if recipe_id not in self.recipes:
            raise NotFoundError("Recipe", recipe_id)
        return self.recipes[recipe_id]

    async def toggle_saved_recipe(self, user_id: str, recipe_id: str) -> bool:
        if recipe_id not in self.recipes:
            raise NotFoundError("Recipe", recipe_id)
        key = (user_id, recipe_id)
        if key in self.saved:
            self.saved.remove(key)
            return False
        self.saved.add(key)
        return True


@pytest.fixture
def repository():
    """Empty in-memory repository."""
    return InMemoryRepository()


@pytest.fixture
def client(repository):
    """API client wired to the in-memory repository."""
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Database fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_session():
    """Async session on a fresh in-memory SQLite database with all tables."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
