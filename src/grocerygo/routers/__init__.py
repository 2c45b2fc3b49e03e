"""API routers for the GroceryGo application."""

from grocerygo.routers.ingredients import router as ingredients_router
from grocerygo.routers.meal_plans import router as meal_plans_router
from grocerygo.routers.recipes import router as recipes_router

__all__ = [
    "ingredients_router",
    "meal_plans_router",
    "recipes_router",
]
