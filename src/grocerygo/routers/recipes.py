"""API routes for recipes and favorites."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from grocerygo.logging_config import get_logger
from grocerygo.repository import MealPlanRepository, NotFoundError, get_repository
from grocerygo.schemas import Recipe

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


class FavoriteRequest(BaseModel):
    user_id: str


class FavoriteResponse(BaseModel):
    """Whether the recipe is saved after the toggle."""

    recipe_id: str
    saved: bool


@router.get("/{recipe_id}", response_model=Recipe)
async def get_recipe(
    recipe_id: str,
    repository: MealPlanRepository = Depends(get_repository),
) -> Recipe:
    """Get a recipe with its ingredients and steps."""
    try:
        return await repository.get_recipe(recipe_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{recipe_id}/favorite", response_model=FavoriteResponse)
async def toggle_favorite(
    recipe_id: str,
    request: FavoriteRequest,
    repository: MealPlanRepository = Depends(get_repository),
) -> FavoriteResponse:
    """Save the recipe for the user, or unsave it if it is already saved."""
    try:
        saved = await repository.toggle_saved_recipe(request.user_id, recipe_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    logger.info(f"Recipe {recipe_id} {'saved' if saved else 'unsaved'} by {request.user_id}")
    return FavoriteResponse(recipe_id=recipe_id, saved=saved)
