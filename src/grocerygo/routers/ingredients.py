"""API routes for the ingredient vocabulary."""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from grocerygo.ingredients import is_valid_ingredient, search_ingredients, validate_ingredients

router = APIRouter(prefix="/api/v1/ingredients", tags=["ingredients"])


class IngredientSearchResponse(BaseModel):
    query: str
    ingredients: list[str]


class IngredientValidationRequest(BaseModel):
    names: list[str] = Field(default_factory=list)


class IngredientValidationResponse(BaseModel):
    """Names split into canonical vocabulary entries and rejected input."""

    valid: list[str]
    invalid: list[str]


@router.get("", response_model=IngredientSearchResponse)
async def search(
    q: Annotated[str, Query(description="Text to match against ingredient names")] = "",
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> IngredientSearchResponse:
    """Autocomplete ingredient names."""
    return IngredientSearchResponse(query=q, ingredients=search_ingredients(q, limit=limit))


@router.post("/validate", response_model=IngredientValidationResponse)
async def validate(request: IngredientValidationRequest) -> IngredientValidationResponse:
    """Keep only names from the vocabulary."""
    return IngredientValidationResponse(
        valid=validate_ingredients(request.names),
        invalid=[name for name in request.names if not is_valid_ingredient(name)],
    )
