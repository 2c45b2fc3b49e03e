"""API routes for meal plan viewing, editing and export."""

from collections.abc import AsyncIterator
from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response, status
from pydantic import BaseModel, Field

from grocerygo.config import get_settings
from grocerygo.connectors.calendars import (
    CalendarError,
    CalendarProvider,
    GoogleCalendarProvider,
    busy_days,
)
from grocerygo.connectors.checkout import CheckoutClient, CheckoutError
from grocerygo.logging_config import get_logger, set_context
from grocerygo.plan.calendar import next_week_start, week_window, weekday_name
from grocerygo.plan.generation import parse_grocery_quantity
from grocerygo.plan.grocery import calculate_grocery_list, find_unquantified_items
from grocerygo.plan.organizer import organize_week
from grocerygo.plan.status import effective_status, find_overlapping_plans
from grocerygo.repository import MealPlanRepository, NotFoundError, get_repository
from grocerygo.schemas import (
    CalculatedGroceryItem,
    GeneratedGroceryItem,
    GeneratedMealPlan,
    MealPlan,
    MealPlanRecipe,
    MealType,
    PlanStatus,
    StoredGroceryItem,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/meal-plans", tags=["meal-plans"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class MealPlanCreateRequest(BaseModel):
    """Request to create an empty meal plan."""

    user_id: str
    week_of: date | None = Field(None, description="First day of the plan; defaults to next week")
    allow_overlap: bool = Field(False, description="Create even if another plan covers these days")


class MealPlanResponse(MealPlan):
    """Meal plan with the status to display."""

    stored_status: PlanStatus


class MealPlanListResponse(BaseModel):
    plans: list[MealPlanResponse]
    total: int


class DayResponse(BaseModel):
    """One day of the week grid."""

    date: date
    day_name: str
    day_abbrev: str
    breakfast: list[MealPlanRecipe]
    lunch: list[MealPlanRecipe]
    dinner: list[MealPlanRecipe]


class WeekResponse(BaseModel):
    meal_plan_id: str
    week_of: date
    days: list[DayResponse]
    unscheduled: list[MealPlanRecipe]


class GroceryListResponse(BaseModel):
    """Consolidated grocery list for a meal plan."""

    meal_plan_id: str
    items: list[CalculatedGroceryItem]
    unquantified_items: list[str] = Field(
        default_factory=list,
        description="Ingredients left off the list because they have no amount",
    )


class OccurrenceUpdateRequest(BaseModel):
    """Change one scheduled recipe. Omitted fields are left as they are."""

    portion_multiplier: float | None = Field(None, gt=0)
    meal_type: MealType | None = None
    planned_for_date: date | None = None


class ReplaceRecipeRequest(BaseModel):
    recipe_id: str


class PlanStatusUpdateRequest(BaseModel):
    status: PlanStatus


class StoredGroceryListResponse(BaseModel):
    """Grocery rows stored with a plan, with their purchased flags."""

    meal_plan_id: str
    items: list[StoredGroceryItem]


class GroceryItemsReplaceRequest(BaseModel):
    items: list[GeneratedGroceryItem]


class GroceryItemPurchasedRequest(BaseModel):
    purchased: bool


class IngredientSwapRequest(BaseModel):
    """Rename ingredients of a scheduled recipe, e.g. butter -> olive oil."""

    old_ingredient: str = Field(min_length=1)
    new_ingredient: str = Field(min_length=1)


class IngredientSwapResponse(BaseModel):
    entry: MealPlanRecipe
    swapped: int


class CheckoutResponse(BaseModel):
    meal_plan_id: str
    checkout_url: str
    item_count: int


class CalendarEventResponse(BaseModel):
    id: str
    title: str
    start: datetime
    end: datetime
    is_all_day: bool
    source: str


class CalendarDayResponse(BaseModel):
    date: date
    day_name: str
    events: list[CalendarEventResponse]


class CalendarResponse(BaseModel):
    meal_plan_id: str
    days: list[CalendarDayResponse]


# =============================================================================
# Dependencies
# =============================================================================


async def get_checkout_client() -> AsyncIterator[CheckoutClient]:
    """Checkout client closed after the request."""
    async with CheckoutClient() as client:
        yield client


async def get_calendar_provider(
    x_calendar_token: Annotated[str | None, Header()] = None,
) -> AsyncIterator[CalendarProvider]:
    """Google calendar provider for the access token sent by the client."""
    if not x_calendar_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Calendar-Token header is required",
        )
    async with GoogleCalendarProvider(access_token=x_calendar_token) as provider:
        yield provider


# =============================================================================
# Helper Functions
# =============================================================================


async def load_plan(repository: MealPlanRepository, plan_id: str) -> MealPlan:
    """Fetch a plan or fail with 404."""
    set_context(meal_plan_id=plan_id)
    try:
        return await repository.get_plan(plan_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


def to_response(plan: MealPlan, today: date | None = None) -> MealPlanResponse:
    return MealPlanResponse(
        **plan.model_dump(exclude={"status"}),
        status=effective_status(plan.week_of, plan.status, today),
        stored_status=plan.status,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=MealPlanListResponse)
async def list_meal_plans(
    user_id: Annotated[str, Query(description="Owner of the plans")],
    repository: MealPlanRepository = Depends(get_repository),
) -> MealPlanListResponse:
    """List a user's meal plans, most recent week first."""
    plans = await repository.list_plans(user_id)
    return MealPlanListResponse(plans=[to_response(plan) for plan in plans], total=len(plans))


@router.post("", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_meal_plan(
    request: MealPlanCreateRequest,
    repository: MealPlanRepository = Depends(get_repository),
) -> MealPlanResponse:
    """
    Create an empty pending plan.

    Without ``week_of`` the plan starts on the next configured week start day.
    A plan whose week overlaps another plan of the same user is rejected with
    409 unless ``allow_overlap`` is set.
    """
    week_of = request.week_of or next_week_start(get_settings().week_start_day)

    if not request.allow_overlap:
        existing = await repository.list_plans(request.user_id)
        overlapping = find_overlapping_plans(week_of, existing)
        if overlapping:
            logger.info(f"Rejected plan for week of {week_of}: overlaps {len(overlapping)} plan(s)")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "message": f"Week of {week_of} overlaps an existing meal plan",
                    "overlapping_plan_ids": [plan.id for plan in overlapping],
                },
            )

    plan = await repository.create_plan(request.user_id, week_of)
    return to_response(plan)


@router.get("/{plan_id}", response_model=MealPlanResponse)
async def get_meal_plan(
    plan_id: str,
    repository: MealPlanRepository = Depends(get_repository),
) -> MealPlanResponse:
    """Get a meal plan with its scheduled recipes."""
    return to_response(await load_plan(repository, plan_id))


@router.patch("/{plan_id}/status", response_model=MealPlanResponse)
async def update_meal_plan_status(
    plan_id: str,
    request: PlanStatusUpdateRequest,
    repository: MealPlanRepository = Depends(get_repository),
) -> MealPlanResponse:
    """Mark a plan pending, in progress or completed."""
    await load_plan(repository, plan_id)
    if request.status is PlanStatus.GENERATING:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Status 'generating' is set by the generator only",
        )

    plan = await repository.update_status(plan_id, request.status)
    return to_response(plan)


@router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal_plan(
    plan_id: str,
    repository: MealPlanRepository = Depends(get_repository),
) -> Response:
    """Delete a plan with its scheduled recipes and grocery rows."""
    set_context(meal_plan_id=plan_id)
    try:
        await repository.delete_plan(plan_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{plan_id}/generated", response_model=MealPlanResponse)
async def store_generated_plan(
    plan_id: str,
    generated: GeneratedMealPlan,
    repository: MealPlanRepository = Depends(get_repository),
) -> MealPlanResponse:
    """Store the recipes, schedule and grocery list drafted by the AI generator."""
    await load_plan(repository, plan_id)
    if not generated.recipes:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Generated plan has no recipes",
        )

    plan = await repository.save_generated_plan(plan_id, generated)
    return to_response(plan)


@router.get("/{plan_id}/week", response_model=WeekResponse)
async def get_week(
    plan_id: str,
    repository: MealPlanRepository = Depends(get_repository),
) -> WeekResponse:
    """The plan's seven days with breakfast, lunch and dinner slots."""
    plan = await load_plan(repository, plan_id)
    week = organize_week(plan)

    return WeekResponse(
        meal_plan_id=plan.id,
        week_of=plan.week_of,
        days=[
            DayResponse(
                date=bucket.date,
                day_name=bucket.day_name,
                day_abbrev=bucket.day_abbrev,
                breakfast=bucket.breakfast,
                lunch=bucket.lunch,
                dinner=bucket.dinner,
            )
            for bucket in week.days
        ],
        unscheduled=week.unscheduled,
    )


@router.get("/{plan_id}/grocery-list", response_model=GroceryListResponse)
async def get_grocery_list(
    plan_id: str,
    repository: MealPlanRepository = Depends(get_repository),
) -> GroceryListResponse:
    """Consolidated grocery list, recalculated from the plan's current recipes."""
    plan = await load_plan(repository, plan_id)
    items = calculate_grocery_list(plan.recipes)
    unquantified = find_unquantified_items(plan.recipes)

    logger.info(f"Grocery list for plan {plan_id}: {len(items)} items, {len(unquantified)} unquantified")
    return GroceryListResponse(meal_plan_id=plan.id, items=items, unquantified_items=unquantified)


@router.get("/{plan_id}/grocery-items", response_model=StoredGroceryListResponse)
async def get_grocery_items(
    plan_id: str,
    repository: MealPlanRepository = Depends(get_repository),
) -> StoredGroceryListResponse:
    """Grocery rows stored with the plan, as generated or last replaced."""
    await load_plan(repository, plan_id)
    items = await repository.list_grocery_items(plan_id)
    return StoredGroceryListResponse(meal_plan_id=plan_id, items=items)


@router.put("/{plan_id}/grocery-items", response_model=StoredGroceryListResponse)
async def replace_grocery_items(
    plan_id: str,
    request: GroceryItemsReplaceRequest,
    repository: MealPlanRepository = Depends(get_repository),
) -> StoredGroceryListResponse:
    """Replace the stored grocery rows; purchased flags start cleared."""
    await load_plan(repository, plan_id)
    rows = [parse_grocery_quantity(item) for item in request.items]
    items = await repository.replace_grocery_items(plan_id, rows)

    logger.info(f"Replaced grocery rows of plan {plan_id} with {len(items)} items")
    return StoredGroceryListResponse(meal_plan_id=plan_id, items=items)


@router.patch("/{plan_id}/grocery-items/{item_id}", response_model=StoredGroceryItem)
async def set_grocery_item_purchased(
    plan_id: str,
    item_id: str,
    request: GroceryItemPurchasedRequest,
    repository: MealPlanRepository = Depends(get_repository),
) -> StoredGroceryItem:
    """Check a stored grocery row off the list, or back on."""
    await load_plan(repository, plan_id)
    try:
        return await repository.set_grocery_item_purchased(plan_id, item_id, request.purchased)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.patch("/{plan_id}/recipes/{entry_id}", response_model=MealPlanRecipe)
async def update_plan_recipe(
    plan_id: str,
    entry_id: str,
    request: OccurrenceUpdateRequest,
    repository: MealPlanRepository = Depends(get_repository),
) -> MealPlanRecipe:
    """Change the portion multiplier, meal slot or day of a scheduled recipe."""
    plan = await load_plan(repository, plan_id)

    max_multiplier = get_settings().max_portion_multiplier
    if request.portion_multiplier is not None and request.portion_multiplier > max_multiplier:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"portion_multiplier must be at most {max_multiplier:g}",
        )

    if request.planned_for_date is not None:
        start, end = week_window(plan.week_of)
        if not start <= request.planned_for_date <= end:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"planned_for_date must be between {start} and {end}",
            )

    try:
        return await repository.update_occurrence(
            plan_id,
            entry_id,
            portion_multiplier=request.portion_multiplier,
            meal_type=request.meal_type,
            planned_for_date=request.planned_for_date,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{plan_id}/recipes/{entry_id}/replace", response_model=MealPlanRecipe)
async def replace_plan_recipe(
    plan_id: str,
    entry_id: str,
    request: ReplaceRecipeRequest,
    repository: MealPlanRepository = Depends(get_repository),
) -> MealPlanRecipe:
    """Swap the recipe in a slot, keeping its day, meal type and multiplier."""
    await load_plan(repository, plan_id)
    try:
        return await repository.replace_recipe(plan_id, entry_id, request.recipe_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{plan_id}/recipes/{entry_id}/swap-ingredient", response_model=IngredientSwapResponse)
async def swap_plan_recipe_ingredient(
    plan_id: str,
    entry_id: str,
    request: IngredientSwapRequest,
    repository: MealPlanRepository = Depends(get_repository),
) -> IngredientSwapResponse:
    """
    Rename the ingredients of a scheduled recipe that contain ``old_ingredient``.

    The recipe is shared, so every plan using it picks up the change and
    recalculated grocery lists reflect it. 422 when no ingredient matches.
    """
    await load_plan(repository, plan_id)
    try:
        entry, swapped = await repository.swap_recipe_ingredient(
            plan_id, entry_id, request.old_ingredient, request.new_ingredient
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    if not swapped:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"No ingredient matching {request.old_ingredient!r} in this recipe",
        )
    return IngredientSwapResponse(entry=entry, swapped=swapped)


@router.post("/{plan_id}/checkout", response_model=CheckoutResponse)
async def checkout_meal_plan(
    plan_id: str,
    repository: MealPlanRepository = Depends(get_repository),
    client: CheckoutClient = Depends(get_checkout_client),
) -> CheckoutResponse:
    """Export the recalculated grocery list as a delivery partner shopping list."""
    plan = await load_plan(repository, plan_id)
    items = calculate_grocery_list(plan.recipes)
    if not items:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Meal plan has no grocery items to check out",
        )

    try:
        link = await client.create_shopping_list_link(
            title=f"Meal Plan - Week of {plan.week_of}",
            items=items,
        )
    except CheckoutError as e:
        logger.error(f"Checkout failed for plan {plan_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Checkout failed: {e}",
        ) from e

    await repository.save_checkout_link(plan_id, link)
    return CheckoutResponse(meal_plan_id=plan.id, checkout_url=link, item_count=len(items))


@router.get("/{plan_id}/calendar", response_model=CalendarResponse)
async def get_plan_calendar(
    plan_id: str,
    repository: MealPlanRepository = Depends(get_repository),
    provider: CalendarProvider = Depends(get_calendar_provider),
) -> CalendarResponse:
    """External calendar events for each day of the plan's week."""
    plan = await load_plan(repository, plan_id)
    start, end = week_window(plan.week_of)

    try:
        events = await provider.fetch_events(start, end)
    except CalendarError as e:
        logger.error(f"Calendar fetch failed for plan {plan_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Calendar unavailable: {e}",
        ) from e

    days = busy_days(events, plan.week_of)
    return CalendarResponse(
        meal_plan_id=plan.id,
        days=[
            CalendarDayResponse(
                date=day,
                day_name=weekday_name(day),
                events=[CalendarEventResponse(**vars(event)) for event in day_events],
            )
            for day, day_events in days.items()
        ],
    )
