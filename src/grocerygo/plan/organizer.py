"""Arrange a meal plan's scheduled recipes into a 7-day x 3-meal grid."""

from dataclasses import dataclass, field
from datetime import date

from grocerygo.logging_config import get_logger
from grocerygo.plan.calendar import resolve_date, week_dates, weekday_name
from grocerygo.schemas import MealPlan, MealPlanRecipe, MealType

logger = get_logger(__name__)


@dataclass
class DayBucket:
    """All meals planned for one calendar day of the week."""

    date: date
    day_name: str
    breakfast: list[MealPlanRecipe] = field(default_factory=list)
    lunch: list[MealPlanRecipe] = field(default_factory=list)
    dinner: list[MealPlanRecipe] = field(default_factory=list)

    @property
    def day_abbrev(self) -> str:
        """Three-letter weekday name, e.g. "Mon"."""
        return self.day_name[:3]

    @property
    def is_empty(self) -> bool:
        return not (self.breakfast or self.lunch or self.dinner)

    def meals(self, meal_type: MealType) -> list[MealPlanRecipe]:
        """Entries for one meal slot."""
        return getattr(self, meal_type.value)

    def add(self, entry: MealPlanRecipe) -> None:
        self.meals(entry.meal_type).append(entry)


@dataclass
class WeekView:
    """A plan's week: exactly seven day buckets plus meals without a usable date."""

    days: list[DayBucket]
    unscheduled: list[MealPlanRecipe] = field(default_factory=list)

    def day_for(self, value: date) -> DayBucket | None:
        for bucket in self.days:
            if bucket.date == value:
                return bucket
        return None


def _scheduled_date(entry: MealPlanRecipe, week_of: date) -> date | None:
    """Date an entry belongs to: its planned date, else its day-name hint."""
    if entry.planned_for_date is not None:
        return entry.planned_for_date
    if entry.day_hint:
        return resolve_date(week_of, entry.day_hint)
    return None


def organize_week(meal_plan: MealPlan) -> WeekView:
    """
    Bucket every scheduled recipe of a plan into its day and meal slot.

    The week always has seven buckets starting at ``week_of``, whatever
    weekday that is. Entries are placed by the calendar day of their
    ``planned_for_date`` (time of day is ignored when the record is read) and
    by ``meal_type``, which defaults to dinner. Entries without a resolvable
    date, or dated outside the week, are returned as unscheduled. Entries
    whose recipe could not be loaded are dropped.
    """
    days = [DayBucket(date=day, day_name=weekday_name(day)) for day in week_dates(meal_plan.week_of)]
    by_date = {bucket.date: bucket for bucket in days}
    unscheduled: list[MealPlanRecipe] = []
    dropped = 0

    for entry in meal_plan.recipes:
        if entry.recipe is None:
            dropped += 1
            continue

        scheduled = _scheduled_date(entry, meal_plan.week_of)
        bucket = by_date.get(scheduled) if scheduled is not None else None
        if bucket is None:
            unscheduled.append(entry)
            continue

        bucket.add(entry)

    if dropped:
        logger.warning(f"Dropped {dropped} entries of plan {meal_plan.id} with no recipe")

    return WeekView(days=days, unscheduled=unscheduled)
