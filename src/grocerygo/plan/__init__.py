"""Meal plan grocery aggregation, week scheduling, recipe edits and status logic."""

from grocerygo.plan.calendar import (
    DAY_NAMES,
    date_for_offset,
    dates_overlap,
    day_index,
    is_date_within_plan,
    next_week_start,
    resolve_date,
    week_dates,
    week_window,
)
from grocerygo.plan.edits import swap_ingredient
from grocerygo.plan.grocery import calculate_grocery_list, find_unquantified_items
from grocerygo.plan.organizer import DayBucket, WeekView, organize_week
from grocerygo.plan.status import effective_status, find_overlapping_plans

__all__ = [
    "DAY_NAMES",
    "DayBucket",
    "WeekView",
    "calculate_grocery_list",
    "date_for_offset",
    "dates_overlap",
    "day_index",
    "effective_status",
    "find_overlapping_plans",
    "find_unquantified_items",
    "is_date_within_plan",
    "next_week_start",
    "organize_week",
    "resolve_date",
    "swap_ingredient",
    "week_dates",
    "week_window",
]
