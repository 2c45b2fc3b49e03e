"""Display status of meal plans, derived at read time."""

from collections.abc import Iterable
from datetime import date

from grocerygo.plan.calendar import dates_overlap, is_date_within_plan
from grocerygo.schemas import MealPlan, PlanStatus


def effective_status(
    week_of: date | str,
    stored_status: PlanStatus | str,
    today: date | None = None,
) -> PlanStatus:
    """
    Status to display for a plan.

    A pending plan whose week includes today is shown as in progress.
    Completed and generating plans, and everything else, are shown as stored.
    Nothing is written back.
    """
    status = PlanStatus(stored_status)
    if status is PlanStatus.PENDING and is_date_within_plan(week_of, today):
        return PlanStatus.IN_PROGRESS
    return status


def find_overlapping_plans(
    week_of: date | str,
    plans: Iterable[MealPlan],
    exclude_id: str | None = None,
) -> list[MealPlan]:
    """Plans whose week shares at least one day with a week starting on ``week_of``."""
    return [
        plan
        for plan in plans
        if plan.id != exclude_id and dates_overlap(week_of, plan.week_of)
    ]
