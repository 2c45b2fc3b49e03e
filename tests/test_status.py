"""Tests for plan display status and overlap detection."""

from datetime import date

from grocerygo.plan.status import effective_status, find_overlapping_plans
from grocerygo.schemas import MealPlan, PlanStatus


class TestEffectiveStatus:
    """Tests for effective_status function."""

    def test_pending_in_window_is_in_progress(self):
        assert effective_status("2024-06-05", "pending", today=date(2024, 6, 7)) is PlanStatus.IN_PROGRESS

    def test_pending_outside_window(self):
        assert effective_status("2024-06-05", "pending", today=date(2024, 6, 12)) is PlanStatus.PENDING
        assert effective_status("2024-06-05", "pending", today=date(2024, 6, 1)) is PlanStatus.PENDING

    def test_completed_is_stable(self):
        for today in (date(2024, 6, 1), date(2024, 6, 5), date(2024, 6, 30)):
            assert effective_status("2024-06-05", PlanStatus.COMPLETED, today=today) is PlanStatus.COMPLETED

    def test_other_statuses_unchanged(self):
        today = date(2024, 6, 6)
        assert effective_status("2024-06-05", "generating", today=today) is PlanStatus.GENERATING
        assert effective_status("2024-06-05", "in-progress", today=today) is PlanStatus.IN_PROGRESS


class TestFindOverlappingPlans:
    def test_overlaps(self):
        plans = [
            MealPlan(id="a", week_of="2024-06-03"),
            MealPlan(id="b", week_of="2024-06-10"),
            MealPlan(id="c", week_of="2024-05-27"),
        ]
        overlapping = find_overlapping_plans("2024-06-05", plans)
        assert [plan.id for plan in overlapping] == ["a", "b"]

    def test_exclude_self(self):
        plans = [MealPlan(id="a", week_of="2024-06-03")]
        assert find_overlapping_plans("2024-06-03", plans, exclude_id="a") == []
