"""Tests for arranging a plan into its week grid."""

from datetime import date

from grocerygo.plan.organizer import organize_week
from grocerygo.schemas import MealPlan, MealPlanRecipe, MealType


class TestOrganizeWeek:
    """Tests for organize_week function."""

    def test_lasagna_plan(self, lasagna_plan):
        """Monday and Wednesday lasagna land in buckets 0 and 2 under dinner."""
        week = organize_week(lasagna_plan)

        assert len(week.days) == 7
        assert [entry.id for entry in week.days[0].dinner] == ["1"]
        assert [entry.id for entry in week.days[2].dinner] == ["2"]
        assert week.days[0].day_name == "Monday"
        assert week.days[2].day_abbrev == "Wed"
        assert all(day.is_empty for i, day in enumerate(week.days) if i not in (0, 2))
        assert week.unscheduled == []

    def test_empty_plan_has_seven_days(self):
        week = organize_week(MealPlan(id="p", week_of="2024-06-05"))
        assert len(week.days) == 7
        assert [day.date for day in week.days][0] == date(2024, 6, 5)
        assert week.days[0].day_name == "Wednesday"
        assert all(day.is_empty for day in week.days)

    def test_meal_type_buckets(self, pancakes, lasagna):
        plan = MealPlan(
            id="p",
            week_of="2024-01-01",
            recipes=[
                MealPlanRecipe(id="b", recipe=pancakes, planned_for_date="2024-01-02", meal_type="breakfast"),
                MealPlanRecipe(id="l", recipe=lasagna, planned_for_date="2024-01-02", meal_type="lunch"),
                MealPlanRecipe(id="d", recipe=lasagna, planned_for_date="2024-01-02"),
            ],
        )
        tuesday = organize_week(plan).day_for(date(2024, 1, 2))

        assert [e.id for e in tuesday.meals(MealType.BREAKFAST)] == ["b"]
        assert [e.id for e in tuesday.meals(MealType.LUNCH)] == ["l"]
        assert [e.id for e in tuesday.meals(MealType.DINNER)] == ["d"]

    def test_unknown_meal_type_goes_to_dinner(self, lasagna):
        plan = MealPlan(
            id="p",
            week_of="2024-01-01",
            recipes=[MealPlanRecipe(id="x", recipe=lasagna, planned_for_date="2024-01-01", meal_type="snack")],
        )
        assert [e.id for e in organize_week(plan).days[0].dinner] == ["x"]

    def test_timestamp_uses_calendar_day(self, lasagna):
        plan = MealPlan(
            id="p",
            week_of="2024-01-01",
            recipes=[
                MealPlanRecipe(id="late", recipe=lasagna, planned_for_date="2024-01-01T23:30:00-08:00")
            ],
        )
        assert [e.id for e in organize_week(plan).days[0].dinner] == ["late"]

    def test_day_hint_resolved_in_window(self, lasagna):
        plan = MealPlan(
            id="p",
            week_of="2024-06-05",
            recipes=[MealPlanRecipe(id="h", recipe=lasagna, day_hint="Monday")],
        )
        week = organize_week(plan)
        assert [e.id for e in week.day_for(date(2024, 6, 10)).dinner] == ["h"]

    def test_unscheduled_entries(self, lasagna):
        plan = MealPlan(
            id="p",
            week_of="2024-01-01",
            recipes=[
                MealPlanRecipe(id="no-date", recipe=lasagna),
                MealPlanRecipe(id="bad-date", recipe=lasagna, planned_for_date="someday"),
                MealPlanRecipe(id="bad-hint", recipe=lasagna, day_hint="Funday"),
                MealPlanRecipe(id="outside", recipe=lasagna, planned_for_date="2024-01-08"),
            ],
        )
        week = organize_week(plan)

        assert [e.id for e in week.unscheduled] == ["no-date", "bad-date", "bad-hint", "outside"]
        assert all(day.is_empty for day in week.days)

    def test_entries_without_recipe_dropped(self, lasagna):
        plan = MealPlan(
            id="p",
            week_of="2024-01-01",
            recipes=[
                MealPlanRecipe(id="gone", recipe=None, planned_for_date="2024-01-01"),
                MealPlanRecipe(id="kept", recipe=lasagna, planned_for_date="2024-01-01"),
            ],
        )
        week = organize_week(plan)
        assert [e.id for e in week.days[0].dinner] == ["kept"]
        assert week.unscheduled == []

    def test_order_within_slot_preserved(self, lasagna, pancakes):
        plan = MealPlan(
            id="p",
            week_of="2024-01-01",
            recipes=[
                MealPlanRecipe(id="first", recipe=lasagna, planned_for_date="2024-01-01"),
                MealPlanRecipe(id="second", recipe=pancakes, planned_for_date="2024-01-01"),
            ],
        )
        assert [e.id for e in organize_week(plan).days[0].dinner] == ["first", "second"]
