"""Tests for recipe ingredient swaps."""

from grocerygo.plan.edits import swap_ingredient
from grocerygo.schemas import RecipeIngredient


def lines(*items):
    return [RecipeIngredient(item=item, quantity="1 cup") for item in items]


class TestSwapIngredient:
    def test_substring_match_case_insensitive(self):
        swapped, changed = swap_ingredient(lines("Unsalted Butter", "flour"), "butter", "olive oil")
        assert changed == 1
        assert [i.item for i in swapped] == ["olive oil", "flour"]

    def test_quantity_and_unit_kept(self):
        original = [RecipeIngredient(item="milk", quantity="2 cups", unit="ml")]
        swapped, _ = swap_ingredient(original, "milk", "oat milk")
        assert swapped[0] == RecipeIngredient(item="oat milk", quantity="2 cups", unit="ml")
        assert original[0].item == "milk"

    def test_every_match_replaced(self):
        _, changed = swap_ingredient(lines("cheddar cheese", "parmesan cheese", "rice"), "cheese", "tofu")
        assert changed == 2

    def test_no_match(self):
        original = lines("rice")
        swapped, changed = swap_ingredient(original, "butter", "olive oil")
        assert changed == 0
        assert swapped == original

    def test_blank_names_change_nothing(self):
        assert swap_ingredient(lines("rice"), "  ", "quinoa")[1] == 0
        assert swap_ingredient(lines("rice"), "rice", " ")[1] == 0
