"""Tests for the legacy string-encoded list tokenizer."""

from grocerygo.normalize.legacy import coerce_string_list, parse_array_from_string


class TestParseArrayFromString:
    """Tests for parse_array_from_string function."""

    def test_single_quoted_items(self):
        assert parse_array_from_string("['2 cups flour', '1 egg']") == ["2 cups flour", "1 egg"]

    def test_mixed_quote_styles(self):
        assert parse_array_from_string("['a', \"b\"]") == ["a", "b"]

    def test_other_quote_inside_item(self):
        assert parse_array_from_string("[\"grandma's sauce\"]") == ["grandma's sauce"]

    def test_escaped_quote_inside_item(self):
        assert parse_array_from_string(r'["say \"cheese\"", "x"]') == ['say "cheese"', "x"]

    def test_escaped_backslash(self):
        assert parse_array_from_string(r"['a\\b']") == ["a\\b"]

    def test_text_outside_quotes_ignored(self):
        assert parse_array_from_string("[ 'a' ,junk, 'b' ]") == ["a", "b"]

    def test_empty_list(self):
        assert parse_array_from_string("[]") == []

    def test_empty_item(self):
        assert parse_array_from_string("['', 'a']") == ["", "a"]

    def test_surrounding_whitespace(self):
        assert parse_array_from_string("   ['a']  ") == ["a"]

    def test_not_bracketed(self):
        """Input without brackets is not a list."""
        assert parse_array_from_string("'a', 'b'") == []
        assert parse_array_from_string("plain text") == []
        assert parse_array_from_string("") == []
        assert parse_array_from_string("[") == []

    def test_unterminated_item_dropped(self):
        assert parse_array_from_string("['a', 'b]") == ["a"]


class TestCoerceStringList:
    """Tests for coerce_string_list function."""

    def test_none(self):
        assert coerce_string_list(None) == []

    def test_legacy_string(self):
        assert coerce_string_list("['step one', 'step two']") == ["step one", "step two"]

    def test_list_kept(self):
        assert coerce_string_list(["step one", "step two"]) == ["step one", "step two"]

    def test_list_items_stringified_and_none_skipped(self):
        assert coerce_string_list([1, None, "x"]) == ["1", "x"]

    def test_other_types(self):
        assert coerce_string_list(42) == []

    def test_both_encodings_agree(self):
        items = ["Preheat oven", "Bake 'til golden"]
        encoded = "['Preheat oven', \"Bake 'til golden\"]"
        assert coerce_string_list(encoded) == coerce_string_list(items)
