"""Tests for text transformers."""

import numpy as np
import pytest

from joinerator.transform import (
    TRANSFORMERS,
    apply_transformers,
    lower_case,
    random_case,
    select_transformer,
    upper_case,
    uwuize,
)


class TestCasing:
    def test_upper(self):
        assert upper_case("Hello, World") == "HELLO, WORLD"

    def test_lower(self):
        assert lower_case("Hello, World") == "hello, world"

    def test_random_case_keeps_letters(self):
        text = "The Quick Brown Fox"
        result = random_case(text, np.random.default_rng(0))
        assert result.lower() == text.lower()
        assert len(result) == len(text)

    def test_random_case_mixes(self):
        result = random_case("a" * 200, np.random.default_rng(1))
        assert "a" in result
        assert "A" in result

    def test_random_case_without_rng(self):
        assert random_case("abc").lower() == "abc"


class TestUwuize:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("I love you", "I wuv you"),
            ("very little", "vewwy widdle"),
            ("oh god", "owh gawd"),
            ("that is not funny", "that is nawt fwunny"),
            ("would you call me", "wud you cawl me"),
            ("lucky", "lucky-wucky"),
        ],
    )
    def test_phrases(self, text, expected):
        assert uwuize(text) == expected

    def test_case_insensitive_match(self):
        assert uwuize("LOVE") == "wuv"

    def test_plain_text_untouched(self):
        assert uwuize("hello") == "hello"


class TestRegistry:
    def test_names(self):
        assert set(TRANSFORMERS) == {"upper", "lower", "random", "uwu"}

    def test_select_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown transformer"):
            select_transformer("reverse")

    def test_applied_in_order(self):
        assert apply_transformers("I love you", ["uwu", "upper"]) == "I WUV YOU"
        assert apply_transformers("I love you", ["upper", "lower"]) == "i love you"

    def test_no_transformers(self):
        assert apply_transformers("Same", []) == "Same"

    def test_unknown_name_in_chain_raises(self):
        with pytest.raises(ValueError, match="Unknown transformer"):
            apply_transformers("text", ["upper", "nope"])
