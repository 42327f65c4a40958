"""Unit tests for the colour compatibility tables and seasonal palettes."""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.color_theory import (
    color_family,
    color_temperature,
    colors_compatible,
    harmony_rule,
    is_neutral,
    matches_season,
    seasonal_palette,
)


@pytest.mark.parametrize(
    "colors, expected",
    [
        (["black"], True),
        (["Navy Blue"], True),
        (["light grey"], True),
        (["off-white"], True),
        (["red", "cream"], True),
        (["red"], False),
        ([], False),
        (None, False),
    ],
)
def test_is_neutral_matches_partial_names(colors, expected) -> None:
    assert is_neutral(colors) is expected


@pytest.mark.parametrize(
    "side_a, side_b, rule",
    [
        (["black"], ["red"], "neutral"),
        (["Red"], ["red"], "exact"),
        (["blue"], ["orange"], "complementary"),
        (["orange"], ["blue"], "complementary"),
        (["red"], ["coral"], "analogous"),
        (["navy"], ["mint"], "neutral"),
        (["pink"], ["teal"], "triadic"),
        (["red"], ["green"], "none"),
        (["chartreuse-ish"], ["vermilion"], "none"),
    ],
)
def test_harmony_rule_picks_first_matching_table(side_a, side_b, rule) -> None:
    assert harmony_rule(side_a, side_b) == rule


def test_red_and_green_are_not_compatible() -> None:
    assert not colors_compatible(["red"], ["green"])
    assert colors_compatible(["red"], ["green", "beige"])


def test_triadic_and_monochromatic_sets() -> None:
    assert harmony_rule(["red"], ["yellow"]) == "triadic"
    assert harmony_rule(["crimson"], ["maroon"]) == "monochromatic"


def test_unknown_colors_only_pair_with_neutrals() -> None:
    assert not colors_compatible(["zinfandel"], ["periwinkle"])
    assert colors_compatible(["zinfandel"], ["white"])


def test_seasonal_palettes() -> None:
    assert "rust" in seasonal_palette("autumn")
    assert seasonal_palette("fall") == seasonal_palette("autumn")
    assert seasonal_palette("monsoon") == frozenset()
    assert matches_season(["burnt orange"], "autumn")
    assert not matches_season(["lavender"], "winter")


def test_color_family_and_temperature() -> None:
    assert color_family("dark red") == "red"
    assert color_temperature("coral") == "warm"
    assert color_temperature("teal") == "cool"
    assert color_temperature("black") == "neutral"
