"""Tests for the per-item occasion and weather predicates."""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.compatibility import (
    filter_by_weather,
    is_occasion_appropriate,
    is_weather_appropriate,
    is_weather_favored,
    outerwear_allowed,
)
from models.wardrobe_item import WardrobeItem, WeatherData


def _item(item_id: str = "item", **overrides) -> WardrobeItem:
    data = {"id": item_id, "name": item_id, "category": "tops", "color": ["white"], "style": "casual"}
    data.update(overrides)
    return WardrobeItem(**data)


def test_occasion_tag_or_versatile_qualifies() -> None:
    assert is_occasion_appropriate(_item(occasion=["date"]), "date")
    assert is_occasion_appropriate(_item(occasion=["Versatile"]), "date")
    assert not is_occasion_appropriate(_item(occasion=["gym"]), "date")


@pytest.mark.parametrize("occasion", ["formal", "business", "Business"])
@pytest.mark.parametrize("style", ["casual", "streetwear"])
def test_formality_veto_beats_occasion_tags(occasion: str, style: str) -> None:
    item = _item(style=style, occasion=[occasion, "versatile"])
    assert not is_occasion_appropriate(item, occasion, preferred_style=style)


def test_casual_tag_and_preferred_style_fallbacks() -> None:
    assert is_occasion_appropriate(_item(tags=["casual"], occasion=[]), "casual")
    assert is_occasion_appropriate(_item(style="bohemian", occasion=[]), "party", preferred_style="Bohemian")
    assert not is_occasion_appropriate(_item(style="bohemian", occasion=[]), "party")


def test_hot_weather_hard_excludes_outerwear() -> None:
    hot = WeatherData(temperature=26)
    light_jacket = _item(category="outerwear", tags=["light", "breathable"])
    assert not is_weather_appropriate(light_jacket, hot)
    assert not is_weather_appropriate(_item(tags=["wool"]), hot)
    assert is_weather_appropriate(_item(tags=["light"]), hot)
    assert not outerwear_allowed(hot)
    assert outerwear_allowed(None)


def test_cold_weather_excludes_summer_pieces_and_favours_layers() -> None:
    cold = WeatherData(temperature=3)
    assert not is_weather_appropriate(_item(tags=["shorts"]), cold)
    assert is_weather_favored(_item(category="outerwear"), cold)
    assert is_weather_favored(_item(tags=["long-sleeve"]), cold)


def test_rain_and_snow_conditions() -> None:
    rain = WeatherData(temperature=15, condition="Light Rain")
    snow = WeatherData(temperature=-2, condition="snow")
    assert not is_weather_appropriate(_item(tags=["delicate"]), rain)
    assert is_weather_favored(_item(category="outerwear", tags=["waterproof"]), rain)
    assert is_weather_favored(_item(category="shoes"), rain)
    assert not is_weather_favored(_item(category="shoes", tags=["sandals"]), rain)
    assert not is_weather_appropriate(_item(category="shoes", tags=["open-toe"]), snow)
    assert is_weather_favored(_item(category="shoes", tags=["boots"]), snow)


def test_mild_weather_lets_everything_through() -> None:
    mild = WeatherData(temperature=18)
    items = [_item("a", tags=["shorts"]), _item("b", category="outerwear", tags=["heavy"])]
    result = filter_by_weather(items, mild)
    assert [item.id for item in result.items] == ["a", "b"]
    assert result.removed == {}


def test_filter_reports_removed_items() -> None:
    items = [_item("tee", tags=["light"]), _item("coat", category="coat", tags=["heavy"])]
    result = filter_by_weather(items, WeatherData(temperature=31))
    assert [item.id for item in result.items] == ["tee"]
    assert "coat" in result.removed
    assert result.debug["removed_count"] == 1


def test_no_weather_means_no_filtering() -> None:
    items = [_item("coat", category="outerwear")]
    assert filter_by_weather(items, None).items == items
