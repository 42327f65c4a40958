"""Tests for payload schemas, inventory coercion and review payloads."""

from pathlib import Path
import sys

import pytest
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.validation import (
    RecommendationRequest,
    StyleContextPayload,
    WardrobeItemPayload,
    coerce_inventory,
    validation_failure,
)
from models.wardrobe_item import WardrobeItem


def test_item_payload_coerces_loose_fields() -> None:
    payload = WardrobeItemPayload.model_validate(
        {"id": 42, "category": "Shirt", "color": "Navy", "occasion": None, "tags": ("Fitted", "fitted"), "style": None}
    )
    item = payload.to_domain()
    assert item.id == "42"
    assert item.category == "tops"
    assert item.color == ["navy"]
    assert item.occasion == []
    assert item.tags == ["fitted"]
    assert item.style == ""


@pytest.mark.parametrize(
    "raw",
    [
        {"category": "tops", "color": ["red"]},
        {"id": "x", "color": ["red"]},
        {"id": "x", "category": "tops", "color": []},
        {"id": "x", "category": "tops", "color": ["  "]},
    ],
)
def test_item_payload_rejects_missing_essentials(raw) -> None:
    with pytest.raises(ValidationError):
        WardrobeItemPayload.model_validate(raw)


def test_coerce_inventory_keeps_valid_and_reports_rejects() -> None:
    result = coerce_inventory(
        [
            {"id": "a", "category": "tops", "color": ["white"]},
            WardrobeItem(id="b", category="shoes", color=["black"]),
            WardrobeItem(id="c", category="shoes", color=[]),
            {"id": "a", "category": "tops", "color": ["white"]},
            17,
        ]
    )
    assert [item.id for item in result.items] == ["a", "b"]
    assert set(result.rejected) == {"c", "a", "index:4"}
    assert result.rejected["a"] == "duplicate id"


def test_malformed_optional_fields_do_not_reject_items() -> None:
    base = {"category": "tops", "color": ["white"]}
    result = coerce_inventory(
        [
            {**base, "id": "tags", "tags": ["fitted", None]},
            {**base, "id": "occasion", "occasion": 5},
            {**base, "id": "name", "name": 42},
            {**base, "id": "season", "season": {"bad": 1}},
            {**base, "id": "style", "style": ["casual"], "fit": 3.5, "photo_url": {"href": "x"}},
            {**base, "id": "colors", "color": ["navy", None, 7]},
        ]
    )
    assert result.rejected == {}
    by_id = {item.id: item for item in result.items}
    assert by_id["tags"].tags == ["fitted"]
    assert by_id["occasion"].occasion == []
    assert by_id["name"].name == "42"
    assert by_id["season"].season == []
    assert by_id["style"].style == ""
    assert by_id["style"].photo_url is None
    assert by_id["colors"].color == ["navy"]


def test_color_without_any_string_entry_is_rejected() -> None:
    result = coerce_inventory([{"id": "x", "category": "tops", "color": [None, 3]}])
    assert result.items == []
    assert set(result.rejected) == {"x"}


def test_coerce_inventory_handles_none() -> None:
    result = coerce_inventory(None)
    assert result.items == [] and result.rejected == {}


def test_context_payload_builds_weather() -> None:
    context = StyleContextPayload.model_validate(
        {"occasion": "Business", "weather": {"temperature": "12.5", "condition": "Rain", "wind_speed": 40}}
    ).to_domain()
    assert context.occasion == "business"
    assert context.weather.temperature == 12.5
    assert context.weather.condition == "rain"
    assert context.weather.wind_speed == 40.0


def test_weather_humidity_bounds() -> None:
    with pytest.raises(ValidationError):
        StyleContextPayload.model_validate({"occasion": "casual", "weather": {"temperature": 10, "humidity": 140}})


def test_validation_failure_payload() -> None:
    with pytest.raises(ValidationError) as excinfo:
        RecommendationRequest.model_validate({"inventory": [], "profile": {"id": "p"}, "context": {}})
    payload = validation_failure("Invalid request", excinfo.value)
    assert payload["status"] == "needs_review"
    assert payload["message"] == "Invalid request"
    locations = {tuple(detail["loc"]) for detail in payload["details"]}
    assert ("profile", "preferred_style") in locations
    assert ("context", "occasion") in locations
