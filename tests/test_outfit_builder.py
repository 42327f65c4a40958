"""Tests for the randomised, usage-aware combination generator."""

from pathlib import Path
import random
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.outfit_builder import generate_combinations, group_by_category, order_by_usage
from models.wardrobe_item import WardrobeItem, WeatherData


def _item(item_id: str, category: str, color, **overrides) -> WardrobeItem:
    data = {
        "id": item_id,
        "name": item_id,
        "category": category,
        "color": color,
        "style": "casual",
        "occasion": ["casual"],
    }
    data.update(overrides)
    return WardrobeItem(**data)


def _wardrobe():
    return [
        _item("tee_white", "tops", ["white"]),
        _item("shirt_blue", "tops", ["blue"]),
        _item("jeans_navy", "bottoms", ["navy"]),
        _item("chinos_khaki", "bottoms", ["khaki"]),
        _item("sneakers_white", "shoes", ["white"]),
        _item("jacket_denim", "outerwear", ["blue"]),
        _item("watch_silver", "accessories", ["silver"]),
        _item("sundress_yellow", "dresses", ["yellow"]),
    ]


def _ids(outfits):
    return [sorted(item.id for item in outfit) for outfit in outfits]


def test_group_by_category_uses_canonical_names() -> None:
    grouped = group_by_category([_item("a", "Shirt", ["red"]), _item("b", "TOPS", ["red"]), _item("c", "scarf", ["red"])])
    assert [item.id for item in grouped["tops"]] == ["a", "b"]
    assert [item.id for item in grouped["scarf"]] == ["c"]


def test_order_by_usage_puts_least_used_first() -> None:
    items = [_item(name, "tops", ["white"]) for name in ("a", "b", "c", "d")]
    ordered = order_by_usage(items, {"a": 2, "b": 1}, random.Random(3))
    assert [item.id for item in ordered][-2:] == ["b", "a"]
    assert {item.id for item in ordered[:2]} == {"c", "d"}


def test_same_seed_gives_same_candidates() -> None:
    grouped = group_by_category(_wardrobe())
    kwargs = dict(occasion="casual", preferred_style="casual", include_accessories=True, weather=None, usage={})
    first = generate_combinations(grouped, rng=random.Random(42), **kwargs)
    second = generate_combinations(grouped, rng=random.Random(42), **kwargs)
    assert _ids(first.outfits) == _ids(second.outfits)
    assert first.diagnostics["total"] == len(first.outfits)


def test_dress_outfits_come_first_and_carry_shoes() -> None:
    result = generate_combinations(
        group_by_category(_wardrobe()),
        occasion="casual",
        preferred_style="casual",
        include_accessories=False,
        weather=None,
        usage={},
        rng=random.Random(1),
    )
    first = result.outfits[0]
    assert first[0].id == "sundress_yellow"
    assert "sneakers_white" in [item.id for item in first]
    assert result.diagnostics["dress_outfits"] == 1
    assert all(item.category != "accessories" for outfit in result.outfits for item in outfit)


def test_items_at_cap_never_enter_candidates() -> None:
    usage = {"tee_white": 2, "sneakers_white": 2, "sundress_yellow": 2}
    for seed in range(10):
        result = generate_combinations(
            group_by_category(_wardrobe()),
            occasion="casual",
            preferred_style="casual",
            include_accessories=True,
            weather=None,
            usage=usage,
            rng=random.Random(seed),
        )
        used = {item.id for outfit in result.outfits for item in outfit}
        assert not used & set(usage)


def test_hot_weather_never_attaches_outerwear() -> None:
    hot = WeatherData(temperature=29)
    for seed in range(20):
        result = generate_combinations(
            group_by_category(_wardrobe()),
            occasion="casual",
            preferred_style="casual",
            include_accessories=True,
            weather=hot,
            usage={},
            rng=random.Random(seed),
        )
        assert all(item.category != "outerwear" for outfit in result.outfits for item in outfit)
        assert result.diagnostics["outerwear_allowed"] is False


def test_pairing_count_is_bounded_by_smallest_pool() -> None:
    tops = [_item(f"top{i}", "tops", ["white"]) for i in range(20)]
    bottoms = [_item(f"bottom{i}", "bottoms", ["black"]) for i in range(3)]
    result = generate_combinations(
        group_by_category(tops + bottoms),
        occasion="casual",
        preferred_style="casual",
        include_accessories=False,
        weather=None,
        usage={},
        rng=random.Random(0),
    )
    assert result.diagnostics["pairings_considered"] == 3
    assert len(result.outfits) == 3
    assert all(len(outfit) == 2 for outfit in result.outfits)


def test_clashing_pair_is_rejected() -> None:
    wardrobe = [_item("top_red", "tops", ["red"]), _item("bottom_green", "bottoms", ["green"])]
    result = generate_combinations(
        group_by_category(wardrobe),
        occasion="casual",
        preferred_style="casual",
        include_accessories=False,
        weather=None,
        usage={},
        rng=random.Random(0),
    )
    assert result.outfits == []
    assert result.diagnostics["pairs_rejected"]["color"] == 1


def test_occasion_filter_applies_to_both_members() -> None:
    wardrobe = [
        _item("blazer", "tops", ["navy"], style="business", occasion=["business"]),
        _item("joggers", "bottoms", ["grey"], style="casual", occasion=["business"]),
    ]
    result = generate_combinations(
        group_by_category(wardrobe),
        occasion="business",
        preferred_style="business",
        include_accessories=False,
        weather=None,
        usage={},
        rng=random.Random(0),
    )
    assert result.outfits == []
    assert result.diagnostics["pairs_rejected"]["occasion"] == 1


def test_weather_favoured_shoes_are_preferred() -> None:
    wardrobe = [
        _item("top", "tops", ["white"]),
        _item("bottom", "bottoms", ["black"]),
        _item("loafers", "shoes", ["black"]),
        _item("boots", "shoes", ["black"], tags=["boots"]),
    ]
    cold = WeatherData(temperature=4)
    for seed in range(5):
        result = generate_combinations(
            group_by_category(wardrobe),
            occasion="casual",
            preferred_style="casual",
            include_accessories=False,
            weather=cold,
            usage={},
            rng=random.Random(seed),
        )
        assert "boots" in [item.id for item in result.outfits[0]]
