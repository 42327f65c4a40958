"""Occasion and weather predicates for single wardrobe items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from models.taxonomy import (
    FORMAL_OCCASIONS,
    OUTERWEAR,
    SHOES,
    TOO_CASUAL_STYLES,
    VERSATILE,
    normalize_tag,
)
from models.wardrobe_item import WardrobeItem, WeatherData

COLD_THRESHOLD = 10.0
HOT_THRESHOLD = 25.0

COLD_FAVORED_TAGS = frozenset({"warm", "long-sleeve", "boots"})
COLD_EXCLUDED_TAGS = frozenset({"summer", "shorts"})
HOT_FAVORED_TAGS = frozenset({"light", "breathable", "short-sleeve", "shorts"})
HOT_EXCLUDED_TAGS = frozenset({"heavy", "wool", "winter", "warm"})
OPEN_TOE_TAGS = frozenset({"open-toe", "sandals", "sandal", "flip-flops"})


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of a single filtering step."""

    items: List[WardrobeItem]
    removed: Dict[str, str]
    debug: Dict[str, object]


def _has_any(tags: Iterable[str], wanted: Iterable[str]) -> bool:
    return bool(set(tags).intersection(wanted))


def is_open_toe(item: WardrobeItem) -> bool:
    return _has_any(item.tags, OPEN_TOE_TAGS)


def is_occasion_appropriate(item: WardrobeItem, occasion: str, preferred_style: Optional[str] = None) -> bool:
    """Return True when ``item`` suits ``occasion``.

    Formal and business occasions veto casual and streetwear pieces before any
    occasion tag is consulted.
    """

    target = normalize_tag(occasion)
    if target in FORMAL_OCCASIONS and item.style in TOO_CASUAL_STYLES:
        return False
    if target in item.occasion or VERSATILE in item.occasion:
        return True
    if target == "casual" and "casual" in item.tags:
        return True
    preferred = normalize_tag(preferred_style)
    return bool(preferred) and item.style == preferred


def weather_exclusion_reason(item: WardrobeItem, weather: Optional[WeatherData]) -> Optional[str]:
    """Return why the weather rules out ``item``, or ``None`` if it passes."""

    if weather is None:
        return None
    temperature = weather.temperature
    condition = weather.condition
    if temperature > HOT_THRESHOLD:
        if item.category == OUTERWEAR:
            return "outerwear excluded above 25C"
        if _has_any(item.tags, HOT_EXCLUDED_TAGS):
            return "too heavy for hot weather"
    elif temperature < COLD_THRESHOLD and _has_any(item.tags, COLD_EXCLUDED_TAGS):
        return "too light for cold weather"
    if "rain" in condition and "delicate" in item.tags:
        return "delicate piece in rain"
    if "snow" in condition and (_has_any(item.tags, {"summer"}) or is_open_toe(item)):
        return "not suitable for snow"
    return None


def is_weather_appropriate(item: WardrobeItem, weather: Optional[WeatherData]) -> bool:
    return weather_exclusion_reason(item, weather) is None


def is_weather_favored(item: WardrobeItem, weather: Optional[WeatherData]) -> bool:
    """Return True when the weather actively favours ``item``."""

    if weather is None:
        return False
    condition = weather.condition
    if weather.temperature < COLD_THRESHOLD:
        if item.category == OUTERWEAR or _has_any(item.tags, COLD_FAVORED_TAGS):
            return True
    elif weather.temperature > HOT_THRESHOLD and _has_any(item.tags, HOT_FAVORED_TAGS):
        return True
    if "rain" in condition:
        if item.category == OUTERWEAR and "waterproof" in item.tags:
            return True
        if item.category == SHOES and not is_open_toe(item):
            return True
    if "snow" in condition:
        if item.category == OUTERWEAR and "warm" in item.tags:
            return True
        if "boots" in item.tags:
            return True
    return False


def outerwear_allowed(weather: Optional[WeatherData]) -> bool:
    return weather is None or weather.temperature <= HOT_THRESHOLD


def filter_by_weather(items: List[WardrobeItem], weather: Optional[WeatherData]) -> FilteringResult:
    """Drop wardrobe items the weather rules out."""

    removed: Dict[str, str] = {}
    kept: List[WardrobeItem] = []
    for item in items:
        reason = weather_exclusion_reason(item, weather)
        if reason:
            removed[item.id] = reason
        else:
            kept.append(item)

    debug = {
        "input_count": len(items),
        "kept_count": len(kept),
        "removed_count": len(removed),
        "temperature": weather.temperature if weather else None,
        "condition": weather.condition if weather else None,
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


__all__ = [
    "FilteringResult",
    "is_occasion_appropriate",
    "is_weather_appropriate",
    "is_weather_favored",
    "is_open_toe",
    "weather_exclusion_reason",
    "outerwear_allowed",
    "filter_by_weather",
]
