"""Multi-criteria scoring, reasoning and descriptions for candidate outfits."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence

from logic.compatibility import COLD_THRESHOLD, HOT_THRESHOLD, is_open_toe
from logic.fashion_rules import assess_outfit
from memory.usage_ledger import diversity_score
from models.color_theory import (
    color_family,
    color_temperature,
    in_palette,
    is_earth_tone,
    is_neutral_color,
    seasonal_palette,
)
from models.taxonomy import (
    ACCESSORIES,
    ALL_SEASONS_TAGS,
    BOTTOMS,
    DRESSES,
    OUTERWEAR,
    SHOES,
    TOPS,
    VERSATILE,
    compatible_styles,
    formality_rank,
    normalize_season,
    season_for_date,
)
from models.wardrobe_item import (
    OutfitRecommendation,
    StyleContext,
    StyleProfile,
    WardrobeItem,
    WeatherData,
    outfit_id,
)

logger = logging.getLogger(__name__)

WEIGHTS = {
    "base": 0.1,
    "diversity": 0.12,
    "style": 0.22,
    "color": 0.18,
    "occasion": 0.2,
    "weather": 0.15,
    "completeness": 0.1,
    "fashion": 0.08,
    "goals": 0.05,
}

LOW_WEATHER_SCORE = 0.3
LOW_WEATHER_PENALTY = 0.1
WINDY_SPEED_KMH = 30.0
HUMID_THRESHOLD = 70.0
MAX_STYLING_TIPS = 3

WARM_TAGS = frozenset({"warm", "insulated", "thermal"})
LIGHT_TAGS = frozenset({"light", "breathable", "lightweight"})
SUMMER_TAGS = frozenset({"shorts", "tank", "summer", "sleeveless"})
HEAVY_TAGS = frozenset({"heavy", "wool", "winter", "warm"})
WATERPROOF_TAGS = frozenset({"waterproof", "water-resistant"})
BREATHABLE_FABRICS = frozenset({"breathable", "linen", "cotton"})
WIND_SENSITIVE_TAGS = frozenset({"flowy", "loose", "sheer", "chiffon"})

FORMAL_LEANING_STYLES = frozenset({"business", "formal", "classic"})
STRUCTURED_TAGS = frozenset({"structured", "tailored"})
CASUAL_TAGS = frozenset({"casual", "comfortable", "relaxed", "stretch", "soft"})
TREND_STYLES = frozenset({"modern", "contemporary", "trendy", "streetwear", "edgy"})
ELEGANT_STYLES = frozenset({"elegant", "formal", "classic"})


@dataclass(frozen=True)
class OutfitScore:
    confidence: float
    sub_scores: Dict[str, float]
    reasoning: List[str]
    diagnostics: Dict[str, object]


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _tags(item: WardrobeItem) -> set:
    return set(item.tags)


def _all_colors(items: Sequence[WardrobeItem]) -> List[str]:
    return [color for item in items for color in item.color]


def _is_versatile(item: WardrobeItem) -> bool:
    return item.style == VERSATILE or VERSATILE in item.occasion


def style_score(items: Sequence[WardrobeItem], preferred_style: str) -> float:
    """Max of the direct match formula and the compatibility-matrix formula."""

    if not items:
        return 0.0
    total = len(items)
    exact = sum(1 for item in items if item.style == preferred_style)
    versatile = sum(1 for item in items if item.style == VERSATILE)
    direct = 0.6 * exact / total + 0.4 * versatile / total

    related = compatible_styles(preferred_style)
    per_item = []
    for item in items:
        if item.style == preferred_style:
            per_item.append(1.0)
        elif item.style in related:
            per_item.append(0.75)
        elif item.style == VERSATILE:
            per_item.append(0.6)
        else:
            per_item.append(0.0)
    matrix = sum(per_item) / total
    return _clamp(max(direct, matrix))


def calculate_color_harmony_metrics(
    outfit_items: Sequence[WardrobeItem], favorite_colors: Sequence[str] = ()
) -> Dict[str, object]:
    """Compute the colour harmony score and the ratios behind it."""

    colors = _all_colors(outfit_items)
    if not colors:
        return {"harmony_score": 0.0, "colors": [], "favorite_match": False}

    total = len(colors)
    temperatures = Counter(color_temperature(color) for color in colors)
    warm_ratio = temperatures.get("warm", 0) / total
    cool_ratio = temperatures.get("cool", 0) / total
    neutral_ratio = sum(1 for color in colors if is_neutral_color(color)) / total
    earth_ratio = sum(1 for color in colors if is_earth_tone(color)) / total
    families = {
        family
        for family in (color_family(color) for color in colors if not is_neutral_color(color))
        if family
    }
    favorite_match = any(in_palette(color, favorite_colors) for color in colors) if favorite_colors else False

    score = 0.5
    temperature_ratio = max(warm_ratio, cool_ratio)
    if temperature_ratio >= 0.7:
        score += 0.3 * temperature_ratio
    if neutral_ratio >= 0.5:
        score += 0.3
    if earth_ratio >= 0.6:
        score += 0.2
    if len(families) > 3:
        score -= 0.2
    if favorite_match:
        score += 0.15

    return {
        "harmony_score": _clamp(score),
        "colors": colors,
        "warm_ratio": warm_ratio,
        "cool_ratio": cool_ratio,
        "neutral_ratio": neutral_ratio,
        "earth_ratio": earth_ratio,
        "families": sorted(families),
        "favorite_match": favorite_match,
    }


def palette_ratio(items: Sequence[WardrobeItem], palette: Sequence[str]) -> float:
    colors = _all_colors(items)
    if not colors or not palette:
        return 0.0
    return sum(1 for color in colors if in_palette(color, palette)) / len(colors)


def seasonal_score(items: Sequence[WardrobeItem], season: str) -> float:
    """Blend palette fit for ``season`` with the items' own season tags."""

    if not items:
        return 0.0
    color_part = palette_ratio(items, sorted(seasonal_palette(season)))
    tagged = 0
    for item in items:
        seasons = {normalize_season(tag) for tag in item.season}
        if season in seasons or seasons & ALL_SEASONS_TAGS:
            tagged += 1
    return 0.5 * color_part + 0.5 * tagged / len(items)


def _item_occasion_score(item: WardrobeItem, occasion: str) -> float:
    if occasion in item.occasion:
        return 1.0
    if VERSATILE in item.occasion:
        return 0.8
    target = formality_rank(occasion)
    if target is None:
        return 0.0
    ranks = [rank for rank in (formality_rank(tag) for tag in item.occasion + [item.style]) if rank is not None]
    if not ranks:
        return 0.0
    distance = min(abs(target - rank) for rank in ranks)
    if distance <= 1:
        return 0.7
    if distance <= 2:
        return 0.4
    return 0.0


def occasion_score(items: Sequence[WardrobeItem], occasion: str) -> float:
    if not items:
        return 0.0
    return sum(_item_occasion_score(item, occasion) for item in items) / len(items)


def _is_windy(weather: WeatherData) -> bool:
    if weather.wind_speed is not None and weather.wind_speed > WINDY_SPEED_KMH:
        return True
    return "wind" in weather.condition


def _item_weather_score(item: WardrobeItem, weather: WeatherData) -> float:
    tags = _tags(item)
    outer = item.category == OUTERWEAR
    temperature = weather.temperature
    condition = weather.condition
    score = 0.5

    if temperature < 5:
        if outer or tags & WARM_TAGS:
            score += 0.4
        if tags & {"wool", "fleece"}:
            score += 0.2
        if "long-sleeve" in tags or "boots" in tags:
            score += 0.1
        if tags & SUMMER_TAGS:
            score -= 0.4
    elif temperature < 15:
        if outer or "long-sleeve" in tags:
            score += 0.25
        if "light" in tags and not outer:
            score += 0.1
        if tags & SUMMER_TAGS:
            score -= 0.2
    elif temperature < 25:
        if tags & LIGHT_TAGS:
            score += 0.1
        if "heavy" in tags:
            score -= 0.1
    elif temperature < 30:
        if outer:
            score -= 0.4
        if tags & LIGHT_TAGS:
            score += 0.3
        if tags & {"shorts", "tank", "short-sleeve"}:
            score += 0.15
        if tags & HEAVY_TAGS:
            score -= 0.25
    else:
        if outer:
            score -= 0.5
        if tags & LIGHT_TAGS:
            score += 0.4
        if tags & {"shorts", "tank", "short-sleeve"}:
            score += 0.2
        if tags & HEAVY_TAGS:
            score -= 0.4

    if "rain" in condition:
        if tags & WATERPROOF_TAGS:
            score += 0.3
        if item.category == SHOES:
            score += -0.2 if is_open_toe(item) else 0.15
        if "delicate" in tags:
            score -= 0.3
    if "snow" in condition:
        if outer or "warm" in tags:
            score += 0.3
        if tags & {"boots", "closed-toe"}:
            score += 0.2
        if "summer" in tags or is_open_toe(item):
            score -= 0.3
    if _is_windy(weather):
        if "windproof" in tags or outer:
            score += 0.2
        if set(item.descriptors) & WIND_SENSITIVE_TAGS:
            score -= 0.15
    if weather.humidity > HUMID_THRESHOLD and set(item.descriptors) & BREATHABLE_FABRICS:
        score += 0.1
    return _clamp(score)


def weather_score(items: Sequence[WardrobeItem], weather: WeatherData) -> float:
    if not items:
        return 0.0
    return _clamp(sum(_item_weather_score(item, weather) for item in items) / len(items))


def completeness_score(items: Sequence[WardrobeItem]) -> float:
    categories = Counter(item.category for item in items)
    has_dress = categories[DRESSES] > 0
    score = 0.0
    if categories[TOPS] or has_dress:
        score += 0.3
    if categories[BOTTOMS] or has_dress:
        score += 0.3
    if categories[SHOES]:
        score += 0.2
    if has_dress and not categories[TOPS] and not categories[BOTTOMS]:
        score += 0.15
    if categories[OUTERWEAR] and len(items) >= 3:
        score += 0.1
    if categories[ACCESSORIES] > 3:
        score -= 0.2
    return _clamp(score)


def _goal_component(goal: str, items: Sequence[WardrobeItem]) -> Optional[float]:
    total = len(items)

    def share(predicate) -> float:
        return sum(1 for item in items if predicate(item)) / total

    if "confiden" in goal or "professional" in goal:
        return share(lambda item: item.style in FORMAL_LEANING_STYLES or bool(set(item.descriptors) & STRUCTURED_TAGS))
    if "comfort" in goal or "casual" in goal:
        return share(lambda item: item.style == "casual" or bool(_tags(item) & CASUAL_TAGS))
    if "trend" in goal:
        return share(lambda item: item.style in TREND_STYLES)
    if "versatil" in goal:
        versatile = share(_is_versatile)
        return 1.0 if versatile == 1.0 else versatile * 0.5
    if "elegan" in goal:
        return share(lambda item: item.style in ELEGANT_STYLES)
    return None


def goal_alignment(items: Sequence[WardrobeItem], goals: Sequence[str]) -> Optional[float]:
    """Average alignment over recognised goals, or ``None`` when none apply."""

    if not items or not goals:
        return None
    components = [value for value in (_goal_component(goal, items) for goal in goals) if value is not None]
    if not components:
        return None
    return _clamp(sum(components) / len(components))


def dominant_style(items: Sequence[WardrobeItem], fallback: str = "casual") -> str:
    counts = Counter(item.style for item in items if item.style)
    if not counts:
        return fallback
    return counts.most_common(1)[0][0]


def describe_outfit(items: Sequence[WardrobeItem], context: StyleContext, style: str) -> str:
    if any(item.category == DRESSES for item in items):
        description = f"Sophisticated {style} dress ensemble"
    else:
        description = f"Curated {style} combination"
    description += f" perfect for {context.occasion}"
    if context.time_of_day:
        description += f" in the {context.time_of_day}"
    weather = context.weather
    if weather is not None:
        if weather.temperature < COLD_THRESHOLD:
            description += " with weather-appropriate layering"
        elif weather.temperature > HOT_THRESHOLD:
            description += " optimized for warm weather comfort"
    return description


def styling_tips(items: Sequence[WardrobeItem], context: StyleContext) -> List[str]:
    tips: List[str] = []
    weather = context.weather
    if weather is not None:
        if weather.temperature < COLD_THRESHOLD:
            tips.append("Layer with a warm scarf or jacket for extra warmth")
        elif weather.temperature > HOT_THRESHOLD:
            tips.append("Choose breathable fabrics and lighter colors to stay cool")
        if "rain" in weather.condition:
            tips.append("Consider waterproof footwear and a light jacket")
        if _is_windy(weather):
            tips.append("Secure loose layers and skip wide-brimmed hats in the wind")

    if "formal" in context.occasion or context.occasion == "business":
        tips.append("Ensure all pieces are well-fitted and pressed")
        tips.append("Add a classic watch or subtle jewelry")
    elif "casual" in context.occasion:
        tips.append("Roll up sleeves or add casual accessories for a relaxed look")

    colors = {color for item in items for color in item.color}
    if "black" in colors and "white" in colors:
        tips.append("Classic black and white never goes out of style")
    return tips[:MAX_STYLING_TIPS]


def _reasoning(
    sub_scores: Mapping[str, float],
    color_metrics: Mapping[str, object],
    items: Sequence[WardrobeItem],
    profile: StyleProfile,
    context: StyleContext,
    season: str,
    fashion_notes: Sequence[str],
) -> List[str]:
    reasons: List[str] = []
    style = sub_scores["style"]
    if style > 0.9:
        reasons.append(f"Perfectly embodies your {profile.preferred_style} style")
    elif style > 0.7:
        reasons.append(f"Expertly matches your {profile.preferred_style} style")
    elif style > 0.5:
        reasons.append(f"Complements your {profile.preferred_style} style")

    occasion = sub_scores["occasion"]
    if occasion >= 0.8:
        reasons.append(f"Perfectly appropriate for {context.occasion} occasions")
    elif occasion >= 0.6:
        reasons.append(f"Suitable for {context.occasion} occasions")

    harmony = float(color_metrics.get("harmony_score", 0.0))
    if harmony > 0.8:
        reasons.append("Excellent color harmony with sophisticated palette coordination")
    elif harmony > 0.6:
        reasons.append("Good color balance with complementary tones")
    if color_metrics.get("favorite_match"):
        reasons.append("Features your favorite colors")
    if sub_scores.get("palette", 0.0) > 0:
        reasons.append("Draws on your personal color palette")
    if sub_scores["seasonal"] >= 0.6:
        reasons.append(f"Colors suit the {season} season")

    weather = context.weather
    if weather is not None:
        if weather.temperature < COLD_THRESHOLD:
            reasons.append(f"Ready for cold-weather layering at {weather.temperature:g}°C")
        elif sub_scores["weather"] > 0.7:
            reasons.append(f"Ideally suited for {weather.condition} weather ({weather.temperature:g}°C)")

    if sub_scores["completeness"] >= 0.9:
        if any(item.category == DRESSES for item in items):
            reasons.append("Elegant dress-based look that stands on its own")
        else:
            reasons.append("Complete outfit with all essential pieces")
    if sub_scores["fashion"] >= 0.6 and fashion_notes:
        reasons.append(fashion_notes[0])
    goals = sub_scores.get("goals")
    if goals is not None and goals >= 0.6:
        reasons.append(f"Supports your goal to feel {', '.join(profile.goals)}")
    return reasons


def score_outfit(
    items: Sequence[WardrobeItem],
    profile: StyleProfile,
    context: StyleContext,
    usage: Mapping[str, int],
    today: Optional[date] = None,
) -> OutfitScore:
    """Calculate the composite confidence, sub-scores and reasoning for an outfit."""

    if not items:
        raise ValueError("Cannot score an empty outfit")

    season = normalize_season(context.season) or season_for_date(today)
    color_metrics = calculate_color_harmony_metrics(items, profile.favorite_colors)
    harmony = float(color_metrics["harmony_score"])
    seasonal = seasonal_score(items, season)
    fashion = assess_outfit(items)

    sub_scores: Dict[str, float] = {
        "base": 1.0,
        "diversity": diversity_score(items, usage),
        "style": style_score(items, profile.preferred_style),
        "seasonal": seasonal,
        "occasion": occasion_score(items, context.occasion),
        "completeness": completeness_score(items),
        "fashion": fashion.score,
    }
    if profile.color_palette_colors:
        palette = palette_ratio(items, profile.color_palette_colors)
        sub_scores["palette"] = palette
        sub_scores["color"] = 0.6 * harmony + 0.2 * seasonal + 0.2 * palette
    else:
        sub_scores["color"] = 0.8 * harmony + 0.2 * seasonal

    if context.weather is not None:
        sub_scores["weather"] = weather_score(items, context.weather)
    goals = goal_alignment(items, profile.goals)
    if goals is not None:
        sub_scores["goals"] = goals

    raw = sum(WEIGHTS[name] * sub_scores[name] for name in WEIGHTS if name in sub_scores)
    weather_penalty = "weather" in sub_scores and sub_scores["weather"] < LOW_WEATHER_SCORE
    if weather_penalty:
        raw -= LOW_WEATHER_PENALTY
    confidence = _clamp(raw)

    reasoning = _reasoning(sub_scores, color_metrics, items, profile, context, season, fashion.notes)
    diagnostics = {
        "raw_score": raw,
        "season": season,
        "weather_penalty": weather_penalty,
        "color_metrics": color_metrics,
        "patterns": fashion.patterns,
        "textures": fashion.textures,
    }
    return OutfitScore(confidence=confidence, sub_scores=sub_scores, reasoning=reasoning, diagnostics=diagnostics)


def build_recommendation(
    items: Sequence[WardrobeItem],
    profile: StyleProfile,
    context: StyleContext,
    usage: Mapping[str, int],
    today: Optional[date] = None,
) -> OutfitRecommendation:
    """Score ``items`` and wrap the result as an :class:`OutfitRecommendation`."""

    score = score_outfit(items, profile, context, usage, today=today)
    style = dominant_style(items, fallback=profile.preferred_style or "casual")
    return OutfitRecommendation(
        id=outfit_id(items),
        items=list(items),
        occasion=context.occasion,
        style=style,
        confidence=score.confidence,
        description=describe_outfit(items, context, style),
        reasoning=score.reasoning,
        styling_tips=styling_tips(items, context),
        sub_scores={name: round(value, 4) for name, value in score.sub_scores.items()},
        diversity=score.sub_scores["diversity"],
    )


__all__ = [
    "WEIGHTS",
    "OutfitScore",
    "calculate_color_harmony_metrics",
    "style_score",
    "occasion_score",
    "weather_score",
    "completeness_score",
    "seasonal_score",
    "palette_ratio",
    "goal_alignment",
    "dominant_style",
    "describe_outfit",
    "styling_tips",
    "score_outfit",
    "build_recommendation",
]
