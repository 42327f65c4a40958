"""Canonical taxonomy definitions for wardrobe items and styling context.

This module centralises the labels the engine reasons about: categories and
their aliases, the occasion/style vocabulary, the formality ordinals and the
style-compatibility matrix. Everything here is static, immutable data loaded
once at import time.
"""

from __future__ import annotations

from datetime import date
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional

TOPS = "tops"
BOTTOMS = "bottoms"
DRESSES = "dresses"
SHOES = "shoes"
OUTERWEAR = "outerwear"
ACCESSORIES = "accessories"

CATEGORIES = (TOPS, BOTTOMS, DRESSES, SHOES, OUTERWEAR, ACCESSORIES)

CATEGORY_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "top": TOPS,
        "tops": TOPS,
        "shirt": TOPS,
        "shirts": TOPS,
        "blouse": TOPS,
        "blouses": TOPS,
        "sweater": TOPS,
        "sweaters": TOPS,
        "bottom": BOTTOMS,
        "bottoms": BOTTOMS,
        "pants": BOTTOMS,
        "trousers": BOTTOMS,
        "jeans": BOTTOMS,
        "skirt": BOTTOMS,
        "skirts": BOTTOMS,
        "shorts": BOTTOMS,
        "dress": DRESSES,
        "dresses": DRESSES,
        "jumpsuit": DRESSES,
        "shoe": SHOES,
        "shoes": SHOES,
        "footwear": SHOES,
        "outerwear": OUTERWEAR,
        "jacket": OUTERWEAR,
        "jackets": OUTERWEAR,
        "coat": OUTERWEAR,
        "coats": OUTERWEAR,
        "accessory": ACCESSORIES,
        "accessories": ACCESSORIES,
        "jewelry": ACCESSORIES,
        "jewellery": ACCESSORIES,
        "bag": ACCESSORIES,
        "bags": ACCESSORIES,
    }
)

VERSATILE = "versatile"
FORMAL_OCCASIONS = frozenset({"formal", "business"})
TOO_CASUAL_STYLES = frozenset({"casual", "streetwear"})

# Ordinal formality scale used for occasion distance lookups.
FORMALITY_SCALE: Mapping[str, int] = MappingProxyType(
    {
        "formal": 5,
        "black-tie": 5,
        "wedding": 5,
        "business": 4,
        "cocktail": 4,
        "interview": 4,
        "work": 4,
        "smart-casual": 3,
        "date": 3,
        "party": 3,
        "dinner": 3,
        "casual": 2,
        "everyday": 2,
        "weekend": 2,
        "travel": 2,
        "sporty": 1,
        "athletic": 1,
        "gym": 1,
        "outdoor": 1,
        "loungewear": 0,
        "lounge": 0,
        "sleep": 0,
    }
)

STYLE_COMPATIBILITY: Mapping[str, frozenset] = MappingProxyType(
    {
        "business": frozenset({"formal", "smart-casual", "classic"}),
        "formal": frozenset({"business", "classic", "elegant"}),
        "classic": frozenset({"business", "formal", "smart-casual", "minimalist", "vintage"}),
        "smart-casual": frozenset({"casual", "business", "classic", "minimalist"}),
        "casual": frozenset({"smart-casual", "streetwear", "sporty", "bohemian", "relaxed"}),
        "streetwear": frozenset({"casual", "sporty", "edgy", "modern"}),
        "sporty": frozenset({"casual", "athleisure", "streetwear"}),
        "athleisure": frozenset({"sporty", "casual", "streetwear"}),
        "bohemian": frozenset({"casual", "vintage", "romantic"}),
        "vintage": frozenset({"classic", "bohemian", "retro"}),
        "retro": frozenset({"vintage", "classic"}),
        "minimalist": frozenset({"modern", "classic", "smart-casual"}),
        "modern": frozenset({"minimalist", "contemporary", "edgy"}),
        "contemporary": frozenset({"modern", "minimalist", "trendy"}),
        "trendy": frozenset({"contemporary", "streetwear", "modern"}),
        "edgy": frozenset({"streetwear", "modern"}),
        "elegant": frozenset({"formal", "classic", "romantic"}),
        "romantic": frozenset({"bohemian", "elegant"}),
        "relaxed": frozenset({"casual", "bohemian"}),
    }
)

SEASONS = ("spring", "summer", "autumn", "winter")
SEASON_ALIASES: Mapping[str, str] = MappingProxyType({"fall": "autumn"})
ALL_SEASONS_TAGS = frozenset({"all", "all-season", "all_year", "all-year", VERSATILE})


def normalize_tag(value: Any) -> str:
    """Normalise a free-form tag for case-insensitive comparisons."""

    if value is None:
        return ""
    return str(value).strip().lower()


def normalize_tags(values: Optional[Iterable[Any]]) -> List[str]:
    """Normalise and deduplicate tags, preserving first-seen order."""

    if values is None:
        return []
    if isinstance(values, (str, bytes)):
        values = [values]
    normalised: List[str] = []
    seen = set()
    for value in values:
        key = normalize_tag(value)
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def normalize_category(value: Any) -> str:
    """Map a category string onto the canonical set.

    Unknown categories are kept, lower-cased, so that other category strings
    still group together case-insensitively.
    """

    key = normalize_tag(value)
    return CATEGORY_ALIASES.get(key, key)


def normalize_season(value: Any) -> str:
    key = normalize_tag(value)
    return SEASON_ALIASES.get(key, key)


def season_for_date(today: date | None = None) -> str:
    """Return the northern-hemisphere calendar season for ``today``."""

    month = (today or date.today()).month
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"


def formality_rank(tag: str) -> Optional[int]:
    return FORMALITY_SCALE.get(normalize_tag(tag))


def compatible_styles(style: str) -> frozenset:
    return STYLE_COMPATIBILITY.get(normalize_tag(style), frozenset())


__all__ = [
    "TOPS",
    "BOTTOMS",
    "DRESSES",
    "SHOES",
    "OUTERWEAR",
    "ACCESSORIES",
    "CATEGORIES",
    "CATEGORY_ALIASES",
    "VERSATILE",
    "FORMAL_OCCASIONS",
    "TOO_CASUAL_STYLES",
    "FORMALITY_SCALE",
    "STYLE_COMPATIBILITY",
    "SEASONS",
    "ALL_SEASONS_TAGS",
    "normalize_tag",
    "normalize_tags",
    "normalize_category",
    "normalize_season",
    "season_for_date",
    "formality_rank",
    "compatible_styles",
]
