"""Table-driven color harmony helpers for outfit generation and scoring.

Colors arrive as free-form descriptive names ("navy blue", "Burgundy"), so
harmony is judged by looking the names up in named color families rather than
by colorimetric distance. A color "mentions" a reference term when every word
of the term appears among the color's words, which lets "light navy" count as
navy while keeping "tangerine" away from "tan".
"""
from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from models.taxonomy import normalize_season, normalize_tag

logger = logging.getLogger(__name__)

NEUTRAL_COLORS: FrozenSet[str] = frozenset(
    {
        "black",
        "white",
        "grey",
        "gray",
        "beige",
        "navy",
        "brown",
        "cream",
        "ivory",
        "tan",
        "khaki",
        "charcoal",
        "taupe",
        "camel",
        "nude",
        "stone",
        "ecru",
        "oatmeal",
    }
)

_COMPLEMENTARY_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("blue", "orange"),
    ("yellow", "purple"),
    ("yellow", "violet"),
    ("pink", "mint"),
    ("coral", "teal"),
    ("orange", "teal"),
    ("burgundy", "forest"),
    ("lavender", "sage"),
    ("navy", "coral"),
    ("navy", "gold"),
    ("purple", "lime"),
    ("turquoise", "coral"),
)

_ANALOGOUS_FAMILIES: Tuple[FrozenSet[str], ...] = (
    frozenset({"red", "orange", "coral", "pink"}),
    frozenset({"orange", "yellow", "gold", "mustard", "peach"}),
    frozenset({"yellow", "green", "lime", "olive"}),
    frozenset({"green", "teal", "turquoise", "mint"}),
    frozenset({"teal", "blue", "navy"}),
    frozenset({"blue", "purple", "indigo", "lavender"}),
    frozenset({"purple", "pink", "magenta", "mauve", "plum"}),
    frozenset({"brown", "tan", "beige", "camel", "rust"}),
)

_TRIADIC_SETS: Tuple[FrozenSet[str], ...] = (
    frozenset({"red", "blue", "yellow"}),
    frozenset({"green", "orange", "purple"}),
    frozenset({"pink", "teal", "gold"}),
    frozenset({"navy", "coral", "mint"}),
)

COLOR_FAMILIES: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {
        "red": frozenset({"red", "crimson", "scarlet", "burgundy", "maroon", "wine", "cherry", "ruby"}),
        "pink": frozenset({"pink", "blush", "rose", "fuchsia", "magenta", "salmon"}),
        "orange": frozenset({"orange", "coral", "peach", "rust", "tangerine", "apricot", "terracotta"}),
        "yellow": frozenset({"yellow", "gold", "mustard", "lemon", "butter", "ochre"}),
        "green": frozenset({"green", "olive", "sage", "mint", "emerald", "forest", "lime", "jade"}),
        "blue": frozenset({"blue", "navy", "teal", "turquoise", "cobalt", "denim", "sky", "indigo", "aqua"}),
        "purple": frozenset({"purple", "lavender", "violet", "plum", "lilac", "mauve"}),
        "brown": frozenset({"brown", "tan", "camel", "chocolate", "beige", "taupe", "khaki", "coffee"}),
        "grey": frozenset({"grey", "gray", "charcoal", "silver", "slate"}),
        "white": frozenset({"white", "cream", "ivory", "ecru", "pearl"}),
        "black": frozenset({"black", "jet", "onyx"}),
    }
)

_WARM_FAMILIES = frozenset({"red", "pink", "orange", "yellow"})
_COOL_FAMILIES = frozenset({"blue", "green", "purple"})

EARTH_TONES: FrozenSet[str] = frozenset(
    {
        "brown",
        "tan",
        "camel",
        "beige",
        "khaki",
        "olive",
        "rust",
        "terracotta",
        "mustard",
        "taupe",
        "chocolate",
        "coffee",
        "sage",
        "forest",
        "ochre",
        "sand",
    }
)

_SEASONAL_PALETTES: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {
        "spring": frozenset(
            {"coral", "peach", "yellow", "lime", "turquoise", "pink", "gold", "ivory", "light blue", "mint"}
        ),
        "summer": frozenset(
            {"lavender", "rose", "sage", "powder blue", "mint", "pearl", "champagne", "mauve", "soft pink", "grey"}
        ),
        "autumn": frozenset(
            {"rust", "burgundy", "forest", "gold", "brown", "orange", "olive", "bronze", "terracotta", "mustard"}
        ),
        "winter": frozenset(
            {"navy", "black", "white", "crimson", "royal blue", "emerald", "silver", "purple", "hot pink", "charcoal"}
        ),
    }
)

_WORD_SPLIT = re.compile(r"[^a-z]+")


def _words(color: str) -> FrozenSet[str]:
    return frozenset(word for word in _WORD_SPLIT.split(normalize_tag(color)) if word)


def mentions(color: str, term: str) -> bool:
    """Return True when ``color`` names ``term`` (exactly or as its words)."""

    color_key = normalize_tag(color)
    if not color_key:
        return False
    if color_key == term:
        return True
    term_words = _words(term)
    return bool(term_words) and term_words.issubset(_words(color_key))


def normalise_colors(colors: Optional[Iterable[str]]) -> List[str]:
    if not colors:
        return []
    return [normalize_tag(color) for color in colors if normalize_tag(color)]


def _mentions_any(color: str, terms: Iterable[str]) -> bool:
    return any(mentions(color, term) for term in terms)


def is_neutral(colors: Optional[Iterable[str]]) -> bool:
    """Return True if any color belongs to the neutral vocabulary."""

    result = any(_mentions_any(color, NEUTRAL_COLORS) for color in normalise_colors(colors))
    logger.debug("neutral check %s -> %s", colors, result)
    return result


def _complementary(color_a: str, color_b: str) -> bool:
    for first, second in _COMPLEMENTARY_PAIRS:
        if mentions(color_a, first) and mentions(color_b, second):
            return True
        if mentions(color_a, second) and mentions(color_b, first):
            return True
    return False


def _share_group(color_a: str, color_b: str, groups: Iterable[Iterable[str]]) -> bool:
    return any(_mentions_any(color_a, group) and _mentions_any(color_b, group) for group in groups)


def harmony_rule(colors_a: Optional[Iterable[str]], colors_b: Optional[Iterable[str]]) -> str:
    """Name the first harmony rule that pairs the two color sets, or ``"none"``."""

    side_a = normalise_colors(colors_a)
    side_b = normalise_colors(colors_b)
    if is_neutral(side_a) or is_neutral(side_b):
        return "neutral"
    if set(side_a).intersection(side_b):
        return "exact"
    for color_a in side_a:
        for color_b in side_b:
            if _complementary(color_a, color_b):
                return "complementary"
    checks: Sequence[Tuple[str, Iterable[Iterable[str]]]] = (
        ("analogous", _ANALOGOUS_FAMILIES),
        ("triadic", _TRIADIC_SETS),
        ("monochromatic", COLOR_FAMILIES.values()),
    )
    for rule, groups in checks:
        for color_a in side_a:
            for color_b in side_b:
                if _share_group(color_a, color_b, groups):
                    return rule
    return "none"


def colors_compatible(colors_a: Optional[Iterable[str]], colors_b: Optional[Iterable[str]]) -> bool:
    """Return True when the two color sets work together."""

    rule = harmony_rule(colors_a, colors_b)
    logger.debug("compatibility check %s / %s -> %s", colors_a, colors_b, rule)
    return rule != "none"


def seasonal_palette(season: Optional[str]) -> FrozenSet[str]:
    """Return the fixed palette for a season, or an empty set if unknown."""

    return _SEASONAL_PALETTES.get(normalize_season(season), frozenset())


def matches_season(colors: Optional[Iterable[str]], season: Optional[str]) -> bool:
    """Return True when any of the colors belongs to the season's palette."""

    palette = seasonal_palette(season)
    return any(_mentions_any(color, palette) for color in normalise_colors(colors))


def in_palette(color: str, palette: Iterable[str]) -> bool:
    return _mentions_any(color, [normalize_tag(entry) for entry in palette if normalize_tag(entry)])


def color_family(color: str) -> Optional[str]:
    for name, members in COLOR_FAMILIES.items():
        if _mentions_any(color, members):
            return name
    return None


def color_temperature(color: str) -> str:
    """Classify a color as ``warm``, ``cool`` or ``neutral``."""

    if _mentions_any(color, NEUTRAL_COLORS):
        return "neutral"
    family = color_family(color)
    if family in _WARM_FAMILIES:
        return "warm"
    if family in _COOL_FAMILIES:
        return "cool"
    return "neutral"


def is_earth_tone(color: str) -> bool:
    return _mentions_any(color, EARTH_TONES)


def is_neutral_color(color: str) -> bool:
    return _mentions_any(color, NEUTRAL_COLORS)


__all__ = [
    "NEUTRAL_COLORS",
    "EARTH_TONES",
    "COLOR_FAMILIES",
    "mentions",
    "normalise_colors",
    "is_neutral",
    "is_neutral_color",
    "harmony_rule",
    "colors_compatible",
    "seasonal_palette",
    "matches_season",
    "in_palette",
    "color_family",
    "color_temperature",
    "is_earth_tone",
]
