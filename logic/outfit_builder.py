"""Randomised, usage-aware outfit assembly with transparent diagnostics."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from logic.compatibility import is_occasion_appropriate, is_weather_favored, outerwear_allowed
from memory.usage_ledger import MAX_ITEM_USAGE, under_cap
from models.color_theory import colors_compatible, is_neutral
from models.taxonomy import ACCESSORIES, BOTTOMS, DRESSES, OUTERWEAR, SHOES, TOPS
from models.wardrobe_item import WardrobeItem, WeatherData

logger = logging.getLogger(__name__)

MAX_DRESS_CANDIDATES = 5
MAX_PAIRINGS = 15

# Attachment gates: the optional piece is added when rng.random() exceeds the threshold.
DRESS_OUTERWEAR_GATE = 0.4
DRESS_ACCESSORY_GATE = 0.5
PAIR_OUTERWEAR_GATE = 0.3
PAIR_ACCESSORY_GATE = 0.4


@dataclass(frozen=True)
class CombinationResult:
    outfits: List[List[WardrobeItem]]
    diagnostics: Dict[str, object]


def group_by_category(items: Iterable[WardrobeItem]) -> Dict[str, List[WardrobeItem]]:
    grouped: Dict[str, List[WardrobeItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def order_by_usage(
    items: Sequence[WardrobeItem], usage: Mapping[str, int], rng: random.Random
) -> List[WardrobeItem]:
    """Shuffle, then stable-sort ascending by usage so least-used items come first."""

    ordered = list(items)
    rng.shuffle(ordered)
    ordered.sort(key=lambda item: usage.get(item.id, 0))
    return ordered


def _pick(
    candidates: Sequence[WardrobeItem],
    accept: Callable[[WardrobeItem], bool],
    weather: Optional[WeatherData],
) -> Optional[WardrobeItem]:
    """Return the first acceptable candidate, preferring ones the weather favours."""

    eligible = [item for item in candidates if accept(item)]
    if not eligible:
        return None
    for item in eligible:
        if is_weather_favored(item, weather):
            return item
    return eligible[0]


def _matches_any(item: WardrobeItem, anchors: Sequence[WardrobeItem]) -> bool:
    return all(colors_compatible(item.color, anchor.color) for anchor in anchors)


class _Assembler:
    """Holds the per-call inputs so the two outfit families share one rng stream."""

    def __init__(
        self,
        grouped: Mapping[str, Sequence[WardrobeItem]],
        occasion: str,
        preferred_style: Optional[str],
        include_accessories: bool,
        weather: Optional[WeatherData],
        usage: Mapping[str, int],
        rng: random.Random,
        usage_cap: int,
    ) -> None:
        self.occasion = occasion
        self.preferred_style = preferred_style
        self.include_accessories = include_accessories
        self.weather = weather
        self.usage = usage
        self.rng = rng
        self.usage_cap = usage_cap
        self.allow_outerwear = outerwear_allowed(weather)
        self.pools = {
            category: order_by_usage(grouped.get(category, []), usage, rng)
            for category in (DRESSES, TOPS, BOTTOMS, SHOES, OUTERWEAR, ACCESSORIES)
        }

    def available(self, item: WardrobeItem) -> bool:
        return under_cap(item, self.usage, self.usage_cap)

    def suits_occasion(self, item: WardrobeItem) -> bool:
        return is_occasion_appropriate(item, self.occasion, self.preferred_style)

    def shoe_for(self, anchors: Sequence[WardrobeItem], allow_fallback: bool) -> Optional[WardrobeItem]:
        shoes = self.pools[SHOES]
        chosen = _pick(
            shoes,
            lambda shoe: self.available(shoe) and (_matches_any(shoe, anchors) or is_neutral(shoe.color)),
            self.weather,
        )
        if chosen is None and allow_fallback:
            chosen = _pick(shoes, self.available, self.weather)
        return chosen

    def outerwear_for(self, anchors: Sequence[WardrobeItem], gate: float) -> Optional[WardrobeItem]:
        roll = self.rng.random()
        if not self.allow_outerwear or roll <= gate:
            return None
        return _pick(
            self.pools[OUTERWEAR],
            lambda layer: self.available(layer) and _matches_any(layer, anchors),
            self.weather,
        )

    def accessory(self, gate: float) -> Optional[WardrobeItem]:
        if not self.include_accessories:
            return None
        if self.rng.random() <= gate:
            return None
        return _pick(self.pools[ACCESSORIES], self.available, self.weather)

    def dress_outfits(self, limit: int, diagnostics: Dict[str, object]) -> List[List[WardrobeItem]]:
        dresses = [dress for dress in self.pools[DRESSES] if self.suits_occasion(dress) and self.available(dress)]
        dresses = dresses[:limit]
        diagnostics["dress_candidates"] = len(dresses)
        outfits: List[List[WardrobeItem]] = []
        for dress in dresses:
            outfit = [dress]
            shoe = self.shoe_for([dress], allow_fallback=False)
            if shoe:
                outfit.append(shoe)
            layer = self.outerwear_for([dress], DRESS_OUTERWEAR_GATE)
            if layer:
                outfit.append(layer)
            extra = self.accessory(DRESS_ACCESSORY_GATE)
            if extra:
                outfit.append(extra)
            outfits.append(outfit)
        return outfits

    def pair_outfits(self, limit: int, diagnostics: Dict[str, object]) -> List[List[WardrobeItem]]:
        tops, bottoms = self.pools[TOPS], self.pools[BOTTOMS]
        rejected = {"occasion": 0, "usage": 0, "color": 0}
        outfits: List[List[WardrobeItem]] = []
        if not tops or not bottoms:
            diagnostics["pairings_considered"] = 0
            diagnostics["pairs_rejected"] = rejected
            return outfits

        attempts = min(len(tops), len(bottoms), limit)
        for index in range(attempts):
            top = tops[index % len(tops)]
            bottom = bottoms[(index // len(tops)) % len(bottoms)]
            if not (self.suits_occasion(top) and self.suits_occasion(bottom)):
                rejected["occasion"] += 1
                continue
            if not (self.available(top) and self.available(bottom)):
                rejected["usage"] += 1
                continue
            if not (colors_compatible(top.color, bottom.color) or (is_neutral(top.color) and is_neutral(bottom.color))):
                rejected["color"] += 1
                logger.debug("Rejected pairing %s/%s on color", top.id, bottom.id)
                continue

            outfit = [top, bottom]
            shoe = self.shoe_for([top, bottom], allow_fallback=True)
            if shoe:
                outfit.append(shoe)
            layer = self.outerwear_for([top, bottom], PAIR_OUTERWEAR_GATE)
            if layer:
                outfit.append(layer)
            extra = self.accessory(PAIR_ACCESSORY_GATE)
            if extra:
                outfit.append(extra)
            outfits.append(outfit)

        diagnostics["pairings_considered"] = attempts
        diagnostics["pairs_rejected"] = rejected
        return outfits


def generate_combinations(
    grouped: Mapping[str, Sequence[WardrobeItem]],
    occasion: str,
    preferred_style: Optional[str],
    include_accessories: bool,
    weather: Optional[WeatherData],
    usage: Mapping[str, int],
    rng: Optional[random.Random] = None,
    usage_cap: int = MAX_ITEM_USAGE,
    max_dress_candidates: int = MAX_DRESS_CANDIDATES,
    max_pairings: int = MAX_PAIRINGS,
) -> CombinationResult:
    """Build candidate outfits from category-grouped wardrobe items.

    Dress-based looks come first, followed by top and bottom pairings. Items at
    or over ``usage_cap`` never enter a candidate. The result is not
    deduplicated; ranking takes care of repeated item sets.
    """

    assembler = _Assembler(
        grouped,
        occasion,
        preferred_style,
        include_accessories,
        weather,
        usage,
        rng or random.Random(),
        usage_cap,
    )
    diagnostics: Dict[str, object] = {
        "pool_sizes": {category: len(pool) for category, pool in assembler.pools.items()},
        "outerwear_allowed": assembler.allow_outerwear,
    }
    dress_outfits = assembler.dress_outfits(max_dress_candidates, diagnostics)
    pair_outfits = assembler.pair_outfits(max_pairings, diagnostics)
    outfits = dress_outfits + pair_outfits
    diagnostics["dress_outfits"] = len(dress_outfits)
    diagnostics["pair_outfits"] = len(pair_outfits)
    diagnostics["total"] = len(outfits)
    logger.info(
        "Generated %s candidate outfits (%s dress, %s pairings)",
        len(outfits),
        len(dress_outfits),
        len(pair_outfits),
    )
    return CombinationResult(outfits=outfits, diagnostics=diagnostics)


__all__ = [
    "MAX_DRESS_CANDIDATES",
    "MAX_PAIRINGS",
    "CombinationResult",
    "group_by_category",
    "order_by_usage",
    "generate_combinations",
]
