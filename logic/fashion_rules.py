"""Pattern, texture, fit and fabric-weight rules inferred from item tags."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from models.wardrobe_item import WardrobeItem

# keyword -> (pattern family, scale)
PATTERN_KEYWORDS: Dict[str, Tuple[str, str]] = {
    "pinstripe": ("linear", "small"),
    "striped": ("linear", "medium"),
    "stripes": ("linear", "medium"),
    "breton": ("linear", "medium"),
    "gingham": ("check", "small"),
    "houndstooth": ("check", "small"),
    "check": ("check", "medium"),
    "checked": ("check", "medium"),
    "plaid": ("check", "large"),
    "tartan": ("check", "large"),
    "polka-dot": ("geometric", "small"),
    "dots": ("geometric", "small"),
    "geometric": ("geometric", "large"),
    "graphic": ("geometric", "large"),
    "abstract": ("geometric", "large"),
    "floral": ("organic", "large"),
    "paisley": ("organic", "medium"),
    "animal-print": ("animal", "large"),
    "leopard": ("animal", "large"),
    "zebra": ("animal", "large"),
    "snakeskin": ("animal", "medium"),
}

TEXTURE_GROUPS: Dict[str, frozenset] = {
    "smooth": frozenset({"silk", "satin", "jersey", "cotton", "polyester", "smooth"}),
    "textured": frozenset({"wool", "knit", "cable-knit", "tweed", "corduroy", "denim", "linen", "suede", "fleece", "velvet", "boucle"}),
    "structured": frozenset({"leather", "tailored", "structured", "canvas", "twill", "crisp"}),
    "delicate": frozenset({"lace", "chiffon", "tulle", "organza", "sheer", "mesh", "delicate"}),
}

FITTED_TAGS = frozenset({"fitted", "slim", "slim-fit", "tailored", "skinny", "bodycon"})
LOOSE_TAGS = frozenset({"loose", "relaxed", "oversized", "flowy", "wide-leg", "baggy"})

FABRIC_WEIGHTS: Dict[str, frozenset] = {
    "light": frozenset({"light", "lightweight", "silk", "chiffon", "linen", "jersey", "cotton"}),
    "medium": frozenset({"denim", "twill", "knit", "midweight"}),
    "heavy": frozenset({"heavy", "wool", "tweed", "fleece", "corduroy", "leather", "cashmere"}),
}

BASE_SCORE = 0.2


@dataclass(frozen=True)
class FashionAssessment:
    score: float
    patterns: List[Tuple[str, str]] = field(default_factory=list)
    textures: Dict[str, int] = field(default_factory=dict)
    notes: List[str] = field(default_factory=list)


def item_pattern(item: WardrobeItem) -> Optional[Tuple[str, str]]:
    for tag in item.descriptors:
        if tag in PATTERN_KEYWORDS:
            return PATTERN_KEYWORDS[tag]
    return None


def item_texture(item: WardrobeItem) -> Optional[str]:
    descriptors = set(item.descriptors)
    for group, keywords in TEXTURE_GROUPS.items():
        if descriptors & keywords:
            return group
    return None


def item_weight(item: WardrobeItem) -> Optional[str]:
    descriptors = set(item.descriptors)
    for weight, keywords in FABRIC_WEIGHTS.items():
        if descriptors & keywords:
            return weight
    return None


def _pattern_points(patterns: Sequence[Tuple[str, str]]) -> Tuple[float, Optional[str]]:
    if not patterns:
        return 0.3, "Clean solid pieces keep the look polished"
    if len(patterns) == 1:
        return 0.35, f"A single {patterns[0][0]} pattern gives the outfit a focal point"
    if len(patterns) == 2:
        (family_a, scale_a), (family_b, scale_b) = patterns
        if scale_a != scale_b or family_a == family_b:
            return 0.2, "Pattern mix is balanced in scale and family"
        return -0.1, None
    return -0.3, None


def _texture_points(textures: Counter) -> Tuple[float, Optional[str]]:
    groups = len(textures)
    if groups == 0:
        return 0.0, None
    if groups == 1:
        return 0.25, "Cohesive texture throughout"
    total = sum(textures.values())
    if groups <= 3 and max(textures.values()) <= total * 2 / 3:
        return 0.2, "Textures are layered for depth"
    return -0.1, None


def assess_outfit(items: Sequence[WardrobeItem]) -> FashionAssessment:
    """Score how well the pieces follow pattern, texture and proportion rules."""

    patterns = [pattern for pattern in (item_pattern(item) for item in items) if pattern]
    textures = Counter(texture for texture in (item_texture(item) for item in items) if texture)
    notes: List[str] = []

    score = BASE_SCORE
    pattern_points, pattern_note = _pattern_points(patterns)
    texture_points, texture_note = _texture_points(textures)
    score += pattern_points + texture_points
    notes.extend(note for note in (pattern_note, texture_note) if note)

    descriptors = {tag for item in items for tag in item.descriptors}
    if descriptors & FITTED_TAGS and descriptors & LOOSE_TAGS:
        score += 0.1
        notes.append("Balances fitted and relaxed silhouettes")

    weights = {weight for weight in (item_weight(item) for item in items) if weight}
    if len(weights) >= 2:
        score += 0.1

    return FashionAssessment(
        score=max(0.0, min(1.0, score)),
        patterns=patterns,
        textures=dict(textures),
        notes=notes,
    )


__all__ = [
    "FashionAssessment",
    "PATTERN_KEYWORDS",
    "TEXTURE_GROUPS",
    "assess_outfit",
    "item_pattern",
    "item_texture",
    "item_weight",
]
