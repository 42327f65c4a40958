"""Evaluation scenarios covering weather vetoes, formality and colour clashes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class EvaluationScenario:
    name: str
    description: str
    profile: Dict[str, object]
    context: Dict[str, object]
    wardrobe_items: List[Dict[str, object]]
    expectations: Dict[str, object]
    include_accessories: bool = False
    seed: Optional[int] = 7
    tags: List[str] = field(default_factory=list)


COLD_FORMAL = EvaluationScenario(
    name="cold_formal_dress",
    description="Freezing evening with a formal event: the dress and closed shoes should be offered.",
    profile={"id": "eval_formal", "preferred_style": "formal"},
    context={"occasion": "formal", "time_of_day": "evening", "weather": {"temperature": 2, "condition": "clear"}},
    wardrobe_items=[
        {
            "id": "dress_black_formal",
            "name": "Black Evening Dress",
            "category": "dresses",
            "color": ["black"],
            "style": "formal",
            "occasion": ["formal"],
            "season": ["winter", "autumn"],
            "tags": ["long-sleeve"],
        },
        {
            "id": "shoes_black_pumps",
            "name": "Black Pumps",
            "category": "shoes",
            "color": ["black"],
            "style": "formal",
            "occasion": ["formal", "business"],
            "season": ["all"],
            "tags": ["closed-toe"],
        },
    ],
    expectations={
        "min_outfits": 1,
        "required_together": ["dress_black_formal", "shoes_black_pumps"],
        "min_confidence": 0.4,
        "reasoning_mentions_any": ["formal", "cold-weather"],
    },
    tags=["weather", "formality"],
)

HOT_CASUAL = EvaluationScenario(
    name="hot_casual_no_outerwear",
    description="A 30C casual day must never suggest the winter coat.",
    profile={"id": "eval_casual", "preferred_style": "casual"},
    context={"occasion": "casual", "weather": {"temperature": 30, "condition": "clear", "humidity": 40}},
    wardrobe_items=[
        {
            "id": "top_white_tee",
            "name": "White Tee",
            "category": "tops",
            "color": ["white"],
            "style": "casual",
            "occasion": ["casual"],
            "season": ["summer"],
            "tags": ["light", "breathable", "short-sleeve"],
        },
        {
            "id": "bottom_blue_jeans",
            "name": "Blue Jeans",
            "category": "bottoms",
            "color": ["blue"],
            "style": "casual",
            "occasion": ["casual"],
            "season": ["all"],
            "tags": ["denim"],
        },
        {
            "id": "shoes_white_sneakers",
            "name": "White Sneakers",
            "category": "shoes",
            "color": ["white"],
            "style": "casual",
            "occasion": ["casual"],
            "season": ["all"],
            "tags": ["closed-toe"],
        },
        {
            "id": "coat_winter",
            "name": "Winter Coat",
            "category": "outerwear",
            "color": ["grey"],
            "style": "classic",
            "occasion": ["versatile"],
            "season": ["winter"],
            "tags": ["heavy", "wool"],
        },
    ],
    expectations={"min_outfits": 1, "forbidden_items": ["coat_winter"], "forbidden_categories": ["outerwear"]},
    tags=["weather"],
)

COLOR_CLASH = EvaluationScenario(
    name="red_green_clash",
    description="A red top and a green bottom are neither neutral nor harmonious and must not be paired.",
    profile={"id": "eval_clash", "preferred_style": "casual"},
    context={"occasion": "casual"},
    wardrobe_items=[
        {
            "id": "top_red",
            "name": "Red Shirt",
            "category": "tops",
            "color": ["red"],
            "style": "casual",
            "occasion": ["casual"],
            "season": ["all"],
        },
        {
            "id": "bottom_green",
            "name": "Green Trousers",
            "category": "bottoms",
            "color": ["green"],
            "style": "casual",
            "occasion": ["casual"],
            "season": ["all"],
        },
    ],
    expectations={"min_outfits": 0, "forbidden_pairs": [["top_red", "bottom_green"]]},
    tags=["color"],
)

SCENARIOS: List[EvaluationScenario] = [COLD_FORMAL, HOT_CASUAL, COLOR_CLASH]

__all__ = ["EvaluationScenario", "SCENARIOS", "COLD_FORMAL", "HOT_CASUAL", "COLOR_CLASH"]
