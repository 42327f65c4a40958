"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.wardrobe_item import (
    OutfitRecommendation,
    StyleContext,
    StyleProfile,
    WardrobeItem,
    WeatherData,
    outfit_id,
)

__all__ = [
    "OutfitRecommendation",
    "StyleContext",
    "StyleProfile",
    "WardrobeItem",
    "WeatherData",
    "outfit_id",
]
