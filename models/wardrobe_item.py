"""Wardrobe, context and recommendation data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from models.taxonomy import normalize_category, normalize_tag, normalize_tags


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar, iterable or missing value into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


@dataclass
class WardrobeItem:
    """Represents an item in the user's wardrobe.

    Set-like fields are kept as ordered, deduplicated, lower-cased lists.
    Malformed values (``None``, scalars) are coerced instead of rejected so
    that a half-classified item never breaks a recommendation run.
    """

    id: str
    name: str = ""
    category: str = ""
    color: List[str] = field(default_factory=list)
    style: str = ""
    occasion: List[str] = field(default_factory=list)
    season: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    photo_url: Optional[str] = None
    fit: Optional[str] = None
    fabric: Optional[str] = None

    def __post_init__(self) -> None:
        self.id = "" if self.id is None else str(self.id).strip()
        self.name = "" if self.name is None else str(self.name).strip()
        self.category = normalize_category(self.category)
        self.color = normalize_tags(_ensure_list(self.color))
        self.style = normalize_tag(self.style)
        self.occasion = normalize_tags(_ensure_list(self.occasion))
        self.season = normalize_tags(_ensure_list(self.season))
        self.tags = normalize_tags(_ensure_list(self.tags))
        self.fit = normalize_tag(self.fit) or None
        self.fabric = normalize_tag(self.fabric) or None

    def validate(self) -> "WardrobeItem":
        """Raise :class:`ValueError` if the item cannot take part in generation."""

        missing = [name for name in ("id", "category", "color") if not getattr(self, name)]
        if missing:
            raise ValueError(f"Wardrobe item {self.id or '<unknown>'} is missing {missing}")
        return self

    @property
    def descriptors(self) -> List[str]:
        """Tags, fit, fabric and name words, used for texture/pattern/fit inference."""

        extra = [value for value in (self.fit, self.fabric) if value]
        return self.tags + extra + self.name.lower().split()


@dataclass
class WeatherData:
    """Weather snapshot supplied by the caller for a single request."""

    temperature: float
    condition: str = "clear"
    humidity: float = 50.0
    wind_speed: Optional[float] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        self.temperature = float(self.temperature)
        self.condition = normalize_tag(self.condition) or "clear"
        self.humidity = float(self.humidity) if self.humidity is not None else 50.0
        if self.wind_speed is not None:
            self.wind_speed = float(self.wind_speed)


@dataclass
class StyleProfile:
    id: str
    preferred_style: str
    favorite_colors: List[str] = field(default_factory=list)
    color_palette_colors: List[str] = field(default_factory=list)
    goals: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.id = "" if self.id is None else str(self.id)
        self.preferred_style = normalize_tag(self.preferred_style)
        self.favorite_colors = normalize_tags(_ensure_list(self.favorite_colors))
        self.color_palette_colors = normalize_tags(_ensure_list(self.color_palette_colors))
        self.goals = normalize_tags(_ensure_list(self.goals))


@dataclass
class StyleContext:
    occasion: str
    time_of_day: Optional[str] = None
    season: Optional[str] = None
    weather: Optional[WeatherData] = None

    def __post_init__(self) -> None:
        self.occasion = normalize_tag(self.occasion)
        self.time_of_day = normalize_tag(self.time_of_day) or None
        self.season = normalize_tag(self.season) or None


def outfit_id(items: Iterable[WardrobeItem]) -> str:
    """Derive a stable identifier from the sorted member ids.

    Ids are percent-escaped before joining on ``+`` so distinct item sets
    never collide, even when ids contain separators.
    """

    return "+".join(quote(item_id, safe="") for item_id in sorted(item.id for item in items))


@dataclass
class OutfitRecommendation:
    """A scored, explained outfit returned to the presentation layer."""

    id: str
    items: List[WardrobeItem]
    occasion: str
    style: str
    confidence: float
    description: str
    reasoning: List[str] = field(default_factory=list)
    styling_tips: List[str] = field(default_factory=list)
    sub_scores: Dict[str, float] = field(default_factory=dict)
    diversity: float = 1.0

    @property
    def item_ids(self) -> List[str]:
        return [item.id for item in self.items]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "WardrobeItem",
    "WeatherData",
    "StyleProfile",
    "StyleContext",
    "OutfitRecommendation",
    "outfit_id",
]
