"""Pydantic schemas and helpers for validating engine inputs and HTTP payloads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from models.wardrobe_item import StyleContext, StyleProfile, WardrobeItem, WeatherData

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return value


def _as_string_list(value: Any) -> List[str]:
    """Keep only the string entries of a list-like value; anything else is empty."""

    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [entry for entry in value if isinstance(entry, str)]
    return []


def _as_text(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class WardrobeItemPayload(BaseModel):
    """Input contract for a single wardrobe item.

    Only ``id``, ``category`` and ``color`` are required. Malformed optional
    fields degrade to empty values instead of rejecting the item.
    """

    id: str = Field(min_length=1)
    name: str = ""
    category: str = Field(min_length=1)
    color: List[str] = Field(min_length=1)
    style: str = ""
    occasion: List[str] = []
    season: List[str] = []
    tags: List[str] = []
    photo_url: Optional[str] = None
    fit: Optional[str] = None
    fabric: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value).strip() if isinstance(value, (int, str)) else value

    @field_validator("name", "style", mode="before")
    @classmethod
    def _text_or_blank(cls, value: Any) -> str:
        return _as_text(value) or ""

    @field_validator("photo_url", "fit", "fabric", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    @field_validator("color", "occasion", "season", "tags", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> List[str]:
        return _as_string_list(value)

    @field_validator("color")
    @classmethod
    def _drop_blank_colors(cls, value: List[str]) -> List[str]:
        cleaned = [color for color in value if color and color.strip()]
        if not cleaned:
            raise ValueError("color must contain at least one non-blank entry")
        return cleaned

    def to_domain(self) -> WardrobeItem:
        return WardrobeItem(**self.model_dump()).validate()


class WeatherPayload(BaseModel):
    """Weather snapshot supplied by an external weather collaborator."""

    temperature: float
    condition: str = "clear"
    humidity: float = Field(default=50.0, ge=0, le=100)
    wind_speed: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None

    def to_domain(self) -> WeatherData:
        return WeatherData(**self.model_dump())


class StyleProfilePayload(BaseModel):
    id: str = Field(min_length=1)
    preferred_style: str = Field(min_length=1)
    favorite_colors: List[str] = []
    color_palette_colors: List[str] = []
    goals: List[str] = []

    @field_validator("favorite_colors", "color_palette_colors", "goals", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        return _as_list(value)

    def to_domain(self) -> StyleProfile:
        return StyleProfile(**self.model_dump())


class StyleContextPayload(BaseModel):
    occasion: str = Field(min_length=1)
    time_of_day: Optional[str] = None
    season: Optional[str] = None
    weather: Optional[WeatherPayload] = None

    def to_domain(self) -> StyleContext:
        return StyleContext(
            occasion=self.occasion,
            time_of_day=self.time_of_day,
            season=self.season,
            weather=self.weather.to_domain() if self.weather else None,
        )


class RecommendationRequest(BaseModel):
    """Envelope accepted by the HTTP adapter.

    Inventory entries stay loosely typed here so that one malformed item is
    dropped during coercion instead of failing the whole request.
    """

    inventory: List[Dict[str, Any]]
    profile: StyleProfilePayload
    context: StyleContextPayload
    include_accessories: bool = False


class RecommendationResponse(BaseModel):
    status: Literal["ok"] = "ok"
    recommendations: List[Dict[str, Any]] = []
    diagnostics: Dict[str, Any] = {}


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


@dataclass(frozen=True)
class InventoryCoercionResult:
    items: List[WardrobeItem]
    rejected: Dict[str, str]


def _coerce_item(raw: Any) -> WardrobeItem:
    if isinstance(raw, WardrobeItem):
        return raw.validate()
    if isinstance(raw, WardrobeItemPayload):
        return raw.to_domain()
    if isinstance(raw, dict):
        return WardrobeItemPayload.model_validate(raw).to_domain()
    raise TypeError(f"Unsupported wardrobe entry type {type(raw).__name__}")


def coerce_inventory(raw_items: Optional[Iterable[Any]]) -> InventoryCoercionResult:
    """Turn raw inventory entries into validated items, dropping malformed ones."""

    items: List[WardrobeItem] = []
    rejected: Dict[str, str] = {}
    seen = set()
    for index, raw in enumerate(raw_items or []):
        try:
            item = _coerce_item(raw)
        except (ValidationError, ValueError, TypeError) as exc:
            key = _entry_key(raw, index)
            rejected[key] = str(exc).splitlines()[0]
            logger.warning("Skipping wardrobe entry %s due to validation error: %s", key, rejected[key])
            continue
        if item.id in seen:
            rejected[item.id] = "duplicate id"
            logger.warning("Skipping duplicate wardrobe entry %s", item.id)
            continue
        seen.add(item.id)
        items.append(item)
    return InventoryCoercionResult(items=items, rejected=rejected)


def _entry_key(raw: Any, index: int) -> str:
    item_id = raw.get("id") if isinstance(raw, dict) else getattr(raw, "id", None)
    return str(item_id) if item_id else f"index:{index}"


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "WardrobeItemPayload",
    "WeatherPayload",
    "StyleProfilePayload",
    "StyleContextPayload",
    "RecommendationRequest",
    "RecommendationResponse",
    "ValidationResult",
    "InventoryCoercionResult",
    "coerce_inventory",
    "validation_failure",
]
