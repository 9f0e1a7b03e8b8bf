"""Pydantic schemas and helpers for validating API payloads."""

from __future__ import annotations

from datetime import date as dt_date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from models.taxonomy import OUTFIT_CATEGORIES, SEASON_TAGS, validate_category, validate_condition
from models.wardrobe_item import DEFAULT_USER_ID


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


def _check_seasons(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    cleaned = []
    for value in values:
        key = value.strip().lower()
        if key not in SEASON_TAGS:
            raise ValueError(f"Unsupported season '{value}'. Allowed: {SEASON_TAGS}")
        if key not in cleaned:
            cleaned.append(key)
    return cleaned


class ClothingItemCreate(_Payload):
    """Input contract for adding an item to the wardrobe."""

    name: str = Field(min_length=1)
    category: str
    color: str = Field(min_length=1)
    season: List[str] = Field(min_length=1)
    material: Optional[str] = None
    style: Optional[str] = None
    condition: str = "good"
    notes: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    image_base64: Optional[str] = Field(None, alias="imageBase64")
    user_id: str = Field(DEFAULT_USER_ID, alias="userId")

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: str) -> str:
        return validate_category(value)

    @field_validator("condition")
    @classmethod
    def _validate_condition(cls, value: str) -> str:
        return validate_condition(value)

    @field_validator("season")
    @classmethod
    def _validate_season(cls, values: List[str]) -> List[str]:
        return _check_seasons(values)


class ClothingItemUpdate(_Payload):
    """Partial update; only fields present in the payload are applied."""

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    color: Optional[str] = None
    season: Optional[List[str]] = None
    material: Optional[str] = None
    style: Optional[str] = None
    condition: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    image_base64: Optional[str] = Field(None, alias="imageBase64")

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: Optional[str]) -> Optional[str]:
        return validate_category(value) if value is not None else None

    @field_validator("condition")
    @classmethod
    def _validate_condition(cls, value: Optional[str]) -> Optional[str]:
        return validate_condition(value) if value is not None else None

    @field_validator("season")
    @classmethod
    def _validate_season(cls, values: Optional[List[str]]) -> Optional[List[str]]:
        return _check_seasons(values)


class OutfitCreate(_Payload):
    """Input contract for saving an outfit built from wardrobe items."""

    name: str = Field(min_length=1)
    description: str = ""
    top_id: Optional[str] = Field(None, alias="topId")
    bottom_id: Optional[str] = Field(None, alias="bottomId")
    shoes_id: Optional[str] = Field(None, alias="shoesId")
    style: str = "casual"
    season: List[str] = Field(default_factory=lambda: list(SEASON_TAGS))
    category: Literal["casual", "formal", "sporty", "party", "beach", "work", "other"] = "casual"
    is_favorite: bool = Field(False, alias="isFavorite")
    image_base64: Optional[str] = Field(None, alias="imageBase64")
    rating: float = Field(0, ge=0, le=5)
    occasions: List[str] = Field(default_factory=list)
    notes: str = ""
    user_id: str = Field(DEFAULT_USER_ID, alias="userId")

    @field_validator("season")
    @classmethod
    def _validate_season(cls, values: List[str]) -> List[str]:
        return _check_seasons(values)

    @model_validator(mode="after")
    def _require_a_piece(self) -> "OutfitCreate":
        if not (self.top_id or self.bottom_id or self.shoes_id):
            raise ValueError("An outfit needs a name and at least one item")
        return self


class OutfitUpdate(_Payload):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    top_id: Optional[str] = Field(None, alias="topId")
    bottom_id: Optional[str] = Field(None, alias="bottomId")
    shoes_id: Optional[str] = Field(None, alias="shoesId")
    style: Optional[str] = None
    season: Optional[List[str]] = None
    category: Optional[str] = None
    is_favorite: Optional[bool] = Field(None, alias="isFavorite")
    image_base64: Optional[str] = Field(None, alias="imageBase64")
    rating: Optional[float] = Field(None, ge=0, le=5)
    occasions: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator(
        "name", "description", "style", "season", "category", "is_favorite", "rating", "occasions", "notes", mode="before"
    )
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value

    @field_validator("category")
    @classmethod
    def _validate_category(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value.lower() not in OUTFIT_CATEGORIES:
            raise ValueError(f"Unsupported outfit category '{value}'. Allowed: {OUTFIT_CATEGORIES}")
        return value.lower() if value is not None else None

    @field_validator("season")
    @classmethod
    def _validate_season(cls, values: Optional[List[str]]) -> Optional[List[str]]:
        return _check_seasons(values)


class RecommendationRequest(_Payload):
    """Weather given directly, or coordinates to look it up."""

    temperature: Optional[float] = None
    is_raining: bool = Field(False, alias="isRaining")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    date: Optional[dt_date] = None
    locale: Optional[str] = None
    user_id: str = Field(DEFAULT_USER_ID, alias="userId")

    @model_validator(mode="after")
    def _require_weather_source(self) -> "RecommendationRequest":
        if self.temperature is None and (self.latitude is None or self.longitude is None):
            raise ValueError("Provide either temperature or both latitude and longitude")
        return self


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    details = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors(include_url=False)
    ]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "ClothingItemCreate",
    "ClothingItemUpdate",
    "OutfitCreate",
    "OutfitUpdate",
    "RecommendationRequest",
    "ValidationResult",
    "validation_failure",
]
