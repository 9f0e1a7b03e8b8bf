"""Outfit schemas: stored outfits and engine selections."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.taxonomy import OUTFIT_CATEGORIES, SEASON_TAGS, SLOTS, normalise_tags
from models.wardrobe_item import DEFAULT_USER_ID, ClothingItem


@dataclass
class Outfit:
    """A user-assembled outfit referencing wardrobe items by id."""

    name: str
    outfit_id: Optional[str] = None
    description: str = ""
    top_id: Optional[str] = None
    bottom_id: Optional[str] = None
    shoes_id: Optional[str] = None
    style: str = "casual"
    season: List[str] = field(default_factory=lambda: list(SEASON_TAGS))
    category: str = "casual"
    is_favorite: bool = False
    image_base64: Optional[str] = None
    user_id: str = DEFAULT_USER_ID
    rating: float = 0
    occasions: List[str] = field(default_factory=list)
    notes: str = ""
    created_at: Optional[float] = None
    updated_at: Optional[float] = None

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValueError("Outfit name is required")
        if not (self.top_id or self.bottom_id or self.shoes_id):
            raise ValueError("Outfit needs at least one of top_id, bottom_id or shoes_id")
        category = (self.category or "casual").strip().lower()
        if category not in OUTFIT_CATEGORIES:
            raise ValueError(f"Unsupported outfit category '{self.category}'. Allowed: {OUTFIT_CATEGORIES}")
        self.category = category
        if not 0 <= float(self.rating) <= 5:
            raise ValueError(f"Rating must be between 0 and 5, got {self.rating}")
        self.season = normalise_tags(self.season, SEASON_TAGS)
        self.occasions = [str(o).strip() for o in self.occasions if str(o).strip()]

    def item_ids(self) -> Dict[str, Optional[str]]:
        return {"top": self.top_id, "bottom": self.bottom_id, "shoes": self.shoes_id}


@dataclass
class OutfitSelection:
    """At most one item per slot, as picked by the recommendation engine."""

    top: Optional[ClothingItem] = None
    bottom: Optional[ClothingItem] = None
    shoes: Optional[ClothingItem] = None

    def filled_slots(self) -> List[str]:
        return [slot for slot in SLOTS if getattr(self, slot) is not None]

    @property
    def is_empty(self) -> bool:
        return not self.filled_slots()

    @property
    def is_complete(self) -> bool:
        return len(self.filled_slots()) == len(SLOTS)


__all__ = ["Outfit", "OutfitSelection"]
