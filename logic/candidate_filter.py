"""Deterministic candidate filtering for season and rain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from models.wardrobe_item import ClothingItem

# Substrings hinting that an item copes with rain, English and Russian stems.
WATERPROOF_KEYWORDS = ("waterproof", "водонепроница", "резин", "leather", "rubber")


@dataclass(frozen=True)
class CandidatePool:
    """Items eligible for one slot after filtering."""

    items: List[ClothingItem]
    fallback_used: bool
    debug: Dict[str, object]


def prefers_season(item: Optional[ClothingItem], season: str) -> bool:
    if item is None or not item.season:
        return False
    return season.lower() in {tag.lower() for tag in item.season}


def filter_by_season(items: List[ClothingItem], season: str) -> List[ClothingItem]:
    """Return the items tagged for ``season``. Untagged items never match."""

    return [item for item in items if prefers_season(item, season)]


def looks_waterproof(item: Optional[ClothingItem]) -> bool:
    """Guess rain suitability from the item's free-text fields."""

    if item is None:
        return False
    fields = [item.condition, item.notes, item.material, item.name]
    text = " ".join(value for value in fields if value).lower()
    return any(keyword in text for keyword in WATERPROOF_KEYWORDS)


def _with_fallback(items: List[ClothingItem], matches: List[ClothingItem], rule: str) -> CandidatePool:
    fallback_used = not matches
    return CandidatePool(
        items=list(items) if fallback_used else matches,
        fallback_used=fallback_used,
        debug={
            "rule": rule,
            "input_count": len(items),
            "matched_count": len(matches),
        },
    )


def seasonal_pool(items: List[ClothingItem], season: str) -> CandidatePool:
    """Season-filtered pool that widens to every item when nothing matches."""

    return _with_fallback(items, filter_by_season(items, season), rule=f"season:{season}")


def shoe_pool(items: List[ClothingItem], season: str, is_raining: bool) -> CandidatePool:
    """Shoes favour waterproof pairs in rain and the current season otherwise."""

    if is_raining:
        waterproof = [item for item in items if looks_waterproof(item)]
        return _with_fallback(items, waterproof, rule="waterproof")
    return seasonal_pool(items, season)


__all__ = [
    "WATERPROOF_KEYWORDS",
    "CandidatePool",
    "prefers_season",
    "filter_by_season",
    "looks_waterproof",
    "seasonal_pool",
    "shoe_pool",
]
