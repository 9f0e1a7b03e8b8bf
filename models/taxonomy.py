"""Canonical taxonomy definitions for wardrobe items.

This module centralises the canonical labels for outfit slots, stored
categories, seasons and item conditions. Helper functions keep normalisation
consistent across the recommendation logic, the store and the API layer.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower()


SLOTS = ("top", "bottom", "shoes")

# Labels users and the mobile client send, in English and Russian.
CATEGORY_SYNONYMS: Dict[str, str] = {
    "top": "top",
    "tops": "top",
    "верх": "top",
    "bottom": "bottom",
    "bottoms": "bottom",
    "низ": "bottom",
    "shoes": "shoes",
    "shoe": "shoes",
    "обувь": "shoes",
}

# Everything the store accepts, including categories no slot consumes.
CATEGORIES: List[str] = [
    "top",
    "bottom",
    "shoes",
    "tops",
    "bottoms",
    "dresses",
    "outerwear",
    "accessories",
    "верх",
    "низ",
    "обувь",
]

SEASON_TAGS = ["spring", "summer", "autumn", "winter"]
CONDITIONS = ["new", "good", "fair", "worn"]
OUTFIT_CATEGORIES = ["casual", "formal", "sporty", "party", "beach", "work", "other"]

# Month index (0 = January) to season, northern hemisphere.
_MONTH_SEASONS = (
    "winter",
    "winter",
    "spring",
    "spring",
    "spring",
    "summer",
    "summer",
    "summer",
    "autumn",
    "autumn",
    "autumn",
    "winter",
)


def normalize_category(raw_category: object) -> Optional[str]:
    """Map a free-form category label onto an outfit slot.

    Matching is case-insensitive but exact otherwise: surrounding whitespace is
    not trimmed, so ``" top "`` is not a top. Returns ``None`` for anything
    outside the synonym table, including missing and non-string values.
    """

    if not isinstance(raw_category, str):
        return None
    return CATEGORY_SYNONYMS.get(raw_category.lower())


def season_for_month(month_index: int) -> str:
    """Return the season for a zero-based month index."""

    return _MONTH_SEASONS[int(month_index) % 12]


def season_for_date(day: date) -> str:
    return season_for_month(day.month - 1)


def validate_category(value: str) -> str:
    """Validate and normalise a stored category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    key = _normalize_key(value)
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {sorted(CATEGORIES)}")
    return key


def validate_condition(value: str) -> str:
    key = _normalize_key(value)
    if key not in CONDITIONS:
        raise ValueError(f"Unsupported condition '{value}'. Allowed: {CONDITIONS}")
    return key


def normalise_tags(values: Iterable[str], allowed: List[str]) -> List[str]:
    """Normalise and deduplicate tags against an allowed set."""

    normalised = []
    seen = set()
    for value in values:
        key = _normalize_key(str(value))
        if key in allowed and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "SLOTS",
    "CATEGORY_SYNONYMS",
    "CATEGORIES",
    "SEASON_TAGS",
    "CONDITIONS",
    "OUTFIT_CATEGORIES",
    "normalize_category",
    "season_for_month",
    "season_for_date",
    "validate_category",
    "validate_condition",
    "normalise_tags",
]
