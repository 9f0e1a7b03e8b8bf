"""Clothing item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_USER_ID = "default"

# camelCase keys sent by the mobile client mapped to dataclass fields.
_FIELD_ALIASES = {
    "_id": "item_id",
    "id": "item_id",
    "imageUri": "image_url",
    "imageUrl": "image_url",
    "imageBase64": "image_base64",
    "userId": "user_id",
    "createdAt": "created_at",
}


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalise_seasons(values: Any) -> List[str]:
    seasons: List[str] = []
    for value in _ensure_list(values):
        key = str(value).strip().lower()
        if key and key not in seasons:
            seasons.append(key)
    return seasons


@dataclass
class ClothingItem:
    """A wardrobe item as the recommendation logic sees it.

    Every field may be absent. ``category`` stays as the user typed it;
    :func:`models.taxonomy.normalize_category` maps it onto a slot when needed.
    """

    item_id: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    color: Optional[str] = None
    season: List[str] = field(default_factory=list)
    material: Optional[str] = None
    style: Optional[str] = None
    condition: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    image_base64: Optional[str] = None
    user_id: str = DEFAULT_USER_ID
    created_at: Optional[float] = None

    def __post_init__(self) -> None:
        self.season = _normalise_seasons(self.season)
        if self.item_id is not None:
            self.item_id = str(self.item_id)
        self.user_id = str(self.user_id or DEFAULT_USER_ID)


def from_raw_metadata(metadata: Dict[str, Any]) -> ClothingItem:
    """Factory to build a :class:`ClothingItem` from a loose payload.

    Accepts both snake_case and the client's camelCase keys. Missing or empty
    fields are tolerated.
    """

    data: Dict[str, Any] = {}
    for key, value in (metadata or {}).items():
        data[_FIELD_ALIASES.get(key, key)] = value

    created_at = data.get("created_at")
    return ClothingItem(
        item_id=_optional_text(data.get("item_id")),
        name=_optional_text(data.get("name")),
        category=_optional_text(data.get("category")),
        color=_optional_text(data.get("color")),
        season=_ensure_list(data.get("season")),
        material=_optional_text(data.get("material")),
        style=_optional_text(data.get("style")),
        condition=_optional_text(data.get("condition")),
        notes=_optional_text(data.get("notes")),
        image_url=_optional_text(data.get("image_url")),
        image_base64=_optional_text(data.get("image_base64")),
        user_id=_optional_text(data.get("user_id")) or DEFAULT_USER_ID,
        created_at=float(created_at) if isinstance(created_at, (int, float)) else None,
    )


__all__ = ["ClothingItem", "DEFAULT_USER_ID", "from_raw_metadata"]
