"""Read-through JSON snapshot cache in front of a :class:`WardrobeStore`."""
from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.outfit import Outfit
from models.wardrobe_item import ClothingItem
from tools.wardrobe_store import WardrobeStore, WardrobeStoreError

LOGGER = logging.getLogger(__name__)

_UNAVAILABLE = (WardrobeStoreError, sqlite3.Error, OSError)


class CachedWardrobeStore(WardrobeStore):
    """Serve the last good listing when the primary store is unreachable.

    Successful list reads refresh a per-user snapshot on disk. Writes always go
    to the primary store and are never queued.
    """

    def __init__(self, primary: WardrobeStore, cache_path: str | Path = "data/wardrobe_cache.json") -> None:
        self.primary = primary
        self.cache_path = Path(cache_path)
        if self.cache_path.parent and not self.cache_path.parent.exists():
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
        self.served_from_cache = False

    def _load(self) -> Dict[str, Any]:
        if not self.cache_path.exists():
            return {}
        try:
            snapshot = json.loads(self.cache_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable wardrobe cache: %s", exc)
            return {}
        if not isinstance(snapshot, dict):
            LOGGER.warning("Ignoring wardrobe cache with unexpected %s root", type(snapshot).__name__)
            return {}
        # Drop per-user entries that are not section mappings.
        return {user_id: sections for user_id, sections in snapshot.items() if isinstance(sections, dict)}

    def _save_section(self, user_id: str, section: str, records: List[Dict[str, Any]]) -> None:
        snapshot = self._load()
        snapshot.setdefault(user_id, {})[section] = records
        try:
            self.cache_path.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Could not write wardrobe cache: %s", exc)

    def _cached_section(self, user_id: str, section: str) -> List[Dict[str, Any]]:
        return list(self._load().get(user_id, {}).get(section, []))

    def refresh(self, user_id: str) -> None:
        """Re-read both listings from the primary store into the snapshot."""

        self._save_section(user_id, "items", [asdict(item) for item in self.primary.list_items(user_id)])
        self._save_section(user_id, "outfits", [asdict(outfit) for outfit in self.primary.list_outfits(user_id)])

    def _refresh_quietly(self, user_id: str) -> None:
        try:
            self.refresh(user_id)
        except _UNAVAILABLE as exc:
            LOGGER.warning("Cache refresh skipped, primary store unavailable: %s", exc)

    # Items

    def list_items(self, user_id: str) -> List[ClothingItem]:
        try:
            items = self.primary.list_items(user_id)
        except _UNAVAILABLE as exc:
            LOGGER.warning("Primary store unavailable, serving cached items: %s", exc)
            self.served_from_cache = True
            return [ClothingItem(**record) for record in self._cached_section(user_id, "items")]
        self.served_from_cache = False
        self._save_section(user_id, "items", [asdict(item) for item in items])
        return items

    def list_items_by_category(self, user_id: str, category: str) -> List[ClothingItem]:
        key = category.strip().lower()
        return [item for item in self.list_items(user_id) if (item.category or "") == key]

    def get_item(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        try:
            return self.primary.get_item(user_id, item_id)
        except _UNAVAILABLE as exc:
            LOGGER.warning("Primary store unavailable, looking up cached item: %s", exc)
            for record in self._cached_section(user_id, "items"):
                if record.get("item_id") == item_id:
                    return ClothingItem(**record)
            return None

    def create_item(self, item: ClothingItem) -> ClothingItem:
        stored = self.primary.create_item(item)
        self._refresh_quietly(stored.user_id)
        return stored

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        updated = self.primary.update_item(user_id, item_id, updated_fields)
        self._refresh_quietly(user_id)
        return updated

    def delete_item(self, user_id: str, item_id: str) -> bool:
        deleted = self.primary.delete_item(user_id, item_id)
        self._refresh_quietly(user_id)
        return deleted

    # Outfits

    def list_outfits(self, user_id: str) -> List[Outfit]:
        try:
            outfits = self.primary.list_outfits(user_id)
        except _UNAVAILABLE as exc:
            LOGGER.warning("Primary store unavailable, serving cached outfits: %s", exc)
            self.served_from_cache = True
            return [Outfit(**record) for record in self._cached_section(user_id, "outfits")]
        self.served_from_cache = False
        self._save_section(user_id, "outfits", [asdict(outfit) for outfit in outfits])
        return outfits

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        try:
            return self.primary.get_outfit(user_id, outfit_id)
        except _UNAVAILABLE as exc:
            LOGGER.warning("Primary store unavailable, looking up cached outfit: %s", exc)
            for record in self._cached_section(user_id, "outfits"):
                if record.get("outfit_id") == outfit_id:
                    return Outfit(**record)
            return None

    def create_outfit(self, outfit: Outfit) -> Outfit:
        stored = self.primary.create_outfit(outfit)
        self._refresh_quietly(stored.user_id)
        return stored

    def update_outfit(self, user_id: str, outfit_id: str, updated_fields: Dict[str, object]) -> Optional[Outfit]:
        updated = self.primary.update_outfit(user_id, outfit_id, updated_fields)
        self._refresh_quietly(user_id)
        return updated

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        deleted = self.primary.delete_outfit(user_id, outfit_id)
        self._refresh_quietly(user_id)
        return deleted


__all__ = ["CachedWardrobeStore"]
