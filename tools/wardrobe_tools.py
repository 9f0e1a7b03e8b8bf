"""Instrumented wrappers around wardrobe storage returning plain dicts."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from logic.validation import ClothingItemCreate, ClothingItemUpdate, OutfitCreate, OutfitUpdate
from models.outfit import Outfit
from models.wardrobe_item import ClothingItem
from tools.observability import instrumented
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore


def _default_store() -> SQLiteWardrobeStore:
    return SQLiteWardrobeStore()


class WardrobeTools:
    """Thin wrapper exposing WardrobeStore operations to the app and API.

    Payloads are validated with the schemas in :mod:`logic.validation`, so a
    malformed payload raises :class:`pydantic.ValidationError`.
    """

    def __init__(self, store: Optional[WardrobeStore] = None) -> None:
        self.store = store or _default_store()

    @instrumented("add_wardrobe_item")
    def add_wardrobe_item(self, user_id: str, item_data: Dict[str, Any]) -> Dict[str, Any]:
        payload = ClothingItemCreate.model_validate({**item_data, "user_id": user_id})
        stored = self.store.create_item(ClothingItem(**payload.model_dump()))
        return asdict(stored)

    @instrumented("get_wardrobe_item")
    def get_wardrobe_item(self, user_id: str, item_id: str) -> Optional[Dict[str, Any]]:
        item = self.store.get_item(user_id, item_id)
        return asdict(item) if item else None

    @instrumented("list_wardrobe_items")
    def list_wardrobe_items(self, user_id: str) -> List[Dict[str, Any]]:
        return [asdict(item) for item in self.store.list_items(user_id)]

    @instrumented("list_wardrobe_items_by_category")
    def list_wardrobe_items_by_category(self, user_id: str, category: str) -> List[Dict[str, Any]]:
        return [asdict(item) for item in self.store.list_items_by_category(user_id, category)]

    @instrumented("update_wardrobe_item")
    def update_wardrobe_item(self, user_id: str, item_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = ClothingItemUpdate.model_validate(changes)
        updated = self.store.update_item(user_id, item_id, payload.model_dump(exclude_unset=True))
        return asdict(updated) if updated else None

    @instrumented("delete_wardrobe_item")
    def delete_wardrobe_item(self, user_id: str, item_id: str) -> bool:
        return self.store.delete_item(user_id, item_id)

    @instrumented("add_outfit")
    def add_outfit(self, user_id: str, outfit_data: Dict[str, Any]) -> Dict[str, Any]:
        payload = OutfitCreate.model_validate({**outfit_data, "user_id": user_id})
        stored = self.store.create_outfit(Outfit(**payload.model_dump()))
        return asdict(stored)

    @instrumented("get_outfit")
    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Dict[str, Any]]:
        outfit = self.store.get_outfit(user_id, outfit_id)
        return self._expand(user_id, outfit) if outfit else None

    @instrumented("list_outfits")
    def list_outfits(self, user_id: str) -> List[Dict[str, Any]]:
        return [self._expand(user_id, outfit) for outfit in self.store.list_outfits(user_id)]

    @instrumented("list_outfits_by_style")
    def list_outfits_by_style(self, user_id: str, style: str) -> List[Dict[str, Any]]:
        return [self._expand(user_id, outfit) for outfit in self.store.list_outfits_by_style(user_id, style)]

    @instrumented("list_favorite_outfits")
    def list_favorite_outfits(self, user_id: str) -> List[Dict[str, Any]]:
        return [self._expand(user_id, outfit) for outfit in self.store.list_favorite_outfits(user_id)]

    @instrumented("update_outfit")
    def update_outfit(self, user_id: str, outfit_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        payload = OutfitUpdate.model_validate(changes)
        updated = self.store.update_outfit(user_id, outfit_id, payload.model_dump(exclude_unset=True))
        return self._expand(user_id, updated) if updated else None

    @instrumented("delete_outfit")
    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        return self.store.delete_outfit(user_id, outfit_id)

    def _expand(self, user_id: str, outfit: Outfit) -> Dict[str, Any]:
        """Attach the referenced items; ids pointing at deleted items resolve to None."""

        record = asdict(outfit)
        for slot, item_id in outfit.item_ids().items():
            item = self.store.get_item(user_id, item_id) if item_id else None
            record[slot] = asdict(item) if item else None
        return record


__all__ = ["WardrobeTools"]
