"""Snapshot fallback when the primary wardrobe store is unavailable."""

from __future__ import annotations

from pathlib import Path

import pytest

from models.outfit import Outfit
from models.wardrobe_item import ClothingItem
from tools.wardrobe_cache import CachedWardrobeStore
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStoreError


class _FlakyStore(SQLiteWardrobeStore):
    """SQLite store that can be switched offline."""

    def __init__(self, path: Path) -> None:
        self.offline = False
        super().__init__(path)

    def _connect(self):
        if self.offline:
            raise WardrobeStoreError("database unreachable")
        return super()._connect()


@pytest.fixture()
def primary(tmp_path: Path) -> _FlakyStore:
    return _FlakyStore(tmp_path / "wardrobe.db")


@pytest.fixture()
def cached(primary: _FlakyStore, tmp_path: Path) -> CachedWardrobeStore:
    return CachedWardrobeStore(primary, tmp_path / "cache" / "wardrobe.json")


def test_reads_come_from_primary_while_online(cached: CachedWardrobeStore) -> None:
    item = cached.create_item(ClothingItem(name="Tee", category="top"))

    assert cached.list_items("default") == [item]
    assert cached.served_from_cache is False
    assert cached.cache_path.exists()


def test_listing_falls_back_to_snapshot(cached: CachedWardrobeStore, primary: _FlakyStore) -> None:
    item = cached.create_item(ClothingItem(name="Tee", category="top", season=["summer"]))
    outfit = cached.create_outfit(Outfit(name="Simple", top_id=item.item_id))

    primary.offline = True

    assert cached.list_items("default") == [item]
    assert cached.served_from_cache is True
    assert cached.list_items_by_category("default", "top") == [item]
    assert cached.get_item("default", item.item_id) == item
    assert cached.get_item("default", "missing") is None
    assert cached.list_outfits("default") == [outfit]
    assert cached.get_outfit("default", outfit.outfit_id) == outfit


def test_writes_are_not_queued_when_offline(cached: CachedWardrobeStore, primary: _FlakyStore) -> None:
    primary.offline = True

    with pytest.raises(WardrobeStoreError):
        cached.create_item(ClothingItem(name="Tee", category="top"))
    assert cached.list_items("default") == []


def test_snapshot_is_per_user(cached: CachedWardrobeStore, primary: _FlakyStore) -> None:
    cached.create_item(ClothingItem(name="Tee", category="top", user_id="alice"))
    primary.offline = True

    assert cached.list_items("bob") == []
    assert len(cached.list_items("alice")) == 1


def test_unreadable_snapshot_is_ignored(cached: CachedWardrobeStore, primary: _FlakyStore) -> None:
    cached.cache_path.write_text("{not json", encoding="utf-8")
    primary.offline = True

    assert cached.list_items("default") == []


def test_delete_refreshes_snapshot(cached: CachedWardrobeStore, primary: _FlakyStore) -> None:
    item = cached.create_item(ClothingItem(name="Tee", category="top"))
    assert cached.delete_item("default", item.item_id) is True

    primary.offline = True
    assert cached.list_items("default") == []


@pytest.mark.parametrize("content", ["null", "[]", '"text"', '{"default": []}'])
def test_snapshot_with_unexpected_shape_is_replaced(
    cached: CachedWardrobeStore, primary: _FlakyStore, content: str
) -> None:
    cached.cache_path.write_text(content, encoding="utf-8")
    item = cached.create_item(ClothingItem(name="Tee", category="top"))

    assert cached.list_items("default") == [item]

    primary.offline = True
    assert cached.list_items("default") == [item]
