"""Wardrobe storage abstractions and SQLite implementation."""
from __future__ import annotations

import json
import sqlite3
import time
import uuid
from dataclasses import asdict, fields
from pathlib import Path
from typing import Dict, List, Optional

from models.outfit import Outfit
from models.taxonomy import validate_category, validate_condition
from models.wardrobe_item import ClothingItem


class WardrobeStoreError(RuntimeError):
    """Raised when the backing store cannot serve a request."""


class WardrobeStore:
    """Persistence interface for clothing items and outfits."""

    def create_item(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError

    def get_item(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        raise NotImplementedError

    def list_items(self, user_id: str) -> List[ClothingItem]:
        raise NotImplementedError

    def list_items_by_category(self, user_id: str, category: str) -> List[ClothingItem]:
        raise NotImplementedError

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        raise NotImplementedError

    def delete_item(self, user_id: str, item_id: str) -> bool:
        raise NotImplementedError

    def create_outfit(self, outfit: Outfit) -> Outfit:
        raise NotImplementedError

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        raise NotImplementedError

    def list_outfits(self, user_id: str) -> List[Outfit]:
        raise NotImplementedError

    def update_outfit(self, user_id: str, outfit_id: str, updated_fields: Dict[str, object]) -> Optional[Outfit]:
        raise NotImplementedError

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        raise NotImplementedError

    def list_outfits_by_style(self, user_id: str, style: str) -> List[Outfit]:
        return [outfit for outfit in self.list_outfits(user_id) if outfit.style == style]

    def list_favorite_outfits(self, user_id: str) -> List[Outfit]:
        return [outfit for outfit in self.list_outfits(user_id) if outfit.is_favorite]


def _new_id() -> str:
    return uuid.uuid4().hex


def _validate_item(item: ClothingItem) -> ClothingItem:
    if item.category is not None:
        item.category = validate_category(item.category)
    if item.condition is not None:
        item.condition = validate_condition(item.condition)
    return item


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store for clothing items and outfits."""

    _ITEM_LIST_COLUMNS = {"season"}
    _OUTFIT_LIST_COLUMNS = {"season", "occasions"}

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.database_path)
        except sqlite3.Error as exc:
            raise WardrobeStoreError(f"cannot open wardrobe database {self.database_path}") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS clothing_items (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    name TEXT,
                    category TEXT,
                    color TEXT,
                    season TEXT,
                    material TEXT,
                    style TEXT,
                    condition TEXT,
                    notes TEXT,
                    image_url TEXT,
                    image_base64 TEXT,
                    created_at REAL,
                    PRIMARY KEY (user_id, item_id)
                );
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS outfits (
                    user_id TEXT NOT NULL,
                    outfit_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    description TEXT,
                    top_id TEXT,
                    bottom_id TEXT,
                    shoes_id TEXT,
                    style TEXT,
                    season TEXT,
                    category TEXT,
                    is_favorite INTEGER,
                    image_base64 TEXT,
                    rating REAL,
                    occasions TEXT,
                    notes TEXT,
                    created_at REAL,
                    updated_at REAL,
                    PRIMARY KEY (user_id, outfit_id)
                );
                """
            )

    @staticmethod
    def _serialise_list(values: Optional[List[object]]) -> str:
        return json.dumps(values or [], ensure_ascii=False)

    @staticmethod
    def _deserialise_list(raw: str) -> List[object]:
        return json.loads(raw) if raw else []

    def _upsert(self, table: str, record: Dict[str, object], list_columns: set) -> None:
        values = {
            key: self._serialise_list(value) if key in list_columns else value for key, value in record.items()
        }
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO {table} ({columns}) VALUES ({placeholders})",
                tuple(values.values()),
            )

    def _row_to_dict(self, row: sqlite3.Row, list_columns: set) -> Dict[str, object]:
        return {
            key: self._deserialise_list(row[key]) if key in list_columns else row[key] for key in row.keys()
        }

    # Items

    def create_item(self, item: ClothingItem) -> ClothingItem:
        item = _validate_item(item)
        item.item_id = item.item_id or _new_id()
        item.created_at = item.created_at or time.time()
        self._upsert("clothing_items", asdict(item), self._ITEM_LIST_COLUMNS)
        return item

    def _row_to_item(self, row: sqlite3.Row) -> ClothingItem:
        return ClothingItem(**self._row_to_dict(row, self._ITEM_LIST_COLUMNS))

    def get_item(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM clothing_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            row = cursor.fetchone()
            return self._row_to_item(row) if row else None

    def list_items(self, user_id: str) -> List[ClothingItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM clothing_items WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def list_items_by_category(self, user_id: str, category: str) -> List[ClothingItem]:
        try:
            category_key = validate_category(category)
        except ValueError:
            return []
        return [item for item in self.list_items(user_id) if item.category == category_key]

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        current = self.get_item(user_id, item_id)
        if not current:
            return None

        for key, value in updated_fields.items():
            if key in {"user_id", "item_id", "created_at"}:
                continue
            if hasattr(current, key):
                setattr(current, key, value)

        validated = ClothingItem(**asdict(current))
        return self.create_item(validated)

    def delete_item(self, user_id: str, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM clothing_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            return cursor.rowcount > 0

    # Outfits

    def create_outfit(self, outfit: Outfit) -> Outfit:
        now = time.time()
        outfit.outfit_id = outfit.outfit_id or _new_id()
        outfit.created_at = outfit.created_at or now
        outfit.updated_at = now
        record = asdict(outfit)
        record["is_favorite"] = int(bool(outfit.is_favorite))
        self._upsert("outfits", record, self._OUTFIT_LIST_COLUMNS)
        return outfit

    def _row_to_outfit(self, row: sqlite3.Row) -> Outfit:
        data = self._row_to_dict(row, self._OUTFIT_LIST_COLUMNS)
        data["is_favorite"] = bool(data["is_favorite"])
        return Outfit(**data)

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM outfits WHERE user_id = ? AND outfit_id = ?",
                (user_id, outfit_id),
            )
            row = cursor.fetchone()
            return self._row_to_outfit(row) if row else None

    def list_outfits(self, user_id: str) -> List[Outfit]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM outfits WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            )
            return [self._row_to_outfit(row) for row in cursor.fetchall()]

    def update_outfit(self, user_id: str, outfit_id: str, updated_fields: Dict[str, object]) -> Optional[Outfit]:
        current = self.get_outfit(user_id, outfit_id)
        if not current:
            return None

        known = {f.name for f in fields(Outfit)}
        data = asdict(current)
        for key, value in updated_fields.items():
            if key in {"user_id", "outfit_id", "created_at", "updated_at"} or key not in known:
                continue
            data[key] = value

        validated = Outfit(**data)
        return self.create_outfit(validated)

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM outfits WHERE user_id = ? AND outfit_id = ?",
                (user_id, outfit_id),
            )
            return cursor.rowcount > 0


__all__ = ["WardrobeStore", "WardrobeStoreError", "SQLiteWardrobeStore"]
