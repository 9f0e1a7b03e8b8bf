"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.wardrobe_item import ClothingItem, from_raw_metadata

__all__ = ["ClothingItem", "from_raw_metadata"]
