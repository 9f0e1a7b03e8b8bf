"""Structured explanation of why an outfit was recommended.

The engine only emits codes and context values. Turning them into a sentence
in a given language happens in :mod:`logic.phrasing`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List


class RationaleCode(str, Enum):
    COLD_TOP = "cold_top"
    COOL_TOP = "cool_top"
    MILD_TOP = "mild_top"
    WARM_TOP = "warm_top"
    WATERPROOF_TOP = "waterproof_top"
    HOT_BOTTOM = "hot_bottom"
    COLD_BOTTOM = "cold_bottom"
    NORMAL_BOTTOM = "normal_bottom"
    RAIN_SHOES = "rain_shoes"
    HOT_SHOES = "hot_shoes"
    NORMAL_SHOES = "normal_shoes"
    PERFECT_OUTFIT = "perfect_outfit"
    INCOMPLETE_OUTFIT = "incomplete_outfit"
    EMPTY_WARDROBE = "empty_wardrobe"


class OutfitCompleteness(str, Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Rationale:
    """Ordered rationale codes plus the context they refer to.

    ``fragments`` holds the per-slot codes in selection order. The outfit-level
    codes are not stored: ``header`` and ``notice`` derive them from
    ``completeness``.
    """

    completeness: OutfitCompleteness
    temperature: float
    is_raining: bool
    season: str
    day: date
    fragments: List[RationaleCode] = field(default_factory=list)

    @property
    def header(self) -> RationaleCode | None:
        if self.completeness is OutfitCompleteness.COMPLETE:
            return RationaleCode.PERFECT_OUTFIT
        return None

    @property
    def notice(self) -> RationaleCode | None:
        if self.completeness is OutfitCompleteness.PARTIAL:
            return RationaleCode.INCOMPLETE_OUTFIT
        if self.completeness is OutfitCompleteness.EMPTY:
            return RationaleCode.EMPTY_WARDROBE
        return None

    @property
    def codes(self) -> List[RationaleCode]:
        """All codes in reading order."""

        ordered: List[RationaleCode] = []
        if self.header:
            ordered.append(self.header)
        ordered.extend(self.fragments)
        if self.notice:
            ordered.append(self.notice)
        return ordered

    def to_dict(self) -> Dict[str, object]:
        return {
            "completeness": self.completeness.value,
            "codes": [code.value for code in self.codes],
            "temperature": self.temperature,
            "is_raining": self.is_raining,
            "season": self.season,
            "date": self.day.isoformat(),
        }


__all__ = ["RationaleCode", "OutfitCompleteness", "Rationale"]
