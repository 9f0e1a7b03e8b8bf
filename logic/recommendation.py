"""Weather and season aware outfit recommendation with transparent diagnostics."""
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Union

from logic.candidate_filter import CandidatePool, looks_waterproof, seasonal_pool, shoe_pool
from models.outfit import OutfitSelection
from models.rationale import OutfitCompleteness, Rationale, RationaleCode
from models.taxonomy import SLOTS, normalize_category, season_for_date
from models.wardrobe_item import ClothingItem, from_raw_metadata
from models.weather import WeatherReading

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 1.0

InventoryEntry = Union[ClothingItem, Mapping[str, object]]


@dataclass(frozen=True)
class Recommendation:
    outfit: OutfitSelection
    rationale: Rationale
    diagnostics: Dict[str, object]


def _coerce_items(raw_items: Iterable[InventoryEntry]) -> List[ClothingItem]:
    items = []
    for raw in raw_items or []:
        if isinstance(raw, ClothingItem):
            items.append(raw)
        elif isinstance(raw, Mapping):
            items.append(from_raw_metadata(dict(raw)))
        else:
            logger.warning("Skipping inventory entry of unsupported type %s", type(raw).__name__)
    return items


def partition_by_slot(items: Iterable[ClothingItem]) -> Dict[str, List[ClothingItem]]:
    """Group items by outfit slot, dropping anything without a known category."""

    grouped: Dict[str, List[ClothingItem]] = {slot: [] for slot in SLOTS}
    for item in items:
        slot = normalize_category(item.category)
        if slot:
            grouped[slot].append(item)
    return grouped


def top_band(temperature: float) -> RationaleCode:
    if temperature < 0:
        return RationaleCode.COLD_TOP
    if temperature < 10:
        return RationaleCode.COOL_TOP
    if temperature < 20:
        return RationaleCode.MILD_TOP
    return RationaleCode.WARM_TOP


def bottom_band(temperature: float) -> RationaleCode:
    if temperature > 22:
        return RationaleCode.HOT_BOTTOM
    if temperature < 5:
        return RationaleCode.COLD_BOTTOM
    return RationaleCode.NORMAL_BOTTOM


def shoes_band(temperature: float, is_raining: bool) -> RationaleCode:
    if is_raining:
        return RationaleCode.RAIN_SHOES
    if temperature > 20:
        return RationaleCode.HOT_SHOES
    return RationaleCode.NORMAL_SHOES


def _completeness(outfit: OutfitSelection) -> OutfitCompleteness:
    if outfit.is_empty:
        return OutfitCompleteness.EMPTY
    if outfit.is_complete:
        return OutfitCompleteness.COMPLETE
    return OutfitCompleteness.PARTIAL


def build_recommendation(
    inventory: Iterable[InventoryEntry],
    weather: WeatherReading,
    now: date,
    rng: Optional[random.Random] = None,
) -> Recommendation:
    """Pick one item per slot and explain the choice.

    Slots are filled in the order top, bottom, shoes. Each pool is narrowed by
    season (and, for shoes in rain, by waterproofing) and widened back to the
    whole category when the filter leaves nothing.
    """

    rng = rng or random.Random()
    season = season_for_date(now)
    temperature = weather.temperature
    is_raining = weather.is_raining
    grouped = partition_by_slot(_coerce_items(inventory))

    outfit = OutfitSelection()
    fragments: List[RationaleCode] = []
    diagnostics: Dict[str, object] = {
        "season": season,
        "slot_counts": {slot: len(items) for slot, items in grouped.items()},
        "pools": {},
    }

    if grouped["top"]:
        pool = seasonal_pool(grouped["top"], season)
        outfit.top = rng.choice(pool.items)
        fragments.append(top_band(temperature))
        if is_raining and looks_waterproof(outfit.top):
            fragments.append(RationaleCode.WATERPROOF_TOP)
        diagnostics["pools"]["top"] = _pool_summary(pool)

    if grouped["bottom"]:
        pool = seasonal_pool(grouped["bottom"], season)
        outfit.bottom = rng.choice(pool.items)
        fragments.append(bottom_band(temperature))
        diagnostics["pools"]["bottom"] = _pool_summary(pool)

    if grouped["shoes"]:
        pool = shoe_pool(grouped["shoes"], season, is_raining)
        outfit.shoes = rng.choice(pool.items)
        fragments.append(shoes_band(temperature, is_raining))
        diagnostics["pools"]["shoes"] = _pool_summary(pool)

    completeness = _completeness(outfit)
    rationale = Rationale(
        completeness=completeness,
        temperature=temperature,
        is_raining=is_raining,
        season=season,
        day=now.date() if isinstance(now, datetime) else now,
        fragments=fragments if completeness is not OutfitCompleteness.EMPTY else [],
    )
    diagnostics["filled_slots"] = outfit.filled_slots()
    logger.info(
        "Built %s outfit for %s at %.1fC (rain=%s)", completeness.value, season, temperature, is_raining
    )
    return Recommendation(outfit=outfit, rationale=rationale, diagnostics=diagnostics)


def _pool_summary(pool: CandidatePool) -> Dict[str, object]:
    return {"size": len(pool.items), "fallback_used": pool.fallback_used, **pool.debug}


class RecommendationEngine:
    """Async front for :func:`build_recommendation`.

    ``delay_seconds`` imitates the round trip to a remote advisor. Cancelling
    the awaiting task cancels the call; the engine keeps no state between calls.
    """

    def __init__(self, delay_seconds: float = DEFAULT_DELAY_SECONDS, rng: Optional[random.Random] = None) -> None:
        self.delay_seconds = max(0.0, float(delay_seconds))
        self.rng = rng

    async def recommend(
        self, inventory: Iterable[InventoryEntry], weather: WeatherReading, now: date
    ) -> Recommendation:
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        return build_recommendation(inventory, weather, now, rng=self.rng)


__all__ = [
    "DEFAULT_DELAY_SECONDS",
    "Recommendation",
    "RecommendationEngine",
    "build_recommendation",
    "partition_by_slot",
    "top_band",
    "bottom_band",
    "shoes_band",
]
