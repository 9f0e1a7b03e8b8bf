"""Wardrobe Advisor app bootstrap."""

from __future__ import annotations

import logging
import random
from dataclasses import asdict
from datetime import date, datetime
from typing import Any, Dict, Optional

from advisor_app.config import AdvisorConfig
from advisor_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic.phrasing import render_reason, resolve_locale
from logic.recommendation import Recommendation, RecommendationEngine
from models.taxonomy import SLOTS
from models.wardrobe_item import DEFAULT_USER_ID
from models.weather import WeatherReading
from tools.wardrobe_cache import CachedWardrobeStore
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore
from tools.wardrobe_tools import WardrobeTools
from tools.weather_provider import WeatherApiProvider, WeatherProvider


LOGGER = get_logger(__name__)


class WardrobeAdvisorApp:
    """Wires together storage, the weather provider and the recommendation engine."""

    def __init__(
        self,
        config: AdvisorConfig | None = None,
        store: WardrobeStore | None = None,
        weather_provider: WeatherProvider | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or AdvisorConfig.from_env()
        configure_logging()

        self.wardrobe_store = store or self._build_store()
        self.wardrobe_tools = WardrobeTools(self.wardrobe_store)
        self.weather_provider = weather_provider or WeatherApiProvider(
            api_key=self.config.weather_api_key,
            base_url=self.config.weather_api_base_url,
            timeout_seconds=self.config.weather_timeout_seconds,
        )
        self.engine = RecommendationEngine(delay_seconds=self.config.recommendation_delay_seconds, rng=rng)

    def _build_store(self) -> WardrobeStore:
        primary = SQLiteWardrobeStore(self.config.wardrobe_db_path)
        if self.config.wardrobe_cache_path:
            return CachedWardrobeStore(primary, self.config.wardrobe_cache_path)
        return primary

    async def recommend(
        self,
        weather: WeatherReading,
        now: date | None = None,
        user_id: str = DEFAULT_USER_ID,
        locale: str | None = None,
    ) -> Dict[str, Any]:
        """Recommend an outfit from the user's wardrobe for the given weather."""

        now = now or datetime.now()
        lang = resolve_locale(locale or self.config.default_locale)
        with operation_context("app.recommend") as correlation_id:
            inventory = self.wardrobe_store.list_items(user_id)
            recommendation = await self.engine.recommend(inventory, weather, now)
            response = self._to_response(recommendation, lang)
            log_event(
                LOGGER,
                level=logging.INFO,
                event="recommendation_completed",
                correlation_id=correlation_id,
                user_id=user_id,
                inventory_size=len(inventory),
                completeness=recommendation.rationale.completeness.value,
                temperature=weather.temperature,
                is_raining=weather.is_raining,
            )
            return response

    async def recommend_for_location(
        self,
        latitude: float,
        longitude: float,
        now: date | None = None,
        user_id: str = DEFAULT_USER_ID,
        locale: str | None = None,
    ) -> Dict[str, Any]:
        """Look up current weather, then recommend.

        :class:`tools.weather_provider.WeatherProviderError` propagates to the
        caller; the engine is never invoked without a reading.
        """

        weather = self.weather_provider.get_current(latitude, longitude)
        response = await self.recommend(weather, now=now, user_id=user_id, locale=locale)
        response["weather"] = asdict(weather)
        return response

    @staticmethod
    def _to_response(recommendation: Recommendation, locale: str) -> Dict[str, Any]:
        outfit: Dict[str, Optional[Dict[str, Any]]] = {}
        for slot in SLOTS:
            item = getattr(recommendation.outfit, slot)
            if item is not None:
                outfit[slot] = asdict(item)
        return {
            "status": "ok",
            "outfit": outfit,
            "reason": render_reason(recommendation.rationale, locale),
            "rationale": recommendation.rationale.to_dict(),
            "locale": locale,
        }


__all__ = ["WardrobeAdvisorApp"]
