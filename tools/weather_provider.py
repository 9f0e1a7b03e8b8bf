"""Weather provider abstractions and implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import requests
from pydantic import BaseModel, ValidationError

from models.weather import WeatherReading
from tools.observability import instrumented


LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://api.weatherapi.com/v1"
RAIN_MARKERS = ("rain", "drizzle", "shower", "thunderstorm")


class WeatherProviderError(RuntimeError):
    """Raised when current conditions cannot be fetched."""


class _Condition(BaseModel):
    text: str = ""
    code: int | None = None


class _Current(BaseModel):
    temp_c: float
    condition: _Condition


class _CurrentResponse(BaseModel):
    current: _Current


def is_rain_condition(condition_text: str) -> bool:
    text = (condition_text or "").lower()
    return any(marker in text for marker in RAIN_MARKERS)


class WeatherProvider(ABC):
    """Abstract weather provider interface."""

    @abstractmethod
    def get_current(self, latitude: float, longitude: float) -> WeatherReading:
        """Return current conditions at the given coordinates."""


class WeatherApiProvider(WeatherProvider):
    """weatherapi.com client with schema validation."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 5.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    @instrumented("get_current_weather")
    def get_current(self, latitude: float, longitude: float) -> WeatherReading:
        if not self.api_key:
            raise WeatherProviderError("weather API key is not configured")

        params = {
            "key": self.api_key,
            "q": f"{latitude},{longitude}",
            "aqi": "no",
        }
        url = f"{self.base_url}/current.json"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            parsed = _CurrentResponse.model_validate(response.json())
        except requests.RequestException as exc:
            LOGGER.error("Weather API unreachable", exc_info=exc)
            raise WeatherProviderError("weather API request failed") from exc
        except (ValidationError, ValueError) as exc:
            LOGGER.error("Weather payload schema validation failed", exc_info=exc)
            raise WeatherProviderError("weather API returned an unexpected payload") from exc

        reading = WeatherReading(
            temperature=parsed.current.temp_c,
            is_raining=is_rain_condition(parsed.current.condition.text),
        )
        LOGGER.info(
            "Fetched current weather",
            extra={"temperature": reading.temperature, "is_raining": reading.is_raining},
        )
        return reading


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests."""

    def __init__(self, reading: WeatherReading | None = None) -> None:
        self.reading = reading or WeatherReading(temperature=15.0, is_raining=False)

    def get_current(self, latitude: float, longitude: float) -> WeatherReading:
        LOGGER.info("Returning mock weather")
        return self.reading


__all__ = [
    "WeatherReading",
    "WeatherProvider",
    "WeatherProviderError",
    "WeatherApiProvider",
    "MockWeatherProvider",
    "is_rain_condition",
]
