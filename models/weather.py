"""Weather reading passed into the recommendation engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WeatherReading:
    """Current conditions: temperature in degrees Celsius and a rain flag."""

    temperature: float
    is_raining: bool = False


__all__ = ["WeatherReading"]
