"""Configuration helpers for the Wardrobe Advisor app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Dict, Optional

DEFAULT_WEATHER_API_BASE_URL = "http://api.weatherapi.com/v1"
DEFAULT_WARDROBE_DB_PATH = "data/wardrobe.db"
DEFAULT_WARDROBE_CACHE_PATH = "data/wardrobe_cache.json"
DEFAULT_CONFIG_DIR = "config/environments"


@dataclass
class AdvisorConfig:
    """Settings for storage, weather lookups and the recommendation engine.

    The weather API key is a secret and only ever comes from the environment
    or an environment file; everything else has a local default. An empty
    ``wardrobe_cache_path`` turns the offline snapshot off.
    """

    weather_api_key: Optional[str] = None
    weather_api_base_url: str = DEFAULT_WEATHER_API_BASE_URL
    weather_timeout_seconds: float = 5.0
    wardrobe_db_path: str = DEFAULT_WARDROBE_DB_PATH
    wardrobe_cache_path: Optional[str] = DEFAULT_WARDROBE_CACHE_PATH
    recommendation_delay_seconds: float = 1.0
    default_locale: str = "en"
    environment: str | None = None

    def __post_init__(self) -> None:
        if self.weather_timeout_seconds <= 0:
            raise ValueError("weather_timeout_seconds must be positive")
        if self.recommendation_delay_seconds < 0:
            raise ValueError("recommendation_delay_seconds cannot be negative")
        self.default_locale = (self.default_locale or "en").strip().lower()

    @classmethod
    def from_env(cls) -> "AdvisorConfig":
        """Merge ``<APP_ENV>.yaml`` (or ``APP_CONFIG_PATH``) with environment variables.

        Each setting is looked up as its upper-case environment variable
        first, then as its key in the file, then falls back to the default.
        """

        env_name = os.getenv("APP_ENV")
        file_values = _read_flat_yaml(_config_file(env_name))

        def setting(key: str) -> Optional[str]:
            return os.getenv(key.upper(), file_values.get(key))

        cache_path = setting("wardrobe_cache_path")
        return cls(
            weather_api_key=setting("weather_api_key") or None,
            weather_api_base_url=setting("weather_api_base_url") or DEFAULT_WEATHER_API_BASE_URL,
            weather_timeout_seconds=_as_float("weather_timeout_seconds", setting("weather_timeout_seconds"), 5.0),
            wardrobe_db_path=setting("wardrobe_db_path") or DEFAULT_WARDROBE_DB_PATH,
            wardrobe_cache_path=DEFAULT_WARDROBE_CACHE_PATH if cache_path is None else (cache_path or None),
            recommendation_delay_seconds=_as_float(
                "recommendation_delay_seconds", setting("recommendation_delay_seconds"), 1.0
            ),
            default_locale=setting("default_locale") or "en",
            environment=env_name,
        )


def _config_file(env_name: Optional[str]) -> Optional[Path]:
    explicit = os.getenv("APP_CONFIG_PATH")
    if explicit:
        return Path(explicit)
    if env_name:
        return Path(os.getenv("ADVISOR_CONFIG_DIR", DEFAULT_CONFIG_DIR)) / f"{env_name}.yaml"
    return None


def _read_flat_yaml(path: Optional[Path]) -> Dict[str, str]:
    """Parse flat ``key: value`` lines; nesting and lists are not supported."""

    if path is None or not path.exists():
        return {}
    values: Dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or ":" not in stripped:
            continue
        key, raw_value = stripped.split(":", 1)
        value = raw_value.strip()
        if value[:1] in {'"', "'"} and value[-1:] == value[:1] and len(value) >= 2:
            value = value[1:-1]
        elif " #" in value:
            value = value.split(" #", 1)[0].rstrip()
        values[key.strip()] = value
    return values


def _as_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


__all__ = ["AdvisorConfig"]
