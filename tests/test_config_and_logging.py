"""Configuration loading and log redaction."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from advisor_app.config import AdvisorConfig
from advisor_app.logging_config import JsonFormatter, correlation_context, ensure_correlation_id, redact_for_log

_ENV_KEYS = (
    "APP_ENV",
    "APP_CONFIG_PATH",
    "ADVISOR_CONFIG_DIR",
    "WEATHER_API_KEY",
    "WEATHER_API_BASE_URL",
    "WEATHER_TIMEOUT_SECONDS",
    "WARDROBE_DB_PATH",
    "WARDROBE_CACHE_PATH",
    "RECOMMENDATION_DELAY_SECONDS",
    "DEFAULT_LOCALE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment() -> None:
    config = AdvisorConfig.from_env()
    assert config.weather_api_key is None
    assert config.weather_api_base_url == "http://api.weatherapi.com/v1"
    assert config.recommendation_delay_seconds == 1.0
    assert config.default_locale == "en"
    assert config.environment is None


def test_yaml_file_is_merged_under_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "staging.yaml").write_text(
        "# staging overrides\n"
        "weather_api_key: \"from-yaml\"\n"
        "recommendation_delay_seconds: 0\n"
        "default_locale: ru\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("ADVISOR_CONFIG_DIR", str(env_dir))
    monkeypatch.setenv("WEATHER_API_KEY", "from-env")

    config = AdvisorConfig.from_env()

    assert config.environment == "staging"
    assert config.weather_api_key == "from-env"
    assert config.recommendation_delay_seconds == 0.0
    assert config.default_locale == "ru"


def test_empty_cache_path_disables_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WARDROBE_CACHE_PATH", "")
    assert AdvisorConfig.from_env().wardrobe_cache_path is None


def test_malformed_numbers_name_the_setting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEATHER_TIMEOUT_SECONDS", "soon")
    with pytest.raises(ValueError, match="weather_timeout_seconds"):
        AdvisorConfig.from_env()


def test_negative_delay_is_rejected() -> None:
    with pytest.raises(ValueError):
        AdvisorConfig(recommendation_delay_seconds=-1)


def test_redact_for_log_masks_sensitive_fields() -> None:
    scrubbed = redact_for_log(
        {
            "user_id": "alice",
            "latitude": 55.7,
            "note": "mail me at alice@example.com",
            "photo": "data:image/png;base64,AAAA",
            "nested": [{"key": "secret", "category": "top"}],
            "long": "long text, " * 30,
        }
    )
    assert scrubbed["user_id"] == "[redacted]"
    assert scrubbed["latitude"] == "[redacted]"
    assert scrubbed["note"] == "mail me at [redacted-email]"
    assert scrubbed["photo"] == "[redacted-image]"
    assert scrubbed["nested"] == [{"key": "[redacted]", "category": "top"}]
    assert scrubbed["long"].endswith("...[truncated]")


def test_json_formatter_includes_correlation_and_extras() -> None:
    record = logging.LogRecord("advisor", logging.INFO, __file__, 1, "hello", None, None)
    record.event = "recommendation_completed"
    record.user_id = "alice"
    record.completeness = "partial"

    with correlation_context("abc123"):
        payload = json.loads(JsonFormatter().format(record))

    assert payload["event"] == "recommendation_completed"
    assert payload["correlation_id"] == "abc123"
    assert payload["completeness"] == "partial"
    assert payload["user_id"] == "[redacted]"


def test_correlation_context_restores_previous_id() -> None:
    with correlation_context("outer"):
        with correlation_context("inner") as inner:
            assert inner == "inner"
        assert ensure_correlation_id() == "outer"
