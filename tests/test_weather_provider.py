"""weatherapi.com client behaviour with a stubbed HTTP session."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from tools.weather_provider import (
    MockWeatherProvider,
    WeatherApiProvider,
    WeatherProviderError,
    WeatherReading,
    is_rain_condition,
)


class _FakeResponse:
    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Dict[str, Any], timeout: float) -> _FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def _payload(temp_c: float, text: str) -> Dict[str, Any]:
    return {"location": {"name": "Somewhere"}, "current": {"temp_c": temp_c, "condition": {"text": text, "code": 1063}}}


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Light rain", True),
        ("Patchy light drizzle", True),
        ("Moderate or heavy rain shower", True),
        ("Thunderstorm", True),
        ("Sunny", False),
        ("Overcast", False),
        ("", False),
    ],
)
def test_is_rain_condition(text: str, expected: bool) -> None:
    assert is_rain_condition(text) is expected


def test_get_current_builds_request_and_parses_reading() -> None:
    session = _FakeSession(_FakeResponse(_payload(7.4, "Light rain")))
    provider = WeatherApiProvider(api_key="secret", base_url="http://weather.test/v1/", timeout_seconds=2.5, session=session)

    reading = provider.get_current(55.75, 37.62)

    assert reading == WeatherReading(temperature=7.4, is_raining=True)
    call = session.calls[0]
    assert call["url"] == "http://weather.test/v1/current.json"
    assert call["params"] == {"key": "secret", "q": "55.75,37.62", "aqi": "no"}
    assert call["timeout"] == 2.5


def test_missing_api_key_fails_without_request() -> None:
    session = _FakeSession(_FakeResponse(_payload(20, "Sunny")))
    provider = WeatherApiProvider(api_key=None, session=session)

    with pytest.raises(WeatherProviderError):
        provider.get_current(0, 0)
    assert session.calls == []


def test_network_error_is_wrapped() -> None:
    provider = WeatherApiProvider(api_key="k", session=_FakeSession(error=requests.ConnectionError("down")))
    with pytest.raises(WeatherProviderError) as excinfo:
        provider.get_current(1, 2)
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_http_error_status_is_wrapped() -> None:
    provider = WeatherApiProvider(api_key="k", session=_FakeSession(_FakeResponse({}, status_code=401)))
    with pytest.raises(WeatherProviderError):
        provider.get_current(1, 2)


@pytest.mark.parametrize(
    "payload",
    [
        {"current": {"condition": {"text": "Sunny"}}},
        {"error": {"code": 1006, "message": "No matching location found."}},
        ValueError("not json"),
    ],
)
def test_unexpected_payload_is_wrapped(payload: Any) -> None:
    provider = WeatherApiProvider(api_key="k", session=_FakeSession(_FakeResponse(payload)))
    with pytest.raises(WeatherProviderError):
        provider.get_current(1, 2)


def test_mock_provider_returns_configured_reading() -> None:
    assert MockWeatherProvider().get_current(0, 0) == WeatherReading(temperature=15.0, is_raining=False)
    rainy = WeatherReading(temperature=3, is_raining=True)
    assert MockWeatherProvider(rainy).get_current(10, 10) is rainy
