"""HTTP surface of the wardrobe advisor."""

from __future__ import annotations

import random
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from advisor_app.app import WardrobeAdvisorApp
from advisor_app.config import AdvisorConfig
from server.api import create_app
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStoreError
from tools.weather_provider import MockWeatherProvider, WeatherProvider, WeatherProviderError, WeatherReading


class _BrokenWeatherProvider(WeatherProvider):
    def get_current(self, latitude: float, longitude: float) -> WeatherReading:
        raise WeatherProviderError("weather API request failed")


def _advisor(tmp_path: Path, weather_provider: WeatherProvider | None = None) -> WardrobeAdvisorApp:
    config = AdvisorConfig(
        wardrobe_db_path=str(tmp_path / "wardrobe.db"),
        wardrobe_cache_path=str(tmp_path / "wardrobe_cache.json"),
        recommendation_delay_seconds=0,
    )
    return WardrobeAdvisorApp(
        config=config,
        weather_provider=weather_provider or MockWeatherProvider(WeatherReading(temperature=3, is_raining=True)),
        rng=random.Random(0),
    )


@pytest.fixture()
def client(tmp_path: Path) -> TestClient:
    return TestClient(create_app(_advisor(tmp_path)))


def _add(client: TestClient, **fields) -> dict:
    payload = {"name": "Item", "color": "black", "season": ["winter"], **fields}
    response = client.post("/api/wardrobe", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_item_crud(client: TestClient) -> None:
    created = _add(client, name="Parka", category="top", imageUrl="file:///parka.jpg")
    item_id = created["item_id"]
    assert created["image_url"] == "file:///parka.jpg"

    assert client.get(f"/api/wardrobe/{item_id}").json()["name"] == "Parka"
    assert [i["item_id"] for i in client.get("/api/wardrobe").json()] == [item_id]
    assert len(client.get("/api/wardrobe/category/top").json()) == 1
    assert client.get("/api/wardrobe/category/shoes").json() == []

    updated = client.put(f"/api/wardrobe/{item_id}", json={"color": "olive"})
    assert updated.status_code == 200
    assert updated.json()["color"] == "olive"

    assert client.delete(f"/api/wardrobe/{item_id}").json() == {"deleted": True, "item_id": item_id}
    assert client.get(f"/api/wardrobe/{item_id}").status_code == 404
    assert client.delete(f"/api/wardrobe/{item_id}").status_code == 404
    assert client.put(f"/api/wardrobe/{item_id}", json={"color": "red"}).status_code == 404


def test_items_are_scoped_by_user(client: TestClient) -> None:
    _add(client, category="top", userId="alice")
    assert len(client.get("/api/wardrobe", params={"user_id": "alice"}).json()) == 1
    assert client.get("/api/wardrobe").json() == []


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Cap", "category": "hat", "color": "red", "season": ["summer"]},
        {"name": "Tee", "category": "top", "color": "red", "season": []},
        {"name": "Tee", "category": "top", "color": "red", "season": ["monsoon"]},
        {"category": "top", "color": "red", "season": ["summer"]},
        {"name": "Tee", "category": "top", "color": "red", "season": ["summer"], "condition": "torn"},
    ],
)
def test_invalid_item_payloads_are_rejected(client: TestClient, payload: dict) -> None:
    assert client.post("/api/wardrobe", json=payload).status_code == 422


def test_outfit_routes(client: TestClient) -> None:
    top = _add(client, name="Shirt", category="top")
    shoes = _add(client, name="Loafers", category="shoes")

    office = client.post(
        "/api/outfits",
        json={"name": "Office", "topId": top["item_id"], "shoesId": shoes["item_id"], "style": "classic", "category": "work"},
    )
    assert office.status_code == 201
    office_id = office.json()["outfit_id"]
    client.post("/api/outfits", json={"name": "Lazy", "shoesId": shoes["item_id"], "isFavorite": True})

    fetched = client.get(f"/api/outfits/{office_id}").json()
    assert fetched["top"]["name"] == "Shirt"
    assert fetched["bottom"] is None

    assert [o["name"] for o in client.get("/api/outfits").json()] == ["Lazy", "Office"]
    assert [o["name"] for o in client.get("/api/outfits/filter/favorites").json()] == ["Lazy"]
    assert [o["name"] for o in client.get("/api/outfits/filter/by-style/classic").json()] == ["Office"]

    rated = client.put(f"/api/outfits/{office_id}", json={"rating": 5})
    assert rated.status_code == 200
    assert rated.json()["rating"] == 5

    stripped = client.put(f"/api/outfits/{office_id}", json={"topId": None, "shoesId": None})
    assert stripped.status_code == 400

    assert client.delete(f"/api/outfits/{office_id}").status_code == 200
    assert client.get(f"/api/outfits/{office_id}").status_code == 404


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Nothing"},
        {"topId": "x"},
        {"name": "Gala", "topId": "x", "category": "gala"},
        {"name": "Loved", "topId": "x", "rating": 7},
    ],
)
def test_invalid_outfit_payloads_are_rejected(client: TestClient, payload: dict) -> None:
    assert client.post("/api/outfits", json=payload).status_code == 422


def test_recommendation_for_explicit_weather(client: TestClient) -> None:
    _add(client, name="Linen shirt", category="Верх", season=["summer"])
    _add(client, name="Shorts", category="bottoms", season=["summer"])
    _add(client, name="Sandals", category="обувь", season=["summer"])

    response = client.post("/api/recommendations", json={"temperature": 25, "date": "2025-07-15"})
    body = response.json()

    assert response.status_code == 200
    assert set(body["outfit"]) == {"top", "bottom", "shoes"}
    assert body["rationale"]["completeness"] == "complete"
    assert body["rationale"]["season"] == "summer"
    assert body["reason"].startswith("07/15/2025 — summer. A perfect outfit for 25°C. ")


def test_recommendation_for_location_uses_provider(client: TestClient) -> None:
    _add(client, name="Jeans", category="bottom")

    response = client.post(
        "/api/recommendations", json={"latitude": 55.7, "longitude": 37.6, "date": "2025-01-10", "locale": "ru-RU"}
    )
    body = response.json()

    assert response.status_code == 200
    assert body["weather"] == {"temperature": 3, "is_raining": True}
    assert list(body["outfit"]) == ["bottom"]
    assert body["locale"] == "ru"
    assert body["rationale"]["codes"] == ["cold_bottom", "incomplete_outfit"]
    assert body["reason"].startswith("10.01.2025 — зима. ")


def test_recommendation_with_empty_wardrobe(client: TestClient) -> None:
    body = client.post("/api/recommendations", json={"temperature": 10}).json()
    assert body["outfit"] == {}
    assert body["reason"] == "Your wardrobe is empty. Add some clothes to get recommendations."


def test_recommendation_needs_a_weather_source(client: TestClient) -> None:
    assert client.post("/api/recommendations", json={"latitude": 10}).status_code == 422


def test_weather_failure_maps_to_bad_gateway(tmp_path: Path) -> None:
    client = TestClient(create_app(_advisor(tmp_path, weather_provider=_BrokenWeatherProvider())))
    response = client.post("/api/recommendations", json={"latitude": 1, "longitude": 2})
    assert response.status_code == 502


def test_store_failure_maps_to_service_unavailable(tmp_path: Path) -> None:
    class _DownStore(SQLiteWardrobeStore):
        def list_items(self, user_id: str):
            raise WardrobeStoreError("database unreachable")

    config = AdvisorConfig(wardrobe_db_path=str(tmp_path / "w.db"), recommendation_delay_seconds=0)
    advisor = WardrobeAdvisorApp(config=config, store=_DownStore(tmp_path / "w.db"), weather_provider=MockWeatherProvider())
    client = TestClient(create_app(advisor))

    assert client.get("/api/wardrobe").status_code == 503
    assert client.post("/api/recommendations", json={"temperature": 10}).status_code == 503


@pytest.mark.parametrize(
    "field", ["rating", "season", "occasions", "name", "category", "isFavorite", "style", "notes"]
)
def test_outfit_update_rejects_null_for_required_fields(client: TestClient, field: str) -> None:
    top = _add(client, name="Shirt", category="top")
    outfit = client.post("/api/outfits", json={"name": "Office", "topId": top["item_id"], "rating": 3}).json()

    response = client.put(f"/api/outfits/{outfit['outfit_id']}", json={field: None})

    assert response.status_code == 422
    unchanged = client.get(f"/api/outfits/{outfit['outfit_id']}").json()
    assert unchanged["rating"] == 3
    assert unchanged["name"] == "Office"


def test_outfit_update_still_allows_clearing_one_piece(client: TestClient) -> None:
    top = _add(client, name="Shirt", category="top")
    shoes = _add(client, name="Loafers", category="shoes")
    outfit = client.post("/api/outfits", json={"name": "Office", "topId": top["item_id"], "shoesId": shoes["item_id"]}).json()

    response = client.put(f"/api/outfits/{outfit['outfit_id']}", json={"shoesId": None})

    assert response.status_code == 200
    assert response.json()["shoes_id"] is None
    assert response.json()["shoes"] is None
