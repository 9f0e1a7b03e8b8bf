"""FastAPI server exposing wardrobe CRUD and recommendation endpoints."""

from datetime import datetime, time as dt_time

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from advisor_app.app import WardrobeAdvisorApp
from advisor_app.logging_config import configure_logging
from logic.validation import (
    ClothingItemCreate,
    ClothingItemUpdate,
    OutfitCreate,
    OutfitUpdate,
    RecommendationRequest,
    validation_failure,
)
from models.wardrobe_item import DEFAULT_USER_ID
from models.weather import WeatherReading
from tools.wardrobe_store import WardrobeStoreError
from tools.weather_provider import WeatherProviderError


def create_app(advisor: WardrobeAdvisorApp | None = None) -> FastAPI:
    """Build the ASGI app around an advisor instance."""

    advisor = advisor or WardrobeAdvisorApp()
    tools = advisor.wardrobe_tools
    api = FastAPI(title="Wardrobe Advisor", version="0.1.0")
    api.state.advisor = advisor

    def _not_found(kind: str) -> HTTPException:
        return HTTPException(status_code=404, detail=f"{kind} not found")

    def _invalid(message: str, exc: ValidationError) -> HTTPException:
        return HTTPException(status_code=400, detail=validation_failure(message, exc))

    @api.exception_handler(WardrobeStoreError)
    async def store_unavailable(_: Request, exc: WardrobeStoreError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @api.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "wardrobe-advisor",
            "environment": advisor.config.environment or "local",
        }

    @api.get("/api/wardrobe")
    async def list_items(user_id: str = DEFAULT_USER_ID) -> list:
        return tools.list_wardrobe_items(user_id)

    @api.get("/api/wardrobe/category/{category}")
    async def list_items_by_category(category: str, user_id: str = DEFAULT_USER_ID) -> list:
        return tools.list_wardrobe_items_by_category(user_id, category)

    @api.get("/api/wardrobe/{item_id}")
    async def get_item(item_id: str, user_id: str = DEFAULT_USER_ID) -> dict:
        item = tools.get_wardrobe_item(user_id, item_id)
        if item is None:
            raise _not_found("Item")
        return item

    @api.post("/api/wardrobe", status_code=201)
    async def create_item(request: ClothingItemCreate) -> dict:
        return tools.add_wardrobe_item(request.user_id, request.model_dump())

    @api.put("/api/wardrobe/{item_id}")
    async def update_item(item_id: str, request: ClothingItemUpdate, user_id: str = DEFAULT_USER_ID) -> dict:
        try:
            item = tools.update_wardrobe_item(user_id, item_id, request.model_dump(exclude_unset=True))
        except ValidationError as exc:
            raise _invalid("Invalid item update", exc) from exc
        if item is None:
            raise _not_found("Item")
        return item

    @api.delete("/api/wardrobe/{item_id}")
    async def delete_item(item_id: str, user_id: str = DEFAULT_USER_ID) -> dict:
        if not tools.delete_wardrobe_item(user_id, item_id):
            raise _not_found("Item")
        return {"deleted": True, "item_id": item_id}

    @api.get("/api/outfits")
    async def list_outfits(user_id: str = DEFAULT_USER_ID) -> list:
        return tools.list_outfits(user_id)

    @api.get("/api/outfits/filter/favorites")
    async def list_favorite_outfits(user_id: str = DEFAULT_USER_ID) -> list:
        return tools.list_favorite_outfits(user_id)

    @api.get("/api/outfits/filter/by-style/{style}")
    async def list_outfits_by_style(style: str, user_id: str = DEFAULT_USER_ID) -> list:
        return tools.list_outfits_by_style(user_id, style)

    @api.get("/api/outfits/{outfit_id}")
    async def get_outfit(outfit_id: str, user_id: str = DEFAULT_USER_ID) -> dict:
        outfit = tools.get_outfit(user_id, outfit_id)
        if outfit is None:
            raise _not_found("Outfit")
        return outfit

    @api.post("/api/outfits", status_code=201)
    async def create_outfit(request: OutfitCreate) -> dict:
        return tools.add_outfit(request.user_id, request.model_dump())

    @api.put("/api/outfits/{outfit_id}")
    async def update_outfit(outfit_id: str, request: OutfitUpdate, user_id: str = DEFAULT_USER_ID) -> dict:
        try:
            outfit = tools.update_outfit(user_id, outfit_id, request.model_dump(exclude_unset=True))
        except ValidationError as exc:
            raise _invalid("Invalid outfit update", exc) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if outfit is None:
            raise _not_found("Outfit")
        return outfit

    @api.delete("/api/outfits/{outfit_id}")
    async def delete_outfit(outfit_id: str, user_id: str = DEFAULT_USER_ID) -> dict:
        if not tools.delete_outfit(user_id, outfit_id):
            raise _not_found("Outfit")
        return {"deleted": True, "outfit_id": outfit_id}

    @api.post("/api/recommendations")
    async def recommend(request: RecommendationRequest) -> dict:
        """Recommend an outfit for explicit weather or for coordinates."""

        now = datetime.combine(request.date, dt_time(12)) if request.date else None
        try:
            if request.temperature is not None:
                weather = WeatherReading(temperature=request.temperature, is_raining=request.is_raining)
                return await advisor.recommend(weather, now=now, user_id=request.user_id, locale=request.locale)
            return await advisor.recommend_for_location(
                request.latitude, request.longitude, now=now, user_id=request.user_id, locale=request.locale
            )
        except WeatherProviderError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc

    return api


def get_app() -> FastAPI:
    """Expose a FastAPI instance for ASGI servers."""

    configure_logging()
    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
