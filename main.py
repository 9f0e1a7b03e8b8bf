"""Print an outfit recommendation from the local wardrobe."""

from __future__ import annotations

import argparse
import asyncio
from datetime import date

from advisor_app.app import WardrobeAdvisorApp
from models.wardrobe_item import DEFAULT_USER_ID
from models.weather import WeatherReading
from tools.weather_provider import WeatherProviderError


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recommend an outfit for today's weather")
    parser.add_argument("--temperature", type=float, help="Air temperature in degrees Celsius.")
    parser.add_argument("--rain", action="store_true", help="Treat the weather as rainy.")
    parser.add_argument("--latitude", type=float, help="Look up weather at this latitude.")
    parser.add_argument("--longitude", type=float, help="Look up weather at this longitude.")
    parser.add_argument("--date", type=date.fromisoformat, help="Date to recommend for (YYYY-MM-DD).")
    parser.add_argument("--locale", default=None, help="Language for the explanation (en or ru).")
    parser.add_argument("--user-id", default=DEFAULT_USER_ID)
    args = parser.parse_args()
    if args.temperature is None and (args.latitude is None or args.longitude is None):
        parser.error("pass --temperature or both --latitude and --longitude")
    return args


def main() -> None:
    args = _parse_args()
    app = WardrobeAdvisorApp()
    if args.temperature is not None:
        weather = WeatherReading(temperature=args.temperature, is_raining=args.rain)
        coro = app.recommend(weather, now=args.date, user_id=args.user_id, locale=args.locale)
    else:
        coro = app.recommend_for_location(
            args.latitude, args.longitude, now=args.date, user_id=args.user_id, locale=args.locale
        )
    try:
        response = asyncio.run(coro)
    except WeatherProviderError as exc:
        raise SystemExit(f"Weather lookup failed: {exc}") from exc
    for slot, item in response["outfit"].items():
        print(f"{slot}: {item.get('name') or item.get('item_id')}")
    print(response["reason"])


if __name__ == "__main__":
    main()
