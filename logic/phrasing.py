"""Render a :class:`Rationale` into user-facing text per locale."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict

from models.rationale import OutfitCompleteness, Rationale, RationaleCode

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

PHRASES: Dict[str, Dict[RationaleCode, str]] = {
    "en": {
        RationaleCode.COLD_TOP: "It is freezing outside, so pick your warmest top.",
        RationaleCode.COOL_TOP: "It is cool today, a sweater or long sleeves will do.",
        RationaleCode.MILD_TOP: "Mild weather calls for a light top.",
        RationaleCode.WARM_TOP: "It is warm, a t-shirt or blouse is enough.",
        RationaleCode.WATERPROOF_TOP: "This top should also keep the rain out.",
        RationaleCode.HOT_BOTTOM: "It is hot, so go for light shorts or a skirt.",
        RationaleCode.COLD_BOTTOM: "Choose warm trousers for the cold.",
        RationaleCode.NORMAL_BOTTOM: "Jeans or trousers suit this weather.",
        RationaleCode.RAIN_SHOES: "It is raining, closed waterproof shoes are best.",
        RationaleCode.HOT_SHOES: "Open or breathable shoes for the heat.",
        RationaleCode.NORMAL_SHOES: "Comfortable everyday shoes will work.",
        RationaleCode.PERFECT_OUTFIT: "A perfect outfit for {temperature}°C{rain}.",
        RationaleCode.INCOMPLETE_OUTFIT: "Add more items to your wardrobe to get a complete outfit.",
        RationaleCode.EMPTY_WARDROBE: "Your wardrobe is empty. Add some clothes to get recommendations.",
    },
    "ru": {
        RationaleCode.COLD_TOP: "На улице мороз, выберите самый тёплый верх.",
        RationaleCode.COOL_TOP: "Сегодня прохладно, подойдёт свитер или длинный рукав.",
        RationaleCode.MILD_TOP: "Мягкая погода, подойдёт лёгкий верх.",
        RationaleCode.WARM_TOP: "Тепло, достаточно футболки или блузки.",
        RationaleCode.WATERPROOF_TOP: "Этот верх к тому же защитит от дождя.",
        RationaleCode.HOT_BOTTOM: "Жарко, выбирайте лёгкие шорты или юбку.",
        RationaleCode.COLD_BOTTOM: "В холод нужны тёплые брюки.",
        RationaleCode.NORMAL_BOTTOM: "Джинсы или брюки подойдут для такой погоды.",
        RationaleCode.RAIN_SHOES: "Идёт дождь, лучше закрытая непромокаемая обувь.",
        RationaleCode.HOT_SHOES: "В жару подойдёт открытая или дышащая обувь.",
        RationaleCode.NORMAL_SHOES: "Подойдёт удобная повседневная обувь.",
        RationaleCode.PERFECT_OUTFIT: "Идеальный образ для {temperature}°C{rain}.",
        RationaleCode.INCOMPLETE_OUTFIT: "Добавьте вещи в гардероб, чтобы получить полный образ.",
        RationaleCode.EMPTY_WARDROBE: "В гардеробе нет вещей. Добавьте одежду, чтобы получить рекомендации.",
    },
}

RAIN_CLAUSES = {"en": ", with rain", "ru": ", с дождём"}

SEASON_NAMES = {
    "en": {"spring": "spring", "summer": "summer", "autumn": "autumn", "winter": "winter"},
    "ru": {"spring": "весна", "summer": "лето", "autumn": "осень", "winter": "зима"},
}

DATE_FORMATS = {"en": "%m/%d/%Y", "ru": "%d.%m.%Y"}


def resolve_locale(locale: str | None) -> str:
    key = (locale or DEFAULT_LOCALE).strip().lower().split("-")[0].split("_")[0]
    if key not in PHRASES:
        logger.info("Unknown locale '%s', falling back to %s", locale, DEFAULT_LOCALE)
        return DEFAULT_LOCALE
    return key


def _format_temperature(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def format_date(day: date, locale: str) -> str:
    return day.strftime(DATE_FORMATS[resolve_locale(locale)])


def render_reason(rationale: Rationale, locale: str | None = DEFAULT_LOCALE) -> str:
    """Compose the reason sentence shown next to a recommendation.

    * empty wardrobe: only the empty-wardrobe message.
    * partial outfit: ``"<date> — <season>. <fragments> <incomplete notice>"``.
    * complete outfit: ``"<date> — <season>. <perfect outfit header> <fragments>"``.
    """

    lang = resolve_locale(locale)
    phrases = PHRASES[lang]
    if rationale.completeness is OutfitCompleteness.EMPTY:
        return phrases[RationaleCode.EMPTY_WARDROBE]

    prefix = f"{format_date(rationale.day, lang)} — {SEASON_NAMES[lang][rationale.season]}."
    fragments = " ".join(phrases[code] for code in rationale.fragments)
    if rationale.completeness is OutfitCompleteness.PARTIAL:
        return f"{prefix} {fragments} {phrases[RationaleCode.INCOMPLETE_OUTFIT]}"

    header = phrases[RationaleCode.PERFECT_OUTFIT].format(
        temperature=_format_temperature(rationale.temperature),
        rain=RAIN_CLAUSES[lang] if rationale.is_raining else "",
    )
    return f"{prefix} {header} {fragments}"


__all__ = ["DEFAULT_LOCALE", "PHRASES", "render_reason", "resolve_locale", "format_date"]
