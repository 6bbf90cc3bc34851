"""Localized rate phrases and date patterns (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from core.models import Rating

RATING_EMOJI = ":star:"


@dataclass(frozen=True)
class LocaleProfile:
    """Date pattern and the five "N-star" phrases of one storefront language."""

    name: str
    date_format: str
    rate_phrases: Tuple[str, str, str, str, str]


LOCALES: dict[str, LocaleProfile] = {
    "ja": LocaleProfile(
        name="ja",
        date_format="%Y年%m月%d日",
        rate_phrases=("1つ星", "2つ星", "3つ星", "4つ星", "5つ星"),
    ),
    "en": LocaleProfile(
        name="en",
        date_format="%B %d, %Y",
        rate_phrases=("Rated 1 star", "Rated 2 stars", "Rated 3 stars", "Rated 4 stars", "Rated 5 stars"),
    ),
}

DEFAULT_LOCALE = LOCALES["ja"]


def parse_rate(label: Optional[str], locale: LocaleProfile = DEFAULT_LOCALE) -> Rating:
    """Map an accessible rating label to a Rating.

    Phrases are checked from one star to five; the first contained phrase
    wins. Anything else, including a missing label, is UNRATED.
    """

    if not label:
        return Rating.UNRATED
    for stars, phrase in enumerate(locale.rate_phrases, start=1):
        if phrase in label:
            return Rating(stars)
    return Rating.UNRATED


def render_rating(rating: Rating, glyph: str = RATING_EMOJI) -> str:
    """Render a rating as a repeated glyph (empty for UNRATED)."""

    return glyph * int(rating)
