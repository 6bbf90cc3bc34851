"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to the HTML parser or the storage backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import IntEnum


class Rating(IntEnum):
    """Star rating of a review. UNRATED when the label is not recognised."""

    UNRATED = 0
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5


@dataclass(frozen=True)
class ReviewRecord:
    """A single review extracted from the storefront page.

    ``id`` stays 0 until the store persists the record.
    """

    author: str
    author_key: str
    title: str
    body: str
    rate: Rating
    updated_at: date
    id: int = 0


@dataclass(frozen=True)
class HarvestResult:
    """Summary of one harvesting run."""

    extracted: int
    new_reviews: list[ReviewRecord]
    notified: int
