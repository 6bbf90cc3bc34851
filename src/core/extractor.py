"""Review extraction from a storefront details page (core domain).

Extraction is best-effort: a review whose date cannot be parsed, or which has
no permalink, is dropped and the rest of the batch is kept.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from core.errors import ExtractionFailed
from core.models import ReviewRecord
from core.ports import DocumentNode
from core.rating import DEFAULT_LOCALE, LocaleProfile, parse_rate

LOGGER = logging.getLogger(__name__)

REVIEW_SELECTOR = ".single-review"
AUTHOR_NAME_SELECTOR = ".review-header .review-info span.author-name"
REVIEW_LINK_SELECTOR = ".review-header .review-info .reviews-permalink"
REVIEW_DATE_SELECTOR = ".review-header .review-info .review-date"
REVIEW_TITLE_SELECTOR = ".review-body .review-title"
REVIEW_MESSAGE_SELECTOR = ".review-body"
REVIEW_RATE_SELECTOR = ".review-info-star-rating .tiny-star"


def _first(node: DocumentNode, selector: str) -> Optional[DocumentNode]:
    found = node.select(selector)
    return found[0] if found else None


def _text(node: DocumentNode, selector: str) -> str:
    found = _first(node, selector)
    return found.text().strip() if found is not None else ""


def _attr(node: DocumentNode, selector: str, name: str) -> Optional[str]:
    found = _first(node, selector)
    return found.attr(name) if found is not None else None


def parse_review_date(raw: str, locale: LocaleProfile = DEFAULT_LOCALE) -> Optional[date]:
    """Parse a localized review date, returning None when it does not match."""

    try:
        return datetime.strptime(raw.strip(), locale.date_format).date()
    except ValueError:
        return None


def _strip_title(body: str, title: str) -> str:
    # The body node wraps the title node, so its text starts with the title.
    if title and body.startswith(title):
        return body[len(title):].strip()
    return body


def _extract_one(node: DocumentNode, locale: LocaleProfile) -> Optional[ReviewRecord]:
    author_key = _attr(node, REVIEW_LINK_SELECTOR, "href")
    if not author_key:
        LOGGER.debug("Skipping review without permalink")
        return None

    raw_date = _text(node, REVIEW_DATE_SELECTOR)
    updated_at = parse_review_date(raw_date, locale)
    if updated_at is None:
        LOGGER.debug("Skipping review %s with unparsable date %r", author_key, raw_date)
        return None

    title = _text(node, REVIEW_TITLE_SELECTOR)
    body = _strip_title(_text(node, REVIEW_MESSAGE_SELECTOR), title)

    return ReviewRecord(
        author=_text(node, AUTHOR_NAME_SELECTOR),
        author_key=author_key,
        title=title,
        body=body,
        rate=parse_rate(_attr(node, REVIEW_RATE_SELECTOR, "aria-label"), locale),
        updated_at=updated_at,
    )


def extract_reviews(document: DocumentNode, locale: LocaleProfile = DEFAULT_LOCALE) -> List[ReviewRecord]:
    """Return the reviews of a details page, newest first.

    Reviews with the same date keep their document order.
    """

    try:
        nodes = document.select(REVIEW_SELECTOR)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ExtractionFailed(f"Document cannot be navigated: {exc}") from exc

    records: List[ReviewRecord] = []
    for node in nodes:
        record = _extract_one(node, locale)
        if record is not None:
            records.append(record)

    # sorted() is stable, including with reverse=True.
    return sorted(records, key=lambda record: record.updated_at, reverse=True)
