"""Slack webhook payload formatting.

Keeping formatting here keeps the rating glyphs and field layout out of the
core model and the delivery adapter.
"""

from __future__ import annotations

from typing import Any, Sequence

from core.config import BASE_URI, NotificationConfig
from core.models import ReviewRecord
from core.rating import render_rating

DATE_FORMAT = "%Y-%m-%d"


def review_url(record: ReviewRecord, base_url: str = BASE_URI) -> str:
    """Return the full storefront link of a review."""

    return f"{base_url.rstrip('/')}{record.author_key}"


def build_attachment(record: ReviewRecord, base_url: str = BASE_URI) -> dict[str, Any]:
    """Render one review as a Slack attachment."""

    return {
        "title": record.title,
        "title_link": review_url(record, base_url),
        "text": record.body,
        "fallback": f"{record.title} {record.author_key}",
        "fields": [
            {"title": "Rating", "value": render_rating(record.rate), "short": True},
            {"title": "UpdatedAt", "value": record.updated_at.strftime(DATE_FORMAT), "short": True},
        ],
    }


def build_payload(
    records: Sequence[ReviewRecord],
    config: NotificationConfig,
    base_url: str = BASE_URI,
) -> dict[str, Any]:
    """Return the webhook payload for the newest ``review_count`` records.

    Records are expected newest first, as returned by the deduplicator.
    """

    batch = list(records)[: config.review_count]
    return {
        "text": config.message_text,
        "username": config.bot_name,
        "icon_emoji": config.icon_emoji,
        "attachments": [build_attachment(record, base_url) for record in batch],
    }
