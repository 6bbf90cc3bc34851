"""Core harvesting pipeline.

This module is integration-agnostic. It only relies on ports for fetching,
storage and notifications. One run is strictly sequential:
1) Fetch and parse the storefront page
2) Extract reviews, newest first
3) Persist the reviews not seen before
4) Notify a bounded batch of the new reviews
"""

from __future__ import annotations

import logging

from core.dedup import collect_new_reviews
from core.extractor import extract_reviews
from core.models import HarvestResult
from core.ports import FetcherPort, NotifierPort, ReviewStorePort
from core.rating import DEFAULT_LOCALE, LocaleProfile

LOGGER = logging.getLogger(__name__)


class ReviewHarvester:
    """Orchestrates fetching, extraction, dedup, persistence, and notifications."""

    def __init__(
        self,
        fetcher: FetcherPort,
        store: ReviewStorePort,
        notifier: NotifierPort,
        app_id: str,
        locale: LocaleProfile = DEFAULT_LOCALE,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._notifier = notifier
        self._app_id = app_id
        self._locale = locale

    def run(self) -> HarvestResult:
        """Run one pass; any pipeline error propagates to the caller."""

        document = self._fetcher.fetch(self._app_id)
        records = extract_reviews(document, self._locale)
        LOGGER.info("Extracted %s reviews for %s", len(records), self._app_id)

        new_reviews = collect_new_reviews(records, self._store)
        LOGGER.info("%s new reviews saved", len(new_reviews))

        # Reviews are already persisted here, so a failed delivery is never resent.
        notified = self._notifier.send(new_reviews)
        if notified:
            LOGGER.info("Notified %s reviews", notified)

        return HarvestResult(extracted=len(records), new_reviews=new_reviews, notified=notified)
