"""Deduplication against the review store (core domain)."""

from __future__ import annotations

import logging
from typing import Iterable, List

from core.models import ReviewRecord
from core.ports import ReviewStorePort

LOGGER = logging.getLogger(__name__)


def collect_new_reviews(records: Iterable[ReviewRecord], store: ReviewStorePort) -> List[ReviewRecord]:
    """Persist the reviews the store has not seen and return them in input order.

    The author key is the only identity: an edited review under a known
    permalink is skipped. A PersistenceError stops the batch; reviews inserted
    before it stay persisted.
    """

    new_reviews: List[ReviewRecord] = []
    for record in records:
        if store.exists(record.author_key):
            LOGGER.debug("Dedup skip for %s", record.author_key)
            continue
        new_reviews.append(store.insert(record))
    return new_reviews
