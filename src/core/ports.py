"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for document, storage, fetch and
notification adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from core.models import ReviewRecord


class DocumentNode(Protocol):
    """A navigable node of parsed markup (the whole document or a sub-tree)."""

    def select(self, selector: str) -> Sequence["DocumentNode"]:
        ...

    def text(self) -> str:
        ...

    def attr(self, name: str) -> Optional[str]:
        ...


class ReviewStorePort(Protocol):
    """Storage operations required by the deduplicator."""

    def exists(self, author_key: str) -> bool:
        ...

    def next_id(self) -> int:
        ...

    def insert(self, record: ReviewRecord) -> ReviewRecord:
        ...


class FetcherPort(Protocol):
    """Retrieves the storefront page of an application as a document."""

    def fetch(self, app_id: str) -> DocumentNode:
        ...


class NotifierPort(Protocol):
    """Delivers a batch of new reviews and returns how many were sent."""

    def send(self, records: Sequence[ReviewRecord]) -> int:
        ...
