"""Error taxonomy shared by the core and adapters."""

from __future__ import annotations


class PlayReviewError(Exception):
    """Base class for every failure that aborts a run."""


class ConfigError(PlayReviewError):
    """Configuration file is missing or invalid."""


class FetchFailed(PlayReviewError):
    """The storefront page could not be retrieved (including 404)."""


class ExtractionFailed(PlayReviewError):
    """The fetched document could not be navigated at all."""


class PersistenceError(PlayReviewError):
    """The review store failed to read or write."""


class DeliveryFailed(PlayReviewError):
    """The webhook call failed or returned a non-success status."""
