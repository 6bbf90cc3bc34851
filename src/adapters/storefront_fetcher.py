"""Storefront page fetcher.

A thin I/O boundary: one unauthenticated GET, then the markup is handed to
the HTML document adapter.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Optional

from adapters.html_document import SoupNode, parse_document
from core.config import BASE_URI
from core.errors import FetchFailed

LOGGER = logging.getLogger(__name__)

DETAILS_PATH = "/store/apps/details"


class StorefrontFetcher:
    """Fetch an application's details page from the storefront."""

    def __init__(
        self,
        base_url: str = BASE_URI,
        timeout: Optional[float] = None,
        language: Optional[str] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._language = language

    def details_url(self, app_id: str) -> str:
        query = {"id": app_id}
        if self._language:
            query["hl"] = self._language
        return f"{self._base_url}{DETAILS_PATH}?{urllib.parse.urlencode(query)}"

    def _get(self, app_id: str) -> bytes:
        url = self.details_url(app_id)
        kwargs = {} if self._timeout is None else {"timeout": self._timeout}
        LOGGER.debug("GET %s", url)
        try:
            with urllib.request.urlopen(url, **kwargs) as response:
                return response.read()
        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise FetchFailed(f"AppID: {app_id} does not exist") from e
            raise FetchFailed(f"Storefront error {e.code} for {app_id}") from e
        except (urllib.error.URLError, OSError) as e:
            raise FetchFailed(f"Storefront unreachable: {e}") from e

    def ensure_app_exists(self, app_id: str) -> None:
        """Raise FetchFailed when the storefront does not know the app."""

        self._get(app_id)

    def fetch(self, app_id: str) -> SoupNode:
        """Return the parsed details page of ``app_id``."""

        return parse_document(self._get(app_id))
