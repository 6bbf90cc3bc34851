"""BeautifulSoup document adapter.

Implements the core DocumentNode port so the extractor never touches bs4.
"""

from __future__ import annotations

from typing import List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from core.errors import ExtractionFailed


class SoupNode:
    """DocumentNode backed by a BeautifulSoup tag (or the soup itself)."""

    def __init__(self, tag: Union[BeautifulSoup, Tag]) -> None:
        self._tag = tag

    def select(self, selector: str) -> List["SoupNode"]:
        return [SoupNode(found) for found in self._tag.select(selector)]

    def text(self) -> str:
        # Child strings are joined without a separator.
        return self._tag.get_text().strip()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            # Multi-valued attributes such as class come back as lists.
            return " ".join(value)
        return value


def parse_document(markup: Union[str, bytes]) -> SoupNode:
    """Parse fetched markup into a navigable document."""

    if not isinstance(markup, (str, bytes)):
        raise ExtractionFailed(f"Expected markup text, got {type(markup).__name__}")
    try:
        soup = BeautifulSoup(markup, "html.parser")
    except Exception as exc:
        raise ExtractionFailed(f"Markup could not be parsed: {exc}") from exc
    if soup.find() is None:
        raise ExtractionFailed("Document contains no elements")
    return SoupNode(soup)
