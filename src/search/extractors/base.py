"""
Base Extractor Module.

Defines the record extractor interface shared by every response shape.
"""

from abc import ABC, abstractmethod
from enum import Enum

from src.search.types import RawRecord

# Links that are never search results
EXCLUDED_HREF_PREFIXES = (
    "http://www.google.com/search?q=",
    "https://duckduckgo.com/y.js?ad_domain",
)


class ResponseShape(str, Enum):
    """Response body formats served by DuckDuckGo."""

    SCRIPT_JSON = "script_json"  # links.duckduckgo.com/d.js
    HTML_BLOCKS = "html_blocks"  # html.duckduckgo.com/html
    HTML_TABLE = "html_table"  # lite.duckduckgo.com/lite
    PLAIN_JSON = "plain_json"  # i.js, v.js, news.js


class RecordExtractor(ABC):
    """
    Base class for record extractors.

    Each extractor turns one page body into raw field mappings.
    Extractors hold no state between calls, so one instance can serve
    every page of every query.
    """

    shape: ResponseShape

    @abstractmethod
    def extract(self, body: bytes) -> list[RawRecord]:
        """
        Extract raw records from a page body.

        Args:
            body: Raw response body

        Returns:
            Records in page order (empty when the page has no results)

        Raises:
            ExtractionFailed: If the body is malformed
        """
        pass


def is_excluded_href(href: str) -> bool:
    """Check whether a link is a redirect or an ad rather than a result."""
    return href.startswith(EXCLUDED_HREF_PREFIXES)
