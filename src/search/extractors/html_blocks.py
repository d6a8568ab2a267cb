"""
HTML div-block extractor.

Parses html.duckduckgo.com result pages, where every result is a div holding
an h2 title link and a snippet link.
"""

from bs4 import BeautifulSoup

from src.search.extractors.base import (
    RecordExtractor,
    ResponseShape,
    is_excluded_href,
)
from src.search.types import RawRecord

NO_RESULTS_MARKER = b"No  results."


class HtmlBlockExtractor(RecordExtractor):
    """
    Extract results from `div` blocks that have a direct `h2` child.

    Each record carries the raw `title`, `href` and `body` of one block.
    """

    shape = ResponseShape.HTML_BLOCKS

    def extract(self, body: bytes) -> list[RawRecord]:
        if NO_RESULTS_MARKER in body:
            return []

        soup = BeautifulSoup(body, "html.parser")
        seen: set[str] = set()
        records: list[RawRecord] = []

        for block in soup.find_all("div"):
            heading = block.find("h2", recursive=False)
            if heading is None:
                continue

            link = block.find("a", href=True, recursive=False)
            if link is None:
                continue

            href = link.get("href", "")
            if not href or href in seen or is_excluded_href(href):
                continue
            seen.add(href)

            title_link = heading.find("a", recursive=False)
            records.append(
                {
                    "title": title_link.get_text() if title_link else "",
                    "href": href,
                    "body": "".join(
                        a.get_text() for a in block.find_all("a", recursive=False)
                    ),
                }
            )

        return records
