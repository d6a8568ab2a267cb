"""
HTML table-row extractor.

Parses lite.duckduckgo.com result pages. Results live in the last table of
the page as repeating row groups:

    row 0: result link and title
    row 1: td.result-snippet
    row 2: separator, closes the record
"""

from itertools import cycle

from bs4 import BeautifulSoup

from src.search.extractors.base import (
    RecordExtractor,
    ResponseShape,
    is_excluded_href,
)
from src.search.types import RawRecord

NO_MORE_RESULTS_MARKER = b"No more results."

ROWS_PER_RESULT = 3


class HtmlTableExtractor(RecordExtractor):
    """Extract results from the row groups of the last table."""

    shape = ResponseShape.HTML_TABLE

    def extract(self, body: bytes) -> list[RawRecord]:
        if NO_MORE_RESULTS_MARKER in body:
            return []

        soup = BeautifulSoup(body, "html.parser")
        tables = soup.find_all("table")
        if not tables:
            return []

        rows = zip(cycle(range(ROWS_PER_RESULT)), tables[-1].find_all("tr"))
        seen: set[str] = set()
        records: list[RawRecord] = []
        href = title = snippet = ""

        for position, row in rows:
            if position == 0:
                link = row.find("a", href=True)
                href = link.get("href", "") if link else ""
                if not href or href in seen or is_excluded_href(href):
                    # Skip the rest of this group
                    for _ in range(ROWS_PER_RESULT - 1):
                        next(rows, None)
                    continue
                seen.add(href)
                title = link.get_text()
                snippet = ""
            elif position == 1:
                cell = row.find("td", class_="result-snippet")
                snippet = "".join(cell.strings) if cell else ""
            else:
                records.append({"title": title, "href": href, "body": snippet})

        return records
