"""
Plain JSON extractor for images, videos and news.
"""

import json

from src.search.exceptions import ExtractionFailed
from src.search.extractors.base import RecordExtractor, ResponseShape
from src.search.types import RawRecord


class PlainJsonExtractor(RecordExtractor):
    """Read the `results` array of a JSON body."""

    shape = ResponseShape.PLAIN_JSON

    def extract(self, body: bytes) -> list[RawRecord]:
        try:
            data = json.loads(body)
        except ValueError as e:
            raise ExtractionFailed(f"Invalid JSON: {e}") from e

        rows = data.get("results") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise ExtractionFailed("No results array in response")

        return [row for row in rows if isinstance(row, dict)]
