"""
Script-embedded JSON extractor.

The text api endpoint (d.js) returns JavaScript that loads the results with
`DDG.pageLayout.load('d', [...]);DDG.duckbar.load(...)`.
"""

import json

from loguru import logger

from src.search.exceptions import ExtractionFailed
from src.search.extractors.base import RecordExtractor, ResponseShape
from src.search.types import RawRecord

extractor_log = logger.bind(module="ScriptJson")

PREFIX_MARKER = b"DDG.pageLayout.load('d',"
SUFFIX_MARKER = b");DDG.duckbar.load("


class ScriptJsonExtractor(RecordExtractor):
    """Extract the JSON array embedded between the page layout markers."""

    shape = ResponseShape.SCRIPT_JSON

    def extract(self, body: bytes) -> list[RawRecord]:
        start = body.find(PREFIX_MARKER)
        if start < 0:
            raise ExtractionFailed("Prefix marker not found")
        start += len(PREFIX_MARKER)

        end = body.find(SUFFIX_MARKER, start)
        if end < 0:
            raise ExtractionFailed("Suffix marker not found")

        try:
            rows = json.loads(body[start:end])
        except ValueError as e:
            raise ExtractionFailed(f"Invalid embedded JSON: {e}") from e

        if not isinstance(rows, list):
            raise ExtractionFailed("Embedded JSON is not an array")

        records = [row for row in rows if isinstance(row, dict)]
        extractor_log.debug(f"Extracted {len(records)} rows")
        return records
