"""
Record extractors for DuckDuckGo responses.

One extractor per response shape, all behind RecordExtractor.extract().
"""

from src.search.exceptions import InvalidBackend
from src.search.extractors.base import (
    EXCLUDED_HREF_PREFIXES,
    RecordExtractor,
    ResponseShape,
    is_excluded_href,
)
from src.search.extractors.html_blocks import NO_RESULTS_MARKER, HtmlBlockExtractor
from src.search.extractors.html_table import NO_MORE_RESULTS_MARKER, HtmlTableExtractor
from src.search.extractors.plain_json import PlainJsonExtractor
from src.search.extractors.script_json import ScriptJsonExtractor

_EXTRACTORS: dict[ResponseShape, RecordExtractor] = {
    ResponseShape.SCRIPT_JSON: ScriptJsonExtractor(),
    ResponseShape.HTML_BLOCKS: HtmlBlockExtractor(),
    ResponseShape.HTML_TABLE: HtmlTableExtractor(),
    ResponseShape.PLAIN_JSON: PlainJsonExtractor(),
}


def get_extractor(shape: ResponseShape | str) -> RecordExtractor:
    """
    Get the extractor for a response shape.

    Args:
        shape: ResponseShape member or its value

    Returns:
        Shared RecordExtractor instance

    Raises:
        InvalidBackend: If the shape is unknown
    """
    try:
        return _EXTRACTORS[ResponseShape(shape)]
    except ValueError:
        raise InvalidBackend(str(shape)) from None


__all__ = [
    "RecordExtractor",
    "ResponseShape",
    "EXCLUDED_HREF_PREFIXES",
    "NO_RESULTS_MARKER",
    "NO_MORE_RESULTS_MARKER",
    "is_excluded_href",
    "get_extractor",
    "ScriptJsonExtractor",
    "HtmlBlockExtractor",
    "HtmlTableExtractor",
    "PlainJsonExtractor",
]
