"""DuckDuckGo search modules."""

from src.search.aggregator import (
    IMAGES_PLAN,
    NEWS_PLAN,
    TEXT_PLAN,
    VIDEOS_PLAN,
    Aggregator,
    OrderedResults,
    PageJob,
    PagePlan,
)
from src.search.ddgs import AsyncDDGS
from src.search.exceptions import (
    ExtractionFailed,
    InvalidBackend,
    MissingKeywords,
    SearchError,
    TokenNotFound,
    TransportError,
)
from src.search.models import SearchQuery
from src.search.page_fetcher import PageFetcher
from src.search.token import extract_vqd
from src.search.types import (
    AnswerResult,
    ImageResult,
    NewsResult,
    PageRequest,
    RawRecord,
    TextResult,
)

__all__ = [
    # Client
    "AsyncDDGS",
    "SearchQuery",
    # Engine
    "Aggregator",
    "OrderedResults",
    "PageJob",
    "PagePlan",
    "PageFetcher",
    "TEXT_PLAN",
    "IMAGES_PLAN",
    "VIDEOS_PLAN",
    "NEWS_PLAN",
    "extract_vqd",
    # Types
    "RawRecord",
    "PageRequest",
    "TextResult",
    "ImageResult",
    "NewsResult",
    "AnswerResult",
    # Errors
    "SearchError",
    "MissingKeywords",
    "TokenNotFound",
    "InvalidBackend",
    "TransportError",
    "ExtractionFailed",
]
