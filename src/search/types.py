"""
Record and result type definitions for the DuckDuckGo client.

RawRecord is whatever an extractor pulled out of a page body, untouched.
The TypedDicts below are the normalized results returned to callers.
"""

from typing import Any, NamedTuple, TypedDict

RawRecord = dict[str, Any]


class PageRequest(NamedTuple):
    """
    One page of a paginated query.

    Attributes:
        offset: Value sent as the `s` parameter
        page_index: 0 for the seed page, 1..N for fan-out pages
    """

    offset: int
    page_index: int


class TextResult(TypedDict):
    """
    Web text result.

    Attributes:
        title: Result title
        href: Result link (identity key)
        body: Snippet text
    """

    title: str
    href: str
    body: str


class ImageResult(TypedDict):
    """
    Image result.

    Attributes:
        title: Image title
        image: Full-size image URL (identity key)
        thumbnail: Thumbnail URL
        url: Page the image was found on
        height: Height in pixels, as text
        width: Width in pixels, as text
        source: Upstream index (e.g., "Bing")
    """

    title: str
    image: str
    thumbnail: str
    url: str
    height: str
    width: str
    source: str


class NewsResult(TypedDict):
    """
    News result.

    Attributes:
        date: Publication time, ISO 8601 UTC
        title: Headline
        body: Excerpt text
        url: Article URL (identity key)
        image: Article image URL, may be empty
        source: Publisher
    """

    date: str
    title: str
    body: str
    url: str
    image: str
    source: str


class AnswerResult(TypedDict):
    """Instant answer entry."""

    icon: str
    text: str
    topic: str
    url: str


# Videos are returned as the upstream row (identity key: "content")
VideoResult = dict[str, Any]

# Suggestions are returned as the upstream objects (e.g., {"phrase": "..."})
SuggestionResult = dict[str, str]

# {original text: translated text}
TranslationResult = dict[str, str]
