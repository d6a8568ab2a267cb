"""
Search errors.

Call-level errors (MissingKeywords, TokenNotFound, InvalidBackend) reach the
caller. Page-level errors (TransportError, ExtractionFailed) are absorbed by
the aggregator and only cost that page its records.
"""


class SearchError(Exception):
    """Base class for all search errors."""


class MissingKeywords(SearchError):
    """No keywords were supplied; no request was issued."""

    def __init__(self) -> None:
        super().__init__("Keywords is mandatory")


class TokenNotFound(SearchError):
    """The vqd token could not be found in the seed response."""

    def __init__(self, keywords: str):
        self.keywords = keywords
        super().__init__(f"Could not extract vqd. keywords={keywords}")


class InvalidBackend(SearchError):
    """Unsupported text backend or response shape."""

    def __init__(self, backend: str):
        self.backend = backend
        super().__init__(f"Invalid backend: {backend}")


class TransportError(SearchError):
    """HTTP request failed, timed out, or was redirected to an error page."""


class ExtractionFailed(SearchError):
    """A page body could not be parsed into records."""
