"""
Page fetcher using requests.

Runs blocking HTTP requests in a thread pool so that every page of a query
is fetched in parallel.
"""

import asyncio
import re
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from typing import Optional

import requests
from loguru import logger

from src.search.exceptions import TransportError

fetcher_log = logger.bind(module="PageFetcher")

# DuckDuckGo redirects throttled requests to pages like ".../506-00.js"
ERROR_PAGE_PATTERN = re.compile(r"(?:\d{3}-\d{2}\.js)")


@lru_cache(maxsize=1000)
def is_500_in_url(url: str) -> bool:
    """
    Check whether a response URL is a DuckDuckGo error page.

    Args:
        url: Final response URL

    Returns:
        True if the URL contains something like '506-00.js'
    """
    return bool(ERROR_PAGE_PATTERN.search(url))


class PageFetcher:
    """
    HTTP fetcher shared by every page task of a client.

    The session and executor carry no query state and are reused across
    calls.
    """

    DEFAULT_HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Referer": "https://duckduckgo.com/",
    }

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        proxies: dict[str, str] | None = None,
        timeout: float = 10.0,
        max_workers: int = 10,
    ):
        """
        Initialize the page fetcher.

        Args:
            headers: Extra headers merged over DEFAULT_HEADERS
            proxies: requests proxy mapping (e.g., {"https": "socks5://..."})
            timeout: Per-request timeout in seconds
            max_workers: Max concurrent requests
        """
        self._headers = {**self.DEFAULT_HEADERS, **(headers or {})}
        self._proxies = proxies
        self._timeout = timeout
        self._max_workers = max_workers
        self._session: Optional[requests.Session] = None
        self._executor: Optional[ThreadPoolExecutor] = None

    async def start(self) -> None:
        """Create session and executor."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self._headers)
            if self._proxies:
                self._session.proxies.update(self._proxies)
            self._executor = ThreadPoolExecutor(max_workers=self._max_workers)
            fetcher_log.info("PageFetcher started")

    async def close(self) -> None:
        """Close session and executor."""
        if self._session:
            self._session.close()
            self._session = None
        if self._executor:
            self._executor.shutdown(wait=False)
            self._executor = None
        fetcher_log.info("PageFetcher closed")

    def _request_sync(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None,
        data: bytes | None,
    ) -> bytes:
        """
        Perform one blocking request.

        Raises:
            TransportError: On network errors, timeouts, HTTP errors and
                            error-page redirects
        """
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                data=data,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if resp.status_code >= 400:
            raise TransportError(f"HTTP {resp.status_code} for {method} {url}")
        if is_500_in_url(str(resp.url)):
            raise TransportError(f"Redirected to error page {resp.url}")

        return resp.content

    async def fetch(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        data: bytes | None = None,
    ) -> bytes:
        """
        Fetch one URL and return the raw body.

        Args:
            method: HTTP method ("GET" or "POST")
            url: Target URL
            params: Query parameters
            data: Optional request body

        Returns:
            Response body

        Raises:
            TransportError: If the request fails
        """
        if self._session is None:
            await self.start()

        fetcher_log.debug(f"{method} {url} s={(params or {}).get('s', '-')}")

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor,
            self._request_sync,
            method,
            url,
            params,
            data,
        )
