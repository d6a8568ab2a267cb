"""
Concurrent multi-page aggregator.

Fans one query out to a seed page plus N offset pages, runs every page
(fetch -> extract -> normalize) as its own task, and assembles the records
into one ordered, deduplicated, length-bounded list.

Ordering: every page owns its own band of slots `(page_index, position)`,
so the output is ordered by page index, then by discovery order within the
page, whatever order the pages complete in.

Dedup: when two pages share an identity key, the lower page index wins.
A lower page that commits after a higher one takes the key back, so the
result does not depend on completion order.
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable

from loguru import logger

from src.search.exceptions import ExtractionFailed, TransportError
from src.search.extractors import RecordExtractor
from src.search.page_fetcher import PageFetcher
from src.search.types import PageRequest, RawRecord

aggregator_log = logger.bind(module="Aggregator")

Slot = tuple[int, int]


@dataclass(frozen=True)
class PagePlan:
    """
    Pagination layout of one endpoint.

    Attributes:
        start: Offset of the first fan-out page
        step: Offset increment between fan-out pages
        ceiling: Upper bound for max_results
    """

    start: int
    step: int
    ceiling: int

    def clamp(self, max_results: int | None) -> int:
        """Clamp max_results to the ceiling (0 when not requested)."""
        if not max_results or max_results <= 0:
            return 0
        return min(max_results, self.ceiling)

    def page_requests(self, max_results: int | None) -> list[PageRequest]:
        """
        Compute the pages to request.

        Args:
            max_results: Requested result count (<= 0 or None: seed page only)

        Returns:
            Seed page followed by fan-out pages, in page index order

        Examples:
            >>> PagePlan(start=23, step=50, ceiling=500).page_requests(100)
            [PageRequest(offset=0, page_index=0), PageRequest(offset=23, page_index=1), PageRequest(offset=73, page_index=2)]
        """
        pages = [PageRequest(offset=0, page_index=0)]
        limit = self.clamp(max_results)
        for page_index, offset in enumerate(range(self.start, limit, self.step), start=1):
            pages.append(PageRequest(offset=offset, page_index=page_index))
        return pages


# Pagination layouts per endpoint
TEXT_PLAN = PagePlan(start=23, step=50, ceiling=500)
IMAGES_PLAN = PagePlan(start=100, step=100, ceiling=500)
VIDEOS_PLAN = PagePlan(start=59, step=59, ceiling=400)
NEWS_PLAN = PagePlan(start=59, step=59, ceiling=400)


@dataclass
class PageJob:
    """
    Everything a page task needs, shared by all pages of one call.

    Attributes:
        method: HTTP method
        url: Endpoint URL
        payload: Query parameters shared by all pages (token, filters)
        extractor: Extractor for the endpoint's response shape
        build_result: Turns a RawRecord into a Result, or None to skip it
        identity_key: Result field used for deduplication
        plan: Pagination layout
        offset_param: Query parameter carrying the page offset
    """

    method: str
    url: str
    payload: dict[str, str]
    extractor: RecordExtractor
    build_result: Callable[[RawRecord], dict[str, Any] | None]
    identity_key: str
    plan: PagePlan
    offset_param: str = "s"

    def params_for(self, request: PageRequest) -> dict[str, str]:
        """Build the query parameters of one page."""
        return {**self.payload, self.offset_param: str(request.offset)}


class OrderedResults:
    """
    Shared dedup set and ordered storage for one call.

    A single lock covers the membership check and the slot write.
    """

    def __init__(self) -> None:
        self._slots: dict[Slot, dict[str, Any]] = {}
        self._owners: dict[str, Slot] = {}
        self._next_position: dict[int, int] = defaultdict(int)
        self._lock = asyncio.Lock()

    async def commit(
        self,
        page_index: int,
        results: list[dict[str, Any]],
        identity_key: str,
    ) -> int:
        """
        Write one page's results into its slot band.

        Args:
            page_index: Page the results came from
            results: Normalized results in discovery order
            identity_key: Field used for deduplication

        Returns:
            Number of results that took a slot
        """
        accepted = 0
        async with self._lock:
            for result in results:
                key = result.get(identity_key)
                if not key:
                    continue

                owner = self._owners.get(key)
                if owner is not None:
                    if owner[0] <= page_index:
                        continue
                    # Lower page index wins
                    del self._slots[owner]

                slot = (page_index, self._next_position[page_index])
                self._next_position[page_index] += 1
                self._owners[key] = slot
                self._slots[slot] = result
                accepted += 1

        return accepted

    def compact(self, limit: int = 0) -> list[dict[str, Any]]:
        """
        Return results in slot order, truncated to limit (0: no limit).
        """
        ordered = [self._slots[slot] for slot in sorted(self._slots)]
        if limit > 0:
            return ordered[:limit]
        return ordered

    def __len__(self) -> int:
        return len(self._slots)


class Aggregator:
    """Fan-out/fan-in engine for paginated endpoints."""

    def __init__(self, fetcher: PageFetcher):
        """
        Initialize the aggregator.

        Args:
            fetcher: Shared page fetcher
        """
        self._fetcher = fetcher

    async def _run_page(
        self,
        job: PageJob,
        request: PageRequest,
        store: OrderedResults,
    ) -> int:
        """
        Fetch, extract, normalize and commit one page.

        Page failures are logged and the page contributes nothing.

        Returns:
            Number of results committed
        """
        try:
            body = await self._fetcher.fetch(
                job.method, job.url, params=job.params_for(request)
            )
            records = job.extractor.extract(body)
        except (TransportError, ExtractionFailed) as e:
            aggregator_log.warning(
                f"Page {request.page_index} (s={request.offset}) dropped: {e}"
            )
            return 0

        results = []
        for record in records:
            result = job.build_result(record)
            if result is not None:
                results.append(result)

        accepted = await store.commit(request.page_index, results, job.identity_key)
        aggregator_log.debug(
            f"Page {request.page_index} (s={request.offset}): "
            f"{len(records)} records, {accepted} kept"
        )
        return accepted

    async def collect(
        self,
        job: PageJob,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch all pages of a query concurrently and assemble the results.

        Args:
            job: Page job shared by all pages
            max_results: Requested result count (None or <= 0: seed page only)

        Returns:
            Ordered, deduplicated results, at most clamp(max_results) long
        """
        pages = job.plan.page_requests(max_results)
        store = OrderedResults()

        tasks = [self._run_page(job, request, store) for request in pages]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        for request, outcome in zip(pages, outcomes):
            if isinstance(outcome, Exception):
                aggregator_log.error(
                    f"Page {request.page_index} (s={request.offset}) failed: {outcome}"
                )

        results = store.compact(job.plan.clamp(max_results))
        aggregator_log.info(
            f"{job.url}: {len(results)} results from {len(pages)} pages"
        )
        return results
