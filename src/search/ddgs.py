"""
DuckDuckGo search client.

Builds request parameters for every result type and hands paginated ones
to the Aggregator.
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from src.search.aggregator import (
    IMAGES_PLAN,
    NEWS_PLAN,
    TEXT_PLAN,
    VIDEOS_PLAN,
    Aggregator,
    PageJob,
)
from src.search.exceptions import (
    ExtractionFailed,
    InvalidBackend,
    MissingKeywords,
    TransportError,
)
from src.search.extractors import ResponseShape, get_extractor
from src.search.models import SearchQuery
from src.search.page_fetcher import PageFetcher
from src.search.token import extract_vqd
from src.search.types import (
    AnswerResult,
    ImageResult,
    NewsResult,
    RawRecord,
    SuggestionResult,
    TextResult,
    TranslationResult,
    VideoResult,
)
from src.utils.normalize import normalize_text, normalize_url

ddgs_log = logger.bind(module="DDGS")

BASE_URL = "https://duckduckgo.com"
TEXT_API_URL = "https://links.duckduckgo.com/d.js"
TEXT_HTML_URL = "https://html.duckduckgo.com/html"
TEXT_LITE_URL = "https://lite.duckduckgo.com/lite/"
IMAGES_URL = "https://duckduckgo.com/i.js"
VIDEOS_URL = "https://duckduckgo.com/v.js"
NEWS_URL = "https://duckduckgo.com/news.js"
ANSWERS_URL = "https://api.duckduckgo.com/"
SUGGESTIONS_URL = "https://duckduckgo.com/ac"
TRANSLATE_URL = "https://duckduckgo.com/translation.js"

# Text backend -> response shape
TEXT_BACKENDS: dict[str, ResponseShape] = {
    "api": ResponseShape.SCRIPT_JSON,
    "html": ResponseShape.HTML_BLOCKS,
    "lite": ResponseShape.HTML_TABLE,
}

# html backend only needs a token past the first page
HTML_TOKEN_THRESHOLD = 20

# safesearch -> "p" value
SAFESEARCH_HTML = {"on": "1", "moderate": "-1", "off": "-2"}
SAFESEARCH_IMAGES = {"on": "1", "moderate": "1", "off": "-1"}
SAFESEARCH_VIDEOS = {"on": "1", "moderate": "-1", "off": "-2"}

# Facet name -> upstream filter name (output order matters)
IMAGE_FILTERS = {
    "timelimit": "time",
    "size": "size",
    "color": "color",
    "type_image": "type",
    "layout": "layout",
    "license_image": "license",
}
VIDEO_FILTERS = {
    "timelimit": "publishedAfter",
    "resolution": "videoDefinition",
    "duration": "videoDuration",
    "license_videos": "videoLicense",
}


def _require_keywords(keywords: str | None) -> str:
    """Raise MissingKeywords for empty keywords."""
    if not keywords:
        raise MissingKeywords()
    return keywords


def _facets(**values: str | None) -> dict[str, str]:
    """Keep only facets that were set."""
    return {name: value for name, value in values.items() if value}


class AsyncDDGS:
    """
    DuckDuckGo search client.

    All search methods are coroutines. Paginated ones (text, images, videos,
    news) fetch their pages concurrently and never fail because of a single
    page.
    """

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        proxies: dict[str, str] | None = None,
        timeout: float = 10.0,
        max_workers: int = 10,
        fetcher: PageFetcher | None = None,
    ):
        """
        Initialize the client.

        Args:
            headers: Extra request headers
            proxies: requests proxy mapping
            timeout: Per-request timeout in seconds
            max_workers: Max concurrent page requests
            fetcher: Custom page fetcher (overrides the arguments above)
        """
        self._fetcher = fetcher or PageFetcher(
            headers=headers,
            proxies=proxies,
            timeout=timeout,
            max_workers=max_workers,
        )
        self._aggregator = Aggregator(self._fetcher)

    async def start(self) -> None:
        """Start the underlying fetcher."""
        await self._fetcher.start()

    async def close(self) -> None:
        """Close the underlying fetcher."""
        await self._fetcher.close()

    async def __aenter__(self) -> "AsyncDDGS":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_vqd(self, keywords: str) -> str:
        """
        Fetch the vqd token for keywords.

        Raises:
            TokenNotFound: If the response carries no token
            TransportError: If the request fails
        """
        body = await self._fetcher.fetch("POST", BASE_URL, params={"q": keywords})
        vqd = extract_vqd(body, keywords)
        ddgs_log.debug(f"Got vqd for '{keywords}'")
        return vqd

    # ============================================================
    # Text
    # ============================================================

    async def text(
        self,
        keywords: str,
        region: str = "wt-wt",
        safesearch: str = "moderate",
        timelimit: str | None = None,
        backend: str = "api",
        max_results: int | None = None,
    ) -> list[TextResult]:
        """
        DuckDuckGo text search.

        Args:
            keywords: Search query
            region: wt-wt, us-en, uk-en, ru-ru, etc.
            safesearch: on, moderate, off
            timelimit: d, w, m, y
            backend: api (d.js), html (html.duckduckgo.com),
                     lite (lite.duckduckgo.com)
            max_results: Max results (None: first page only)

        Returns:
            List of {title, href, body}

        Raises:
            MissingKeywords: If keywords is empty
            InvalidBackend: If backend is not api, html or lite
            TokenNotFound: If the token cannot be obtained
        """
        _require_keywords(keywords)
        shape = TEXT_BACKENDS.get(backend or "api")
        if shape is None:
            raise InvalidBackend(backend)

        query = SearchQuery(
            keywords=keywords,
            region=region,
            safesearch=safesearch,
            timelimit=timelimit,
            max_results=max_results,
        )

        if shape is ResponseShape.SCRIPT_JSON:
            job = await self._text_api_job(query)
        elif shape is ResponseShape.HTML_BLOCKS:
            job = await self._text_html_job(query)
        else:
            job = self._text_lite_job(query)

        return await self._aggregator.collect(job, query.max_results)

    async def _text_api_job(self, query: SearchQuery) -> PageJob:
        vqd = await self._get_vqd(query.keywords)
        payload = {
            "q": query.keywords,
            "kl": query.region,
            "l": query.region,
            "bing_market": query.region,
            "a": "ftsa",
            "vqd": vqd,
        }
        if query.safesearch == "moderate":
            payload["ex"] = "-1"
        elif query.safesearch == "off":
            payload["ex"] = "-2"
        elif query.safesearch == "on":  # strict
            payload["p"] = "1"
        if query.timelimit:
            payload["df"] = query.timelimit

        self_link = f"http://www.google.com/search?q={query.keywords}"

        def build_result(row: RawRecord) -> TextResult | None:
            href = row.get("u")
            if not isinstance(href, str) or not href or href == self_link:
                return None
            body = normalize_text(row.get("a"))
            if not body:
                return None
            return {
                "title": normalize_text(row.get("t")),
                "href": normalize_url(href),
                "body": body,
            }

        return PageJob(
            method="GET",
            url=TEXT_API_URL,
            payload=payload,
            extractor=get_extractor(ResponseShape.SCRIPT_JSON),
            build_result=build_result,
            identity_key="href",
            plan=TEXT_PLAN,
        )

    async def _text_html_job(self, query: SearchQuery) -> PageJob:
        payload = {
            "q": query.keywords,
            "kl": query.region,
            "p": SAFESEARCH_HTML[query.safesearch],
            "o": "json",
            "api": "d.js",
        }
        if query.timelimit:
            payload["df"] = query.timelimit
        if query.max_results and query.max_results > HTML_TOKEN_THRESHOLD:
            payload["vqd"] = await self._get_vqd(query.keywords)

        return PageJob(
            method="POST",
            url=TEXT_HTML_URL,
            payload=payload,
            extractor=get_extractor(ResponseShape.HTML_BLOCKS),
            build_result=_text_result_from_html,
            identity_key="href",
            plan=TEXT_PLAN,
        )

    def _text_lite_job(self, query: SearchQuery) -> PageJob:
        payload = {
            "q": query.keywords,
            "kl": query.region,
            "o": "json",
            "api": "d.js",
        }
        if query.timelimit:
            payload["df"] = query.timelimit

        return PageJob(
            method="POST",
            url=TEXT_LITE_URL,
            payload=payload,
            extractor=get_extractor(ResponseShape.HTML_TABLE),
            build_result=_text_result_from_html,
            identity_key="href",
            plan=TEXT_PLAN,
        )

    # ============================================================
    # Images / Videos / News
    # ============================================================

    async def images(
        self,
        keywords: str,
        region: str = "wt-wt",
        safesearch: str = "moderate",
        timelimit: str | None = None,
        size: str | None = None,
        color: str | None = None,
        type_image: str | None = None,
        layout: str | None = None,
        license_image: str | None = None,
        max_results: int | None = None,
    ) -> list[ImageResult]:
        """
        DuckDuckGo image search.

        Args:
            keywords: Search query
            region: wt-wt, us-en, uk-en, ru-ru, etc.
            safesearch: on, moderate, off
            timelimit: Day, Week, Month, Year
            size: Small, Medium, Large, Wallpaper
            color: color, Monochrome, Red, Orange, Yellow, Green, Blue,
                   Purple, Pink, Brown, Black, Gray, Teal, White
            type_image: photo, clipart, gif, transparent, line
            layout: Square, Tall, Wide
            license_image: any, Public, Share, ShareCommercially, Modify,
                           ModifyCommercially
            max_results: Max results (None: first page only)

        Returns:
            List of {title, image, thumbnail, url, height, width, source}
        """
        _require_keywords(keywords)
        query = SearchQuery(
            keywords=keywords,
            region=region,
            safesearch=safesearch,
            timelimit=timelimit,
            facets=_facets(
                size=size,
                color=color,
                type_image=type_image,
                layout=layout,
                license_image=license_image,
            ),
            max_results=max_results,
        )
        vqd = await self._get_vqd(query.keywords)

        payload = {
            "l": query.region,
            "o": "json",
            "q": query.keywords,
            "vqd": vqd,
            "p": SAFESEARCH_IMAGES[query.safesearch],
        }
        filters = query.facet_filter(IMAGE_FILTERS)
        if filters:
            payload["f"] = filters

        job = PageJob(
            method="GET",
            url=IMAGES_URL,
            payload=payload,
            extractor=get_extractor(ResponseShape.PLAIN_JSON),
            build_result=_image_result,
            identity_key="image",
            plan=IMAGES_PLAN,
        )
        return await self._aggregator.collect(job, query.max_results)

    async def videos(
        self,
        keywords: str,
        region: str = "wt-wt",
        safesearch: str = "moderate",
        timelimit: str | None = None,
        resolution: str | None = None,
        duration: str | None = None,
        license_videos: str | None = None,
        max_results: int | None = None,
    ) -> list[VideoResult]:
        """
        DuckDuckGo video search.

        Args:
            keywords: Search query
            region: wt-wt, us-en, uk-en, ru-ru, etc.
            safesearch: on, moderate, off
            timelimit: d, w, m
            resolution: high, standart
            duration: short, medium, long
            license_videos: creativeCommon, youtube
            max_results: Max results (None: first page only)

        Returns:
            List of upstream video rows, unique by "content"
        """
        _require_keywords(keywords)
        query = SearchQuery(
            keywords=keywords,
            region=region,
            safesearch=safesearch,
            timelimit=timelimit,
            facets=_facets(
                resolution=resolution,
                duration=duration,
                license_videos=license_videos,
            ),
            max_results=max_results,
        )
        vqd = await self._get_vqd(query.keywords)

        payload = {
            "l": query.region,
            "o": "json",
            "q": query.keywords,
            "vqd": vqd,
            "p": SAFESEARCH_VIDEOS[query.safesearch],
        }
        filters = query.facet_filter(VIDEO_FILTERS)
        if filters:
            payload["f"] = filters

        job = PageJob(
            method="GET",
            url=VIDEOS_URL,
            payload=payload,
            extractor=get_extractor(ResponseShape.PLAIN_JSON),
            build_result=_video_result,
            identity_key="content",
            plan=VIDEOS_PLAN,
        )
        return await self._aggregator.collect(job, query.max_results)

    async def news(
        self,
        keywords: str,
        region: str = "wt-wt",
        safesearch: str = "moderate",
        timelimit: str | None = None,
        max_results: int | None = None,
    ) -> list[NewsResult]:
        """
        DuckDuckGo news search.

        Args:
            keywords: Search query
            region: wt-wt, us-en, uk-en, ru-ru, etc.
            safesearch: on, moderate, off
            timelimit: d, w, m
            max_results: Max results (None: first page only)

        Returns:
            List of {date, title, body, url, image, source}
        """
        _require_keywords(keywords)
        query = SearchQuery(
            keywords=keywords,
            region=region,
            safesearch=safesearch,
            timelimit=timelimit,
            max_results=max_results,
        )
        vqd = await self._get_vqd(query.keywords)

        payload = {
            "l": query.region,
            "o": "json",
            "noamp": "1",
            "q": query.keywords,
            "vqd": vqd,
            "p": SAFESEARCH_VIDEOS[query.safesearch],
        }
        if query.timelimit:
            payload["df"] = query.timelimit

        job = PageJob(
            method="GET",
            url=NEWS_URL,
            payload=payload,
            extractor=get_extractor(ResponseShape.PLAIN_JSON),
            build_result=_news_result,
            identity_key="url",
            plan=NEWS_PLAN,
        )
        return await self._aggregator.collect(job, query.max_results)

    # ============================================================
    # Answers / Suggestions / Translate
    # ============================================================

    async def _get_json(self, url: str, params: dict[str, str]) -> Any:
        body = await self._fetcher.fetch("GET", url, params=params)
        try:
            return json.loads(body)
        except ValueError as e:
            raise ExtractionFailed(f"Invalid JSON from {url}: {e}") from e

    async def answers(self, keywords: str) -> list[AnswerResult]:
        """
        DuckDuckGo instant answers.

        Args:
            keywords: Search query

        Returns:
            Abstract answer (if any) followed by related topics
        """
        _require_keywords(keywords)

        payload = {"format": "json", "q": f"what is {keywords}"}
        data = await self._get_json(ANSWERS_URL, payload)

        results: list[AnswerResult] = []
        answer = data.get("AbstractText") if isinstance(data, dict) else None
        if answer:
            results.append(
                {
                    "icon": "",
                    "text": answer,
                    "topic": "",
                    "url": data.get("AbstractURL", ""),
                }
            )

        data = await self._get_json(ANSWERS_URL, {**payload, "q": keywords})
        related = data.get("RelatedTopics", []) if isinstance(data, dict) else []

        for row in related:
            if not isinstance(row, dict):
                continue
            topic = row.get("Name")
            if not topic:
                results.append(_answer_from_topic(row, ""))
                continue
            for sub_row in row.get("Topics", []):
                if isinstance(sub_row, dict):
                    results.append(_answer_from_topic(sub_row, topic))

        ddgs_log.info(f"answers '{keywords}': {len(results)} results")
        return results

    async def suggestions(self, keywords: str, region: str = "wt-wt") -> list[SuggestionResult]:
        """
        DuckDuckGo search suggestions.

        Args:
            keywords: Partial query
            region: wt-wt, us-en, uk-en, ru-ru, etc.

        Returns:
            List of suggestion objects (e.g., {"phrase": "python tutorial"})
        """
        _require_keywords(keywords)
        data = await self._get_json(
            SUGGESTIONS_URL, {"q": keywords, "kl": region or "wt-wt"}
        )
        if not isinstance(data, list):
            raise ExtractionFailed("Suggestions response is not an array")
        return [row for row in data if isinstance(row, dict)]

    async def translate(
        self,
        keywords: str | list[str],
        from_: str | None = None,
        to: str = "en",
    ) -> list[TranslationResult]:
        """
        DuckDuckGo translation.

        Args:
            keywords: Text or list of texts to translate
            from_: Source language (None: detect)
            to: Target language (e.g., en, de, fr, ja, ko, zh-Hans, zh-Hant)

        Returns:
            List of {original: translated}, in input order. Texts that fail
            to translate are left out.
        """
        if isinstance(keywords, str):
            keywords = [keywords]
        if not keywords or not any(keywords):
            raise MissingKeywords()

        vqd = await self._get_vqd("translate")
        payload = {"vqd": vqd, "query": "translate", "to": to or "en"}
        if from_:
            payload["from"] = from_

        async def translate_one(text: str) -> TranslationResult | None:
            try:
                body = await self._fetcher.fetch(
                    "POST", TRANSLATE_URL, params=payload, data=text.encode("utf-8")
                )
                data = json.loads(body)
            except (TransportError, ValueError) as e:
                ddgs_log.warning(f"Translation failed for '{text}': {e}")
                return None
            translated = data.get("translated") if isinstance(data, dict) else None
            if not translated:
                return None
            return {text: translated}

        outcomes = await asyncio.gather(*(translate_one(k) for k in keywords if k))
        return [outcome for outcome in outcomes if outcome]


def _text_result_from_html(row: RawRecord) -> TextResult | None:
    """Normalize a record from the html or lite backend."""
    href = row.get("href")
    if not href:
        return None
    return {
        "title": normalize_text(row.get("title")),
        "href": normalize_url(href),
        "body": normalize_text(row.get("body")),
    }


def _image_result(row: RawRecord) -> ImageResult | None:
    image = row.get("image")
    if not isinstance(image, str) or not image:
        return None
    return {
        "title": normalize_text(row.get("title")),
        "image": normalize_url(image),
        "thumbnail": normalize_url(row.get("thumbnail")),
        "url": normalize_url(row.get("url")),
        "height": str(row.get("height", "")),
        "width": str(row.get("width", "")),
        "source": row.get("source", ""),
    }


def _video_result(row: RawRecord) -> VideoResult | None:
    content = row.get("content")
    if not isinstance(content, str) or not content:
        return None
    return row


def _news_result(row: RawRecord) -> NewsResult | None:
    url = row.get("url")
    if not isinstance(url, str) or not url:
        return None

    date = row.get("date")
    if isinstance(date, (int, float)):
        date = datetime.fromtimestamp(date, timezone.utc).isoformat()

    return {
        "date": date or "",
        "title": normalize_text(row.get("title")),
        "body": normalize_text(row.get("excerpt")),
        "url": normalize_url(url),
        "image": normalize_url(row.get("image")),
        "source": row.get("source", ""),
    }


def _answer_from_topic(row: dict, topic: str) -> AnswerResult:
    icon = row.get("Icon") or {}
    icon_url = icon.get("URL", "") if isinstance(icon, dict) else ""
    return {
        "icon": f"{BASE_URL}{icon_url}" if icon_url else "",
        "text": row.get("Text", ""),
        "topic": topic,
        "url": row.get("FirstURL", ""),
    }
