"""Search routes."""

from typing import Annotated

from fastapi import APIRouter, Query
from loguru import logger
from pydantic import BaseModel, Field

from src.api.dependencies import DDGSClient
from src.search.models import SafeSearch

search_log = logger.bind(module="SearchAPI")

router = APIRouter(prefix="/search", tags=["Search"])

Keywords = Annotated[str, Query(alias="q", description="Search keywords")]
MaxResults = Annotated[int | None, Query(ge=0, description="Max results (omit: first page)")]


class TranslateRequest(BaseModel):
    """Translation request body."""

    keywords: list[str] = Field(min_length=1)
    from_: str | None = Field(default=None, alias="from")
    to: str = "en"


def _response(results: list) -> dict:
    return {"success": True, "count": len(results), "results": results}


@router.get("/text")
async def search_text(
    ddgs: DDGSClient,
    keywords: Keywords = "",
    region: str = "wt-wt",
    safesearch: SafeSearch = "moderate",
    timelimit: str | None = None,
    backend: str = "api",
    max_results: MaxResults = None,
) -> dict:
    """Web text search."""
    search_log.info(f"text q='{keywords}' backend={backend} max={max_results}")
    results = await ddgs.text(
        keywords,
        region=region,
        safesearch=safesearch,
        timelimit=timelimit,
        backend=backend,
        max_results=max_results,
    )
    return _response(results)


@router.get("/images")
async def search_images(
    ddgs: DDGSClient,
    keywords: Keywords = "",
    region: str = "wt-wt",
    safesearch: SafeSearch = "moderate",
    timelimit: str | None = None,
    size: str | None = None,
    color: str | None = None,
    type_image: str | None = None,
    layout: str | None = None,
    license_image: str | None = None,
    max_results: MaxResults = None,
) -> dict:
    """Image search."""
    results = await ddgs.images(
        keywords,
        region=region,
        safesearch=safesearch,
        timelimit=timelimit,
        size=size,
        color=color,
        type_image=type_image,
        layout=layout,
        license_image=license_image,
        max_results=max_results,
    )
    return _response(results)


@router.get("/videos")
async def search_videos(
    ddgs: DDGSClient,
    keywords: Keywords = "",
    region: str = "wt-wt",
    safesearch: SafeSearch = "moderate",
    timelimit: str | None = None,
    resolution: str | None = None,
    duration: str | None = None,
    license_videos: str | None = None,
    max_results: MaxResults = None,
) -> dict:
    """Video search."""
    results = await ddgs.videos(
        keywords,
        region=region,
        safesearch=safesearch,
        timelimit=timelimit,
        resolution=resolution,
        duration=duration,
        license_videos=license_videos,
        max_results=max_results,
    )
    return _response(results)


@router.get("/news")
async def search_news(
    ddgs: DDGSClient,
    keywords: Keywords = "",
    region: str = "wt-wt",
    safesearch: SafeSearch = "moderate",
    timelimit: str | None = None,
    max_results: MaxResults = None,
) -> dict:
    """News search."""
    results = await ddgs.news(
        keywords,
        region=region,
        safesearch=safesearch,
        timelimit=timelimit,
        max_results=max_results,
    )
    return _response(results)


@router.get("/answers")
async def search_answers(ddgs: DDGSClient, keywords: Keywords = "") -> dict:
    """Instant answers."""
    return _response(await ddgs.answers(keywords))


@router.get("/suggestions")
async def search_suggestions(
    ddgs: DDGSClient,
    keywords: Keywords = "",
    region: str = "wt-wt",
) -> dict:
    """Query suggestions."""
    return _response(await ddgs.suggestions(keywords, region=region))


@router.post("/translate")
async def translate(data: TranslateRequest, ddgs: DDGSClient) -> dict:
    """Translate one or more texts."""
    results = await ddgs.translate(data.keywords, from_=data.from_, to=data.to)
    return _response(results)
