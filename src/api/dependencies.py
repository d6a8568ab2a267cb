"""
API Dependencies.

Shared search client for API routes.
"""

from typing import Annotated

from fastapi import Depends

from config.settings import get_settings
from src.search import AsyncDDGS

# Singleton instance
_ddgs: AsyncDDGS | None = None


def get_ddgs() -> AsyncDDGS:
    """
    Get or create the singleton search client.

    Returns:
        AsyncDDGS configured from settings
    """
    global _ddgs
    if _ddgs is None:
        settings = get_settings().search
        _ddgs = AsyncDDGS(
            headers={
                "User-Agent": settings.user_agent,
                "Accept-Language": settings.accept_language,
            },
            proxies=settings.proxies,
            timeout=settings.timeout,
            max_workers=settings.max_workers,
        )
    return _ddgs


async def close_ddgs() -> None:
    """Close and drop the singleton search client."""
    global _ddgs
    if _ddgs is not None:
        await _ddgs.close()
        _ddgs = None


# Type alias for dependency injection
DDGSClient = Annotated[AsyncDDGS, Depends(get_ddgs)]
