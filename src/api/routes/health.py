"""Health check routes."""

from fastapi import APIRouter

from src.api.dependencies import DDGSClient

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(ddgs: DDGSClient) -> dict:
    """Health check endpoint."""
    return {"status": True, "client": type(ddgs).__name__}
