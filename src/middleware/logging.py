"""
Request Logging Middleware.

Logs every search request with method, path, query, status code and duration.
"""

import time

from fastapi import FastAPI, Request
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

request_log = logger.bind(module="HTTP")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests."""

    async def dispatch(self, request: Request, call_next):
        """Log request method, path, query, status and duration."""
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        query = f"?{request.url.query}" if request.url.query else ""
        request_log.info(
            f"{request.method} {request.url.path}{query} "
            f"{response.status_code} ({duration_ms:.0f}ms)"
        )

        return response


def setup_logging(app: FastAPI) -> None:
    """
    Configure logging middleware.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(LoggingMiddleware)
