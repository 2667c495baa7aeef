"""Request logging middleware"""
import time

from config.logger import get_logger
from fastapi import Request

logger = get_logger("http")


async def log_requests(request: Request, call_next):
    """Log failed HTTP requests (4xx, 5xx) with their duration"""
    started = time.perf_counter()
    response = await call_next(request)
    if response.status_code >= 400:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.warning(
            f"{request.method} {request.url.path} - Status: {response.status_code} ({elapsed_ms:.1f} ms)"
        )
    return response
