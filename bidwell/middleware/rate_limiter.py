"""
Rate limiting using SlowAPI

Applied to the login and signup endpoints.
"""
import logging
import math
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from bidwell.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

AUTH_LIMIT = settings.AUTH_RATE_LIMIT


def retry_after_seconds(request: Request, exc: RateLimitExceeded) -> int:
    """Seconds until the exceeded window resets; the full window if unknown"""
    current = getattr(request.state, "view_rate_limit", None)
    if current is not None:
        item, identifiers = current
        reset_at, _remaining = limiter.limiter.get_window_stats(item, *identifiers)
        return max(1, math.ceil(reset_at - time.time()))
    return exc.limit.limit.get_expiry()


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors"""
    retry_after = retry_after_seconds(request, exc)
    logger.warning(f"Rate limit exceeded for {request.url.path}, retry in {retry_after}s")
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "Too many requests. Please slow down.",
            "detail": str(exc.detail),
        },
        headers={"Retry-After": str(retry_after)},
    )
