"""
Rate Limiting for Jordan Yells
Uses slowapi to cap how fast a client may push frames and shot updates.
"""

import logging
from typing import Optional

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.responses import JSONResponse

from config.settings import get_settings

logger = logging.getLogger(__name__)

DEVICE_HEADER = "X-Device-ID"


def get_client_key(request: Request) -> str:
    """Rate limit per device when the app sends X-Device-ID, otherwise per address"""
    device_id = request.headers.get(DEVICE_HEADER, "").strip()
    if device_id:
        return f"device:{device_id[:64]}"
    return get_remote_address(request)


def create_limiter() -> Limiter:
    """Per-device limiter with in-memory storage"""
    settings = get_settings()

    return Limiter(
        key_func=get_client_key,
        default_limits=[settings.RATE_LIMIT_GLOBAL],
        enabled=settings.RATE_LIMIT_ENABLED,
        storage_uri="memory://",
        strategy="fixed-window"
    )


# Global limiter instance
limiter = create_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(
        f"Rate limit exceeded for {get_client_key(request)}",
        extra={
            "path": str(request.url.path),
            "method": request.method,
            "limit": str(exc.detail)
        }
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "RATE_LIMIT_EXCEEDED",
            "detail": f"Rate limit exceeded: {exc.detail}",
            "path": str(request.url.path)
        },
        headers={
            "Retry-After": "60",
            "X-RateLimit-Limit": str(exc.detail)
        }
    )


def setup_rate_limiting(app, app_limiter: Optional[Limiter] = None) -> None:
    """
    Attach the limiter, its 429 handler and the middleware that enforces
    RATE_LIMIT_GLOBAL on every route.

    Args:
        app: FastAPI application instance
        app_limiter: Limiter to use instead of the module-level one
    """
    settings = get_settings()

    if not settings.RATE_LIMIT_ENABLED:
        logger.info("Rate limiting is disabled")
        return

    app.state.limiter = app_limiter or limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    logger.info("Rate limiting enabled")
