"""
Rate limiting configuration using slowapi.
This middleware is production-only.
"""
import logging
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from fastapi import Request, FastAPI

from app.core.config import settings

logger = logging.getLogger("rate_limit")


def get_client_ip(request: Request) -> str:
    """
    Get client IP for rate limiting, handling proxied requests.
    """
    # Check X-Forwarded-For header (set by Nginx)
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    # Check X-Real-IP header
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    # Fall back to slowapi default
    return get_remote_address(request)


# Create limiter instance with custom key function
limiter = Limiter(
    key_func=get_client_ip,
    default_limits=["200/minute", "5000/hour"],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
)


class RateLimits:
    """Centralized rate limit configurations."""

    # File operations
    FILE_UPLOAD = "20/minute"
    FILE_DOWNLOAD = "100/minute"
    FILE_DELETE = "30/minute"


def setup_rate_limiting(app: FastAPI) -> Limiter:
    """
    Configure rate limiting for the FastAPI application.
    """
    # Add rate limiter to app state
    app.state.limiter = limiter

    # Add exception handler for rate limit exceeded
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Add middleware
    app.add_middleware(SlowAPIMiddleware)

    logger.info(f"Rate limiting enabled with storage: {settings.RATE_LIMIT_STORAGE_URI}")

    return limiter
