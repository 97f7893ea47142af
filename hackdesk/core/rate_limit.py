"""Rate limiting configuration."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from hackdesk.core.config import settings


def get_client_ip(request):
    """Get client IP for rate limiting, considering proxies."""
    # Check X-Forwarded-For header (from reverse proxies)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded.split(",")[0].strip()

    # Fall back to direct connection IP
    return get_remote_address(request)


def limiter_storage_uri() -> str:
    """Redis when REDIS_URL is configured, otherwise per-process memory."""
    return settings.REDIS_URL or "memory://"


# Create rate limiter instance
limiter = Limiter(
    key_func=get_client_ip,
    default_limits=["100/minute"],  # Global default
    storage_uri=limiter_storage_uri(),
    strategy="fixed-window"
)

# Rate limit definitions for different endpoint categories
# Note: scanner stations at the venue usually share one public IP,
# so check-in limits cover every station scanning a full line at once
RATE_LIMITS = {
    # Scanner endpoints
    "check_in": settings.CHECK_IN_RATE_LIMIT,

    # Admin endpoints (less restrictive)
    "admin_read": "200/minute",
    "admin_write": "200/minute",
}
