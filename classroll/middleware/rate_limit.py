"""Per-client rate limiting."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from classroll.config import settings


def client_key(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the socket address."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=client_key,
    default_limits=[settings.RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
