"""
Rate limiting for the client-facing routes.

Each application gets its own Limiter built from the Settings passed to
create_app(), applied to every route through SlowAPIMiddleware. The PayPal
webhook is exempt: throttling it would make PayPal retry deliveries.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from loguru import logger

from config.settings import Settings


def get_client_key(request: Request) -> str:
    """Rate limit per client IP, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{get_remote_address(request)}"


def build_limiter(settings: Settings) -> Limiter:
    """Limiter with the configured default limit and its own in-memory storage."""
    return Limiter(
        key_func=get_client_key,
        default_limits=[settings.rate_limit],
        storage_uri="memory://",
        enabled=settings.rate_limit_enabled,
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Uniform 429 body.

    Must stay synchronous: SlowAPIMiddleware replaces coroutine handlers
    with its own plain-text answer.
    """
    logger.warning(f"Rate limit exceeded: {get_client_key(request)} {request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": "Too many requests. Try again later."}
    )


def setup_rate_limiting(app: FastAPI, settings: Settings, exempt=()) -> Limiter:
    """
    Configure rate limiting on the FastAPI app.

    Args:
        app: Application to protect
        settings: Source of the limit string and the on/off switch
        exempt: Route endpoints that are never limited

    Returns:
        The application's Limiter
    """
    limiter = build_limiter(settings)
    for endpoint in exempt:
        limiter.exempt(endpoint)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return limiter
