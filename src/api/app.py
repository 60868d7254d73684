"""
FastAPI application for the subscription relay.

Brokers PayPal subscriptions for the browser extension, receives PayPal
webhooks, and serves the mocked license and AI proxy endpoints.
"""

from typing import Optional
import time

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Correlation ID middleware
from asgi_correlation_id import CorrelationIdMiddleware, correlation_id

# Structured logging
from loguru import logger

from config.constants import SERVICE_NAME, SERVICE_VERSION
from config.logging_config import setup_structured_logging
from config.settings import Settings, get_settings
from core.exceptions import RelayError
from billing.notifier import AutomationNotifier
from billing.paypal_client import PayPalClient
from billing.service import SubscriptionService
from billing.token_provider import PayPalTokenProvider
from services.ai_proxy import CompletionProxy
from middleware.error_handler import (
    init_sentry,
    relay_exception_handler,
    request_validation_handler,
    sentry_exception_handler,
)
from api.rate_limit import setup_rate_limiting
from api.health import health_check, root, router as health_router
from api.subscription import paypal_webhook, router as subscription_router
from api.licenses import router as licenses_router
from api.ai_proxy import router as ai_proxy_router


# ============================================================================
# Security Headers Middleware
# ============================================================================

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)

        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"

        # Referrer policy
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # HSTS only for HTTPS (skip in development)
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests with correlation ID, method, path, status, latency."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        with logger.contextualize(correlation_id=correlation_id.get()):
            response = await call_next(request)

            latency_ms = (time.time() - start_time) * 1000
            logger.bind(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                latency_ms=round(latency_ms, 2)
            ).info(f"{request.method} {request.url.path} -> {response.status_code}")

            return response


# ============================================================================
# Application Factory
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration (default: loaded once from the environment)
        transport: Optional httpx transport shared by every outbound client

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=SERVICE_NAME,
        description="PayPal subscription relay for the browser extension",
        version=SERVICE_VERSION
    )

    # Collaborators are built once and shared by reference; none hold mutable state
    token_provider = PayPalTokenProvider(settings, transport=transport)
    app.state.settings = settings
    app.state.subscription_service = SubscriptionService(
        PayPalClient(settings, token_provider=token_provider, transport=transport)
    )
    app.state.notifier = AutomationNotifier(settings, transport=transport)
    app.state.completion_proxy = CompletionProxy(settings, transport=transport)

    app.add_exception_handler(RelayError, relay_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Global exception handler for Sentry
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        return await sentry_exception_handler(request, exc)

    # Innermost middleware, so 429 answers still get CORS and security headers
    setup_rate_limiting(app, settings, exempt=(paypal_webhook, root, health_check))

    # Extension requests come from a chrome-extension:// origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.add_middleware(SecurityHeadersMiddleware)

    # Add request logging middleware (logs all requests with correlation ID)
    app.add_middleware(RequestLoggingMiddleware)

    # Add correlation ID middleware (generates/reads X-Request-ID header)
    app.add_middleware(CorrelationIdMiddleware, validator=lambda x: True)

    @app.on_event("startup")
    async def startup_event():
        """Configure logging and error tracking; warn about missing credentials."""
        setup_structured_logging(level=settings.log_level, log_file=settings.log_file or None)
        logger.info("Structured logging initialized with correlation ID support")

        init_sentry(
            dsn=settings.sentry_dsn,
            environment=settings.sentry_environment,
            sample_rate=settings.sentry_traces_sample_rate,
            debug=(settings.sentry_environment == "development")
        )

        logger.info(f"Environment: {settings.environment}")
        logger.info(f"PayPal API: {settings.paypal_api_url}")
        if not settings.paypal_configured:
            logger.warning(
                "PayPal credentials not configured. "
                "Set RELAY_PAYPAL_CLIENT_ID and RELAY_PAYPAL_SECRET."
            )
        if not settings.automation_webhook_url:
            logger.warning("RELAY_AUTOMATION_WEBHOOK_URL not set - webhook notifications will not be forwarded")

    app.include_router(health_router, tags=["health"])
    app.include_router(subscription_router, prefix="/api")
    app.include_router(licenses_router, prefix="/api")
    app.include_router(ai_proxy_router, prefix="/api")

    return app


# Create app instance
app = create_app()
