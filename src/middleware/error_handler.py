"""
Error tracking and global exception handling for the subscription relay.

Integrates Sentry for production error aggregation and maps every failure
to the uniform {success: false, error} body the extension understands.
"""

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
import logging

from billing.schemas import ErrorResponse
from core.exceptions import RelayError


def init_sentry(
    dsn: str,
    environment: str,
    sample_rate: float = 0.1,
    debug: bool = False
) -> None:
    """
    Initialize Sentry with FastAPI integration.

    Args:
        dsn: Sentry DSN from dashboard
        environment: 'development' or 'production'
        sample_rate: Traces sample rate (1.0 for dev, 0.1 for prod)
        debug: Enable debug mode (verbose logging)
    """
    if not dsn:
        logger.warning("SENTRY_DSN not configured - error tracking disabled")
        return

    traces_sample_rate = 1.0 if environment == "development" else sample_rate

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=traces_sample_rate,
        debug=debug,
        integrations=[
            FastApiIntegration(),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR
            )
        ],
        # Health checks and webhook acknowledgments are noise
        before_send_transaction=lambda event, hint: None if event.get("transaction", "").startswith("/health") else event,
        before_send=_filter_sensitive_data
    )

    logger.info(f"Sentry initialized: environment={environment}, traces_sample_rate={traces_sample_rate}")


def _filter_sensitive_data(event, hint):
    """
    Filter sensitive data before sending to Sentry.

    Removes: Authorization headers, cookies, PayPal credentials, tokens.
    """
    if "request" in event and "headers" in event["request"]:
        event["request"]["headers"] = {
            k: v for k, v in event["request"]["headers"].items()
            if k.lower() not in ["authorization", "cookie", "x-api-key"]
        }

    if "extra" in event:
        sensitive_keys = ["access_token", "token", "api_key", "secret", "paypal_secret", "ai_proxy_api_key"]
        for key in sensitive_keys:
            event["extra"].pop(key, None)

    return event


def error_response(exc: RelayError) -> JSONResponse:
    """Uniform failure body for a relay error."""
    return JSONResponse(
        status_code=exc.http_status,
        content=ErrorResponse(error=exc.message).model_dump()
    )


async def relay_exception_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Safety net for relay errors that escaped a route's own handling."""
    logger.warning(f"{request.method} {request.url.path} failed: {exc}")
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON bodies get the uniform shape with 400, not FastAPI's 422."""
    logger.info(f"{request.method} {request.url.path} rejected: invalid request body")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request body"}
    )


async def sentry_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler that captures errors in Sentry.

    Handles all uncaught exceptions, logs them, and returns a generic
    error message so internals never leak to the client.
    """
    sentry_sdk.capture_exception(exc)

    logger.opt(exception=exc).error(
        f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}"
    )

    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"}
    )
