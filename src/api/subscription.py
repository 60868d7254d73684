"""PayPal subscription API endpoints used by the browser extension."""

from fastapi import APIRouter, Depends, Request
import sentry_sdk
from loguru import logger

from api.dependencies import get_notifier, get_subscription_service
from billing.notifier import AutomationNotifier
from billing.schemas import (
    CancelSubscriptionRequest,
    CreateSubscriptionRequest,
    ValidateSubscriptionRequest,
    to_wire,
)
from billing.service import SubscriptionService
from billing.webhook_handler import process_webhook_event
from core.exceptions import RelayError, ValidationError
from middleware.error_handler import error_response

router = APIRouter(prefix="/paypal", tags=["paypal"])


def _log_failure(operation: str, exc: RelayError) -> None:
    if isinstance(exc, ValidationError):
        logger.info(f"[PayPal {operation}] rejected: {exc.message}")
    else:
        logger.error(f"[PayPal {operation} Error] {exc}")


@router.post("/create-subscription")
async def create_subscription(
    body: CreateSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service)
):
    """Create a subscription and return the approval link the subscriber must open."""
    try:
        result = await service.create(body)
    except RelayError as e:
        _log_failure("Subscription", e)
        return error_response(e)
    return to_wire(result)


@router.post("/validate-subscription")
async def validate_subscription(
    body: ValidateSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service)
):
    """Return the current PayPal view of a subscription."""
    try:
        result = await service.validate(body)
    except RelayError as e:
        _log_failure("Validation", e)
        return error_response(e)
    return to_wire(result)


@router.post("/cancel-subscription")
async def cancel_subscription(
    body: CancelSubscriptionRequest,
    service: SubscriptionService = Depends(get_subscription_service)
):
    """Cancel a subscription."""
    try:
        result = await service.cancel(body)
    except RelayError as e:
        _log_failure("Cancellation", e)
        return error_response(e)
    return to_wire(result)


@router.post("/webhook")
async def paypal_webhook(
    request: Request,
    notifier: AutomationNotifier = Depends(get_notifier)
):
    """
    Handle PayPal webhook events.

    Always answers 200 {received: true} so PayPal never retries because of
    anything that happened on our side after receipt.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("[PayPal Webhook] Body is not valid JSON")
        payload = None

    try:
        await process_webhook_event(payload, notifier)
    except Exception as e:
        sentry_sdk.capture_exception(e)
        logger.opt(exception=e).error("[PayPal Webhook] Processing failed, acknowledging anyway")

    return {"received": True}
