"""PayPal webhook event handling."""

from typing import Any, Optional

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from billing.events import EVENT_ROUTES, WebhookEnvelope
from billing.notifier import AutomationNotifier


async def process_webhook_event(payload: Any, notifier: AutomationNotifier) -> Optional[str]:
    """
    Classify one webhook delivery and forward its normalized record.

    Deliveries are at-least-once and unordered: a CANCELLED event may arrive
    before the ACTIVATED one for the same subscription. Nothing here orders or
    deduplicates them; downstream treats status as "last observed".

    Args:
        payload: Decoded JSON body as sent by PayPal
        notifier: Side channel to the automation endpoint

    Returns:
        The forwarded event type, or None when nothing was forwarded
    """
    try:
        envelope = WebhookEnvelope.model_validate(payload)
    except PydanticValidationError as e:
        logger.warning(f"[PayPal Webhook] Ignoring malformed envelope: {e.error_count()} error(s)")
        return None

    resource = envelope.resource or {}
    logger.info(f"[PayPal Webhook] {envelope.event_type} {resource.get('id')}")

    route = EVENT_ROUTES.get(envelope.event_type or "")
    if route is None:
        logger.info(f"[PayPal Webhook] Unrecognized event type {envelope.event_type!r}, acknowledged only")
        return None

    try:
        parsed = route.resource_model.model_validate(resource)
    except PydanticValidationError as e:
        logger.warning(f"[PayPal Webhook] Ignoring {envelope.event_type} with malformed resource: {e.error_count()} error(s)")
        return None

    record = parsed.to_record(action=route.action)
    await notifier.notify(route.notification_type, record)
    return route.notification_type
