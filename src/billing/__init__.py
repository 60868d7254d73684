"""Billing and subscription management module."""

from billing.paypal_client import PayPalClient
from billing.token_provider import PayPalTokenProvider
from billing.service import SubscriptionService
from billing.notifier import AutomationNotifier
from billing.webhook_handler import process_webhook_event

__all__ = [
    "PayPalClient",
    "PayPalTokenProvider",
    "SubscriptionService",
    "AutomationNotifier",
    "process_webhook_event",
]
