"""
Constants and configuration values for the subscription relay.

Defines provider endpoints, webhook event names, and system-wide defaults.
"""

from typing import Dict, Final

# PayPal REST API
PAYPAL_LIVE_API_URL: Final[str] = "https://api.paypal.com"
PAYPAL_SANDBOX_API_URL: Final[str] = "https://api.sandbox.paypal.com"
PAYPAL_TOKEN_PATH: Final[str] = "/v1/oauth2/token"
PAYPAL_SUBSCRIPTIONS_PATH: Final[str] = "/v1/billing/subscriptions"
PAYPAL_APPROVE_REL: Final[str] = "approve"

# Subscription defaults
DEFAULT_SUBSCRIBER_NAME: Final[str] = "Customer"
CANCEL_REASON_CODE: Final[str] = "USER_REQUESTED"
DEFAULT_CANCEL_REASON: Final[str] = "User requested cancellation"

# PayPal webhook event types
EVENT_SUBSCRIPTION_CREATED: Final[str] = "BILLING.SUBSCRIPTION.CREATED"
EVENT_SUBSCRIPTION_ACTIVATED: Final[str] = "BILLING.SUBSCRIPTION.ACTIVATED"
EVENT_SUBSCRIPTION_UPDATED: Final[str] = "BILLING.SUBSCRIPTION.UPDATED"
EVENT_SUBSCRIPTION_CANCELLED: Final[str] = "BILLING.SUBSCRIPTION.CANCELLED"
EVENT_SUBSCRIPTION_SUSPENDED: Final[str] = "BILLING.SUBSCRIPTION.SUSPENDED"
EVENT_SUBSCRIPTION_EXPIRED: Final[str] = "BILLING.SUBSCRIPTION.EXPIRED"
EVENT_PAYMENT_COMPLETED: Final[str] = "PAYMENT.CAPTURE.COMPLETED"
EVENT_PAYMENT_DENIED: Final[str] = "PAYMENT.CAPTURE.DENIED"

# Names forwarded to the automation endpoint
NOTIFICATION_EVENT_NAMES: Final[Dict[str, str]] = {
    EVENT_SUBSCRIPTION_CREATED: "SUBSCRIPTION_CREATED",
    EVENT_SUBSCRIPTION_ACTIVATED: "SUBSCRIPTION_ACTIVATED",
    EVENT_SUBSCRIPTION_UPDATED: "SUBSCRIPTION_UPDATED",
    EVENT_SUBSCRIPTION_CANCELLED: "SUBSCRIPTION_CANCELLED",
    EVENT_SUBSCRIPTION_SUSPENDED: "SUBSCRIPTION_SUSPENDED",
    EVENT_SUBSCRIPTION_EXPIRED: "SUBSCRIPTION_EXPIRED",
    EVENT_PAYMENT_COMPLETED: "PAYMENT_COMPLETED",
    EVENT_PAYMENT_DENIED: "PAYMENT_FAILED",
}

# Action marker telling the automation system to email a license key
ACTION_SEND_LICENSE_KEY: Final[str] = "SEND_LICENSE_KEY"

# Mock license endpoints
PLACEHOLDER_AI_API_KEY: Final[str] = "sk-YOUR_DEEPSEEK_API_KEY"
API_KEY_TTL_SECONDS: Final[int] = 60 * 60 * 24 * 30  # 30 days
GUMROAD_ACTIVATED_EMAIL: Final[str] = "activated@example.com"

# Server
SERVICE_NAME: Final[str] = "Subscription Relay"
SERVICE_VERSION: Final[str] = "1.0.0"

# Client-side state cache
CLIENT_CACHE_FILE: Final[str] = "subscription_state.json"
DEFAULT_RELAY_URL: Final[str] = "http://127.0.0.1:3000"
