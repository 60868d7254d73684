"""
Shared fixtures for the subscription relay tests.
"""

import os

# Must be set before api.app is imported: it builds a module-level app
os.environ.setdefault("RELAY_RATE_LIMIT_ENABLED", "false")

from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from billing.models import CreatedSubscription, NotificationRecord, Subscription
from billing.service import SubscriptionService
from config.settings import Settings
from core.exceptions import GatewayError


@pytest.fixture
def settings():
    """Settings pointing at the sandbox with a webhook URL configured."""
    return Settings(
        paypal_client_id="client-id",
        paypal_secret="client-secret",
        environment="development",
        http_timeout=5.0,
        automation_webhook_url="https://hooks.example.com/relay",
        ai_proxy_api_key="sk-test",
        ai_proxy_base_url="https://ai.example.com/v1",
        ai_proxy_model="deepseek-chat",
        rate_limit_enabled=False,
    )


class FakeGateway:
    """In-memory billing gateway that counts calls."""

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []
        self.subscriptions = {}
        self.cancelled = set()
        self.next_id = "I-1"
        self.approval_link: Optional[str] = "https://x/approve"

    async def create_subscription(self, plan_id, subscriber_email, subscriber_name=None):
        self.calls.append(("create", (plan_id, subscriber_email, subscriber_name)))
        self.subscriptions[self.next_id] = Subscription(
            id=self.next_id,
            plan_id=plan_id,
            status="APPROVAL_PENDING",
            subscriber_email=subscriber_email,
            create_time="2026-01-01T00:00:00Z",
        )
        return CreatedSubscription(id=self.next_id, approval_link=self.approval_link)

    async def get_subscription(self, subscription_id):
        self.calls.append(("get", (subscription_id,)))
        if subscription_id not in self.subscriptions:
            raise GatewayError("Resource not found", status_code=404)
        return self.subscriptions[subscription_id]

    async def cancel_subscription(self, subscription_id, reason=None):
        self.calls.append(("cancel", (subscription_id, reason)))
        if subscription_id in self.cancelled:
            raise GatewayError(
                "Unprocessable Entity: Invalid subscription status for cancel action",
                status_code=422
            )
        self.cancelled.add(subscription_id)
        current = self.subscriptions.get(subscription_id)
        if current is not None:
            self.subscriptions[subscription_id] = current.model_copy(update={"status": "CANCELLED"})


class FakeNotifier:
    """Records forwarded notifications instead of sending them."""

    def __init__(self):
        self.sent: List[Tuple[str, NotificationRecord]] = []

    async def notify(self, event_type, record):
        self.sent.append((event_type, record))


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def app(settings, gateway, notifier):
    """Application with the PayPal gateway and notifier replaced by fakes."""
    from api.app import create_app

    application = create_app(settings)
    application.state.subscription_service = SubscriptionService(gateway)
    application.state.notifier = notifier
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
