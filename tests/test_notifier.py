"""
Tests for best-effort forwarding to the automation endpoint.
"""

import json

import httpx

from billing.models import NotificationRecord
from billing.notifier import AutomationNotifier
from config.settings import Settings

RECORD = NotificationRecord(subscription_id="I-1", status="CANCELLED", email="a@b.com")


async def test_forward_body(settings):
    """Test the forwarded body is event_type + timestamp + record fields."""
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200)

    notifier = AutomationNotifier(settings, transport=httpx.MockTransport(handler))
    await notifier.notify("SUBSCRIPTION_CANCELLED", RECORD)

    assert len(seen) == 1
    assert str(seen[0].url) == "https://hooks.example.com/relay"
    body = json.loads(seen[0].content)
    assert body.pop("timestamp")
    assert body == {
        "event_type": "SUBSCRIPTION_CANCELLED",
        "subscription_id": "I-1",
        "status": "CANCELLED",
        "email": "a@b.com",
    }


async def test_no_url_sends_nothing():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    notifier = AutomationNotifier(Settings(automation_webhook_url=""), transport=httpx.MockTransport(handler))
    await notifier.notify("SUBSCRIPTION_CANCELLED", RECORD)

    assert calls == []


async def test_http_error_is_swallowed(settings):
    """Test a 500 from the automation endpoint does not raise."""
    notifier = AutomationNotifier(settings, transport=httpx.MockTransport(lambda request: httpx.Response(500)))

    assert await notifier.notify("SUBSCRIPTION_CANCELLED", RECORD) is None


async def test_transport_error_is_swallowed(settings):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    notifier = AutomationNotifier(settings, transport=httpx.MockTransport(handler))
    await notifier.notify("SUBSCRIPTION_CANCELLED", RECORD)


async def test_timeout_is_swallowed(settings):
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    notifier = AutomationNotifier(settings, transport=httpx.MockTransport(handler))
    await notifier.notify("SUBSCRIPTION_CANCELLED", RECORD)
