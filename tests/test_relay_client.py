"""
Tests for the relay client, run against the real application in-process.
"""

import httpx
import pytest

from client.relay_client import RelayClient, RelayClientError
from client.state_cache import SubscriptionCache


@pytest.fixture
def relay(app, tmp_path):
    """RelayClient wired to the app through an ASGI transport."""
    transport = httpx.ASGITransport(app=app)
    return RelayClient("http://relay.test", SubscriptionCache(tmp_path), transport=transport)


def set_status(gateway, subscription_id, status):
    gateway.subscriptions[subscription_id] = gateway.subscriptions[subscription_id].model_copy(
        update={"status": status}
    )


async def test_create_caches_id(relay):
    result = await relay.create_subscription("P-1", "a@b.com")

    assert result["approvalLink"] == "https://x/approve"
    snapshot = relay.snapshot()
    assert snapshot.subscription_id == "I-1"
    assert snapshot.created_at


async def test_create_error_raises(relay, gateway):
    with pytest.raises(RelayClientError) as exc_info:
        await relay.create_subscription("", "a@b.com")

    assert exc_info.value.status_code == 400
    assert "Missing required fields" in exc_info.value.message
    assert relay.snapshot().subscription_id is None


async def test_check_status_without_subscription(relay):
    assert await relay.check_subscription_status() is None


async def test_pending_counts_as_active(relay):
    """Test APPROVAL_PENDING reports active and pending."""
    await relay.create_subscription("P-1", "a@b.com")
    report = await relay.check_subscription_status()

    assert report.status == "APPROVAL_PENDING"
    assert report.is_active is True
    assert report.is_pending is True


async def test_active_status(relay, gateway):
    await relay.create_subscription("P-1", "a@b.com")
    set_status(gateway, "I-1", "ACTIVE")

    report = await relay.check_subscription_status()

    assert report.is_active is True
    assert report.is_pending is False
    snapshot = relay.snapshot()
    assert snapshot.status == "ACTIVE"
    assert snapshot.data["id"] == "I-1"
    assert snapshot.validated_at


@pytest.mark.parametrize("status", ["SUSPENDED", "CANCELLED", "EXPIRED", "APPROVED"])
async def test_inactive_statuses(relay, gateway, status):
    await relay.create_subscription("P-1", "a@b.com")
    set_status(gateway, "I-1", status)

    report = await relay.check_subscription_status()
    assert report.is_active is False


async def test_check_status_reports_errors(relay, gateway):
    relay.cache.update(subscription_id="I-404")
    report = await relay.check_subscription_status()

    assert report.subscription_id == "I-404"
    assert report.is_active is False
    assert report.error == "Resource not found"


async def test_cancel_uses_cached_id(relay, gateway):
    await relay.create_subscription("P-1", "a@b.com")
    result = await relay.cancel_subscription(reason="bye")

    assert result["message"] == "Subscription cancelled successfully"
    assert gateway.calls[-1] == ("cancel", ("I-1", "bye"))
    snapshot = relay.snapshot()
    assert snapshot.subscription_id is None
    assert snapshot.status == "CANCELLED"


async def test_cancel_without_subscription(relay, gateway):
    with pytest.raises(RelayClientError, match="No subscription"):
        await relay.cancel_subscription()
    assert gateway.calls == []


async def test_unreachable_relay(tmp_path):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = RelayClient("http://relay.test", SubscriptionCache(tmp_path), transport=httpx.MockTransport(handler))

    with pytest.raises(RelayClientError, match="unreachable"):
        await client.validate_subscription("I-1")


async def test_clear(relay):
    await relay.create_subscription("P-1", "a@b.com")
    relay.clear()

    assert relay.snapshot().subscription_id is None
