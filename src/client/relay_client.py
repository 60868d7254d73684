"""
Python client for the relay's subscription API.

Mirrors the helpers the browser extension uses: create, validate, check and
cancel, each keeping the local SubscriptionCache in step with the answers.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from loguru import logger
from pydantic import BaseModel

from billing.models import SubscriptionStatus
from client.state_cache import CachedSubscription, SubscriptionCache
from core.exceptions import RelayError

# APPROVAL_PENDING counts as active so the UI can show an in-progress state
# right after the approval redirect; is_pending tells the two apart.
ACTIVE_STATUSES = frozenset({SubscriptionStatus.ACTIVE, SubscriptionStatus.APPROVAL_PENDING})


class RelayClientError(RelayError):
    """Raised when the relay answers success=false or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, {"status_code": status_code} if status_code else None)
        self.status_code = status_code


class SubscriptionStatusReport(BaseModel):
    subscription_id: Optional[str] = None
    status: Optional[str] = None
    is_active: bool = False
    is_pending: bool = False
    error: Optional[str] = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RelayClient:
    """Async client for /api/paypal/*."""

    def __init__(
        self,
        base_url: str,
        cache: SubscriptionCache,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self.timeout = timeout
        self._transport = transport

    async def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport
            ) as client:
                response = await client.post(path, json=body)
        except httpx.HTTPError as e:
            raise RelayClientError(f"Relay unreachable: {e}")

        try:
            data = response.json()
        except ValueError:
            raise RelayClientError(f"Relay returned HTTP {response.status_code} without JSON", response.status_code)

        if not isinstance(data, dict) or not data.get("success"):
            error = data.get("error") if isinstance(data, dict) else None
            raise RelayClientError(error or f"Relay request failed with HTTP {response.status_code}", response.status_code)
        return data

    async def create_subscription(
        self,
        plan_id: str,
        subscriber_email: str,
        subscriber_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create a subscription and remember its id. Open data['approvalLink'] next."""
        body = {"planId": plan_id, "subscriberEmail": subscriber_email}
        if subscriber_name:
            body["subscriberName"] = subscriber_name

        data = await self._post("/api/paypal/create-subscription", body)
        self.cache.update(subscription_id=data["subscriptionId"], created_at=_now())
        logger.info(f"Subscription created: {data['subscriptionId']}")
        return data

    async def validate_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """Fetch the subscription from the relay and cache status and object."""
        data = await self._post("/api/paypal/validate-subscription", {"subscriptionId": subscription_id})
        subscription = data["subscription"]
        self.cache.update(
            status=subscription.get("status"),
            data=subscription,
            validated_at=_now()
        )
        return subscription

    async def check_subscription_status(self) -> Optional[SubscriptionStatusReport]:
        """
        Re-validate the cached subscription.

        Returns:
            None when nothing is cached; otherwise a report. Relay failures
            are reported as inactive with the error message, not raised.
        """
        cached = self.cache.load()
        if not cached.subscription_id:
            return None

        try:
            subscription = await self.validate_subscription(cached.subscription_id)
        except RelayClientError as e:
            logger.warning(f"Failed to check status: {e.message}")
            return SubscriptionStatusReport(subscription_id=cached.subscription_id, error=e.message)

        status = subscription.get("status")
        return SubscriptionStatusReport(
            subscription_id=cached.subscription_id,
            status=status,
            is_active=status in ACTIVE_STATUSES,
            is_pending=status == SubscriptionStatus.APPROVAL_PENDING
        )

    async def cancel_subscription(
        self,
        subscription_id: Optional[str] = None,
        reason: Optional[str] = None
    ) -> Dict[str, Any]:
        """Cancel the given (or cached) subscription and forget its id."""
        subscription_id = subscription_id or self.cache.load().subscription_id
        if not subscription_id:
            raise RelayClientError("No subscription to cancel")

        body: Dict[str, Any] = {"subscriptionId": subscription_id}
        if reason:
            body["reason"] = reason

        data = await self._post("/api/paypal/cancel-subscription", body)
        self.cache.update(subscription_id=None, status=SubscriptionStatus.CANCELLED)
        return data

    def snapshot(self) -> CachedSubscription:
        return self.cache.load()

    def clear(self) -> CachedSubscription:
        return self.cache.clear()
