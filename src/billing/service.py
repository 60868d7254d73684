"""
Subscription lifecycle orchestration.

Translates between the extension's request/response shapes and the PayPal
gateway. The relay keeps no subscription state: the extension persists the
subscription id itself and calls validate to reconcile after the approval
redirect or at startup.
"""

from typing import Optional, Protocol

from loguru import logger

from billing.models import CreatedSubscription, Subscription
from billing.schemas import (
    CancelSubscriptionRequest,
    CancelSubscriptionResponse,
    CreateSubscriptionRequest,
    CreateSubscriptionResponse,
    SubscriptionView,
    ValidateSubscriptionRequest,
    ValidateSubscriptionResponse,
)
from core.exceptions import ValidationError


class BillingGateway(Protocol):
    """The three billing operations the service depends on."""

    async def create_subscription(
        self, plan_id: str, subscriber_email: str, subscriber_name: Optional[str] = None
    ) -> CreatedSubscription: ...

    async def get_subscription(self, subscription_id: str) -> Subscription: ...

    async def cancel_subscription(self, subscription_id: str, reason: Optional[str] = None) -> None: ...


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


class SubscriptionService:
    """Create, validate and cancel subscriptions on behalf of the extension."""

    def __init__(self, gateway: BillingGateway):
        self.gateway = gateway

    async def create(self, request: CreateSubscriptionRequest) -> CreateSubscriptionResponse:
        """
        Create a subscription and hand back the approval redirect.

        Raises:
            ValidationError: planId or subscriberEmail missing (no network call made)
            AuthError, GatewayError: From the gateway
        """
        if not _present(request.plan_id) or not _present(request.subscriber_email):
            raise ValidationError("Missing required fields: planId, subscriberEmail")

        created = await self.gateway.create_subscription(
            request.plan_id, request.subscriber_email, request.subscriber_name
        )
        if created.approval_link is None:
            logger.warning(f"PayPal returned no approval link for {created.id}")

        return CreateSubscriptionResponse(subscription_id=created.id, approval_link=created.approval_link)

    async def validate(self, request: ValidateSubscriptionRequest) -> ValidateSubscriptionResponse:
        """Re-fetch the subscription from PayPal. Read-only, safe to repeat."""
        if not _present(request.subscription_id):
            raise ValidationError("Missing subscriptionId")

        subscription = await self.gateway.get_subscription(request.subscription_id)
        logger.info(f"[PayPal Subscription Validated] {subscription.id} status={subscription.status}")

        return ValidateSubscriptionResponse(
            subscription=SubscriptionView(
                id=subscription.id,
                plan_id=subscription.plan_id,
                status=subscription.status,
                subscriber=subscription.subscriber,
                billing_cycles=subscription.billing_cycles,
                created_at=subscription.create_time,
            )
        )

    async def cancel(self, request: CancelSubscriptionRequest) -> CancelSubscriptionResponse:
        """
        Cancel a subscription.

        Cancelling twice surfaces whatever PayPal reports for the second call
        as a GatewayError; it is not treated specially here.
        """
        if not _present(request.subscription_id):
            raise ValidationError("Missing subscriptionId")

        await self.gateway.cancel_subscription(request.subscription_id, request.reason)
        return CancelSubscriptionResponse(message="Subscription cancelled successfully")
