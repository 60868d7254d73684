"""
Billing domain models.

Subscriptions are owned by PayPal: the relay never stores them, it only
normalizes what the provider returns on each read.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionStatus:
    """
    Known PayPal subscription statuses.

    Status stays an open string everywhere: PayPal may add values, so these
    are reference constants rather than a closed enum.
    """

    APPROVAL_PENDING = "APPROVAL_PENDING"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class CreatedSubscription(BaseModel):
    """Result of a create call. approval_link is None when PayPal sent none."""

    model_config = ConfigDict(frozen=True)

    id: str
    approval_link: Optional[str] = None


class Subscription(BaseModel):
    """Normalized view of a PayPal subscription."""

    model_config = ConfigDict(frozen=True)

    id: str
    plan_id: Optional[str] = None
    status: Optional[str] = None
    subscriber_email: Optional[str] = None
    subscriber_given_name: Optional[str] = None
    subscriber: Any = None
    billing_cycles: Any = None  # opaque, passed through unchanged
    create_time: Optional[str] = None

    @classmethod
    def from_provider(cls, data: Dict[str, Any]) -> "Subscription":
        """Map a PayPal subscription body to the normalized shape."""
        subscriber = data.get("subscriber")
        details = subscriber if isinstance(subscriber, dict) else {}
        name = details.get("name")
        if not isinstance(name, dict):
            name = {}
        return cls(
            id=data["id"],
            plan_id=data.get("plan_id"),
            status=data.get("status"),
            subscriber_email=details.get("email_address"),
            subscriber_given_name=name.get("given_name"),
            subscriber=subscriber,
            billing_cycles=data.get("billing_cycles"),
            create_time=data.get("create_time"),
        )


class NotificationRecord(BaseModel):
    """
    Normalized record forwarded to the automation endpoint.

    Built per webhook event and discarded after the forward call.
    """

    subscription_id: Optional[str] = None
    plan_id: Optional[str] = None
    status: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    payment_id: Optional[str] = None
    amount: Optional[str] = None
    currency: Optional[str] = None
    action: Optional[str] = Field(default=None, description="Downstream action marker")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
