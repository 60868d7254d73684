"""
PayPal webhook event shapes.

Each recognized event type maps to exactly one resource variant, and each
variant declares only the fields the relay reads. Anything else in the
payload is ignored.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ConfigDict

from billing.models import NotificationRecord
from config.constants import (
    ACTION_SEND_LICENSE_KEY,
    EVENT_PAYMENT_COMPLETED,
    EVENT_PAYMENT_DENIED,
    EVENT_SUBSCRIPTION_ACTIVATED,
    EVENT_SUBSCRIPTION_CANCELLED,
    EVENT_SUBSCRIPTION_CREATED,
    EVENT_SUBSCRIPTION_EXPIRED,
    EVENT_SUBSCRIPTION_SUSPENDED,
    EVENT_SUBSCRIPTION_UPDATED,
    NOTIFICATION_EVENT_NAMES,
)


class _Resource(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SubscriberName(_Resource):
    given_name: Optional[str] = None
    surname: Optional[str] = None

    @property
    def full_name(self) -> Optional[str]:
        """Given name and surname joined, skipping whichever is absent."""
        parts = [part.strip() for part in (self.given_name, self.surname) if part and part.strip()]
        return " ".join(parts) or None


class Subscriber(_Resource):
    email_address: Optional[str] = None
    name: Optional[SubscriberName] = None


class SubscriptionResource(_Resource):
    """Resource of BILLING.SUBSCRIPTION.* events."""

    id: Optional[str] = None
    plan_id: Optional[str] = None
    status: Optional[str] = None
    subscriber: Optional[Subscriber] = None

    def to_record(self, action: Optional[str] = None) -> NotificationRecord:
        subscriber = self.subscriber or Subscriber()
        return NotificationRecord(
            subscription_id=self.id,
            plan_id=self.plan_id,
            status=self.status,
            email=subscriber.email_address,
            name=subscriber.name.full_name if subscriber.name else None,
            action=action,
        )


class Money(_Resource):
    value: Optional[str] = None
    currency_code: Optional[str] = None


class CaptureResource(_Resource):
    """Resource of PAYMENT.CAPTURE.* events."""

    id: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[Money] = None
    billing_agreement_id: Optional[str] = None

    def to_record(self, action: Optional[str] = None) -> NotificationRecord:
        amount = self.amount or Money()
        return NotificationRecord(
            subscription_id=self.billing_agreement_id,
            status=self.status,
            payment_id=self.id,
            amount=amount.value,
            currency=amount.currency_code,
            action=action,
        )


class WebhookEnvelope(_Resource):
    """Outer webhook body. The resource stays raw until the event type is known."""

    id: Optional[str] = None
    event_type: Optional[str] = None
    create_time: Optional[str] = None
    resource: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class EventRoute:
    """How one PayPal event type is read and forwarded."""

    notification_type: str
    resource_model: Type[_Resource]
    action: Optional[str] = None


EVENT_ROUTES: Dict[str, EventRoute] = {
    EVENT_SUBSCRIPTION_CREATED: EventRoute(
        NOTIFICATION_EVENT_NAMES[EVENT_SUBSCRIPTION_CREATED], SubscriptionResource
    ),
    EVENT_SUBSCRIPTION_ACTIVATED: EventRoute(
        NOTIFICATION_EVENT_NAMES[EVENT_SUBSCRIPTION_ACTIVATED], SubscriptionResource, ACTION_SEND_LICENSE_KEY
    ),
    EVENT_SUBSCRIPTION_UPDATED: EventRoute(
        NOTIFICATION_EVENT_NAMES[EVENT_SUBSCRIPTION_UPDATED], SubscriptionResource
    ),
    EVENT_SUBSCRIPTION_CANCELLED: EventRoute(
        NOTIFICATION_EVENT_NAMES[EVENT_SUBSCRIPTION_CANCELLED], SubscriptionResource
    ),
    EVENT_SUBSCRIPTION_SUSPENDED: EventRoute(
        NOTIFICATION_EVENT_NAMES[EVENT_SUBSCRIPTION_SUSPENDED], SubscriptionResource
    ),
    EVENT_SUBSCRIPTION_EXPIRED: EventRoute(
        NOTIFICATION_EVENT_NAMES[EVENT_SUBSCRIPTION_EXPIRED], SubscriptionResource
    ),
    EVENT_PAYMENT_COMPLETED: EventRoute(
        NOTIFICATION_EVENT_NAMES[EVENT_PAYMENT_COMPLETED], CaptureResource
    ),
    EVENT_PAYMENT_DENIED: EventRoute(
        NOTIFICATION_EVENT_NAMES[EVENT_PAYMENT_DENIED], CaptureResource
    ),
}
