"""
Request and response shapes of the extension-facing subscription API.

Field names are camelCase on the wire, matching what the extension sends
and reads. Required fields are Optional here on purpose: presence is checked
by SubscriptionService so that missing fields answer 400 with the uniform
error body instead of FastAPI's 422.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ============================================================================
# Requests
# ============================================================================

class CreateSubscriptionRequest(_WireModel):
    plan_id: Optional[str] = Field(default=None, alias="planId")
    subscriber_email: Optional[str] = Field(default=None, alias="subscriberEmail")
    subscriber_name: Optional[str] = Field(default=None, alias="subscriberName")


class ValidateSubscriptionRequest(_WireModel):
    subscription_id: Optional[str] = Field(default=None, alias="subscriptionId")


class CancelSubscriptionRequest(_WireModel):
    subscription_id: Optional[str] = Field(default=None, alias="subscriptionId")
    reason: Optional[str] = None


# ============================================================================
# Responses
# ============================================================================

class CreateSubscriptionResponse(_WireModel):
    success: bool = True
    subscription_id: str = Field(alias="subscriptionId")
    approval_link: Optional[str] = Field(default=None, alias="approvalLink")


class SubscriptionView(_WireModel):
    id: str
    plan_id: Optional[str] = Field(default=None, alias="planId")
    status: Optional[str] = None
    subscriber: Any = None
    billing_cycles: Any = Field(default=None, alias="billingCycles")
    created_at: Optional[str] = Field(default=None, alias="createdAt")


class ValidateSubscriptionResponse(_WireModel):
    success: bool = True
    subscription: SubscriptionView


class CancelSubscriptionResponse(_WireModel):
    success: bool = True
    message: str


class ErrorResponse(_WireModel):
    success: bool = False
    error: str


def to_wire(model: BaseModel) -> Dict[str, Any]:
    """Serialize a response with camelCase keys and without absent values."""
    return model.model_dump(by_alias=True, exclude_none=True)
