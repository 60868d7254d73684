"""PayPal Subscriptions API client."""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from billing.models import CreatedSubscription, Subscription
from billing.token_provider import PayPalTokenProvider
from config.constants import (
    CANCEL_REASON_CODE,
    DEFAULT_CANCEL_REASON,
    DEFAULT_SUBSCRIBER_NAME,
    PAYPAL_APPROVE_REL,
    PAYPAL_SUBSCRIPTIONS_PATH,
)
from config.settings import Settings
from core.exceptions import GatewayError, GatewayTimeoutError, ValidationError


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _require(**fields: Optional[str]) -> None:
    """Fail fast before any network call when a required identifier is blank."""
    missing = [name for name, value in fields.items() if _is_blank(value)]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def find_approval_link(links: Any) -> Optional[str]:
    """Return the href of the first 'approve' link, or None."""
    if not isinstance(links, list):
        return None
    for link in links:
        if isinstance(link, dict) and link.get("rel") == PAYPAL_APPROVE_REL:
            return link.get("href")
    return None


class PayPalClient:
    """Wrapper for the PayPal billing subscriptions API."""

    def __init__(
        self,
        settings: Settings,
        token_provider: Optional[PayPalTokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings
        self.token_provider = token_provider or PayPalTokenProvider(settings, transport=transport)
        self._transport = transport

    async def create_subscription(
        self,
        plan_id: str,
        subscriber_email: str,
        subscriber_name: Optional[str] = None
    ) -> CreatedSubscription:
        """Create a subscription; the subscriber must then open the approval link."""
        _require(plan_id=plan_id, subscriber_email=subscriber_email)

        payload = {
            "plan_id": plan_id,
            "subscriber": {
                "name": {"given_name": subscriber_name or DEFAULT_SUBSCRIBER_NAME},
                "email_address": subscriber_email,
            },
        }
        data = await self._request("POST", PAYPAL_SUBSCRIPTIONS_PATH, json=payload)

        if not isinstance(data, dict) or not data.get("id"):
            raise GatewayError("PayPal response did not contain a subscription id")

        created = CreatedSubscription(id=data["id"], approval_link=find_approval_link(data.get("links")))
        logger.info(f"[PayPal Subscription Created] {created.id}")
        return created

    async def get_subscription(self, subscription_id: str) -> Subscription:
        """Retrieve subscription details from PayPal."""
        _require(subscription_id=subscription_id)

        data = await self._request("GET", self._subscription_path(subscription_id))
        if not isinstance(data, dict) or not data.get("id"):
            raise GatewayError("PayPal response did not contain a subscription id")
        try:
            return Subscription.from_provider(data)
        except PydanticValidationError as e:
            raise GatewayError("PayPal returned a malformed subscription", details={"errors": e.error_count()})

    async def cancel_subscription(self, subscription_id: str, reason: Optional[str] = None) -> None:
        """Cancel a subscription. PayPal answers 204 with no body."""
        _require(subscription_id=subscription_id)

        await self._request(
            "POST",
            f"{self._subscription_path(subscription_id)}/cancel",
            json={"reason_code": CANCEL_REASON_CODE, "reason": reason or DEFAULT_CANCEL_REASON},
        )
        logger.info(f"[PayPal Subscription Cancelled] {subscription_id}")

    @staticmethod
    def _subscription_path(subscription_id: str) -> str:
        return f"{PAYPAL_SUBSCRIPTIONS_PATH}/{quote(subscription_id, safe='')}"

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        """
        Issue one bearer-authenticated call against the billing API.

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            AuthError: From the token exchange
            GatewayTimeoutError: When the call exceeds the configured timeout
            GatewayError: On transport failure or non-2xx response
        """
        access_token = await self.token_provider.get_access_token()

        try:
            async with httpx.AsyncClient(
                base_url=self.settings.paypal_api_url,
                timeout=httpx.Timeout(self.settings.http_timeout),
                transport=self._transport
            ) as client:
                response = await client.request(
                    method,
                    path,
                    json=json,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "Content-Type": "application/json",
                        "Accept": "application/json",
                    },
                )
        except httpx.TimeoutException as e:
            logger.error(f"[PayPal Gateway Error] {method} {path} timed out: {e}")
            raise GatewayTimeoutError(f"PayPal request timed out after {self.settings.http_timeout}s")
        except httpx.HTTPError as e:
            logger.error(f"[PayPal Gateway Error] {method} {path}: {e}")
            raise GatewayError(f"PayPal request failed: {e}", retryable=True)

        if response.is_error:
            message, details = _gateway_error(response)
            logger.error(f"[PayPal Gateway Error] {method} {path} -> HTTP {response.status_code}: {message}")
            raise GatewayError(
                message,
                status_code=response.status_code,
                retryable=response.status_code >= 500,
                details=details
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise GatewayError("PayPal returned a response that is not valid JSON", status_code=response.status_code)


def _gateway_error(response: httpx.Response) -> tuple[str, Dict[str, Any]]:
    """Build a readable message from PayPal's error body."""
    fallback = f"Request failed with status code {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback, {}
    if not isinstance(body, dict):
        return fallback, {}

    details = {key: body[key] for key in ("name", "debug_id") if body.get(key)}
    message = body.get("message") or fallback
    issues = body.get("details")
    if isinstance(issues, list) and issues and isinstance(issues[0], dict):
        description = issues[0].get("description") or issues[0].get("issue")
        if description:
            message = f"{message}: {description}"
            details["issue"] = issues[0].get("issue")
    return message, details
