"""PayPal OAuth token exchange."""

from typing import Optional

import httpx
from loguru import logger

from config.constants import PAYPAL_TOKEN_PATH
from config.settings import Settings
from core.exceptions import AuthError


class PayPalTokenProvider:
    """
    Fetches short-lived bearer tokens with the client_credentials grant.

    Tokens are not cached: every billing call asks for a fresh one. At the
    relay's call volume the extra round trip is an accepted latency cost.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    async def get_access_token(self) -> str:
        """
        Exchange the configured client id and secret for an access token.

        Returns:
            Bearer token string

        Raises:
            AuthError: On transport failure, timeout, non-2xx response,
                or a response without an access_token
        """
        url = f"{self.settings.paypal_api_url}{PAYPAL_TOKEN_PATH}"
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.http_timeout),
                transport=self._transport
            ) as client:
                response = await client.post(
                    url,
                    data={"grant_type": "client_credentials"},
                    auth=(self.settings.paypal_client_id, self.settings.paypal_secret),
                    headers={"Accept": "application/json"},
                )
        except httpx.TimeoutException as e:
            logger.error(f"[PayPal Token Error] timed out: {e}")
            raise AuthError("PayPal token request timed out", {"retryable": True})
        except httpx.HTTPError as e:
            logger.error(f"[PayPal Token Error] {e}")
            raise AuthError(f"PayPal token request failed: {e}")

        if response.is_error:
            message = _token_error_message(response)
            logger.error(f"[PayPal Token Error] HTTP {response.status_code}: {message}")
            raise AuthError(message, {"status_code": response.status_code})

        try:
            body = response.json()
        except ValueError:
            body = {}
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise AuthError("PayPal token response did not contain an access_token")

        return token


def _token_error_message(response: httpx.Response) -> str:
    """Prefer PayPal's error_description over the bare status line."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if isinstance(body, dict):
        description = body.get("error_description") or body.get("error")
        if description:
            return str(description)
    return f"Request failed with status code {response.status_code}"
