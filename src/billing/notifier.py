"""
Best-effort forwarding of lifecycle notifications to the automation endpoint.

notify() never raises: delivery problems are logged and dropped, so the
webhook acknowledgment sent to PayPal cannot depend on them.
"""

from datetime import datetime, timezone
from typing import Optional

import httpx
from loguru import logger

from billing.models import NotificationRecord
from config.settings import Settings
from core.exceptions import ForwardingError


class AutomationNotifier:
    """Fire-and-forget side channel to the workflow automation webhook."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = settings.automation_webhook_url
        self.timeout = settings.http_timeout
        self._transport = transport

    async def notify(self, event_type: str, record: NotificationRecord) -> None:
        """Forward one record tagged with its event type. Never fails observably."""
        if not self.url:
            logger.debug(f"Automation webhook not configured, dropping {event_type}")
            return

        try:
            await self._forward(event_type, record)
        except ForwardingError as e:
            logger.bind(event_type=event_type, subscription_id=record.subscription_id).warning(
                f"Automation forward failed for {event_type}: {e.message}"
            )
            return

        logger.info(f"Forwarded {event_type} for {record.subscription_id}")

    async def _forward(self, event_type: str, record: NotificationRecord) -> None:
        body = {
            "event_type": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **record.to_payload(),
        }
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport
            ) as client:
                response = await client.post(self.url, json=body)
        except httpx.TimeoutException as e:
            raise ForwardingError(f"timed out after {self.timeout}s", {"error": str(e)})
        except httpx.HTTPError as e:
            raise ForwardingError(f"transport error: {e}")

        if response.is_error:
            raise ForwardingError(f"HTTP {response.status_code}", {"body": response.text[:200]})
