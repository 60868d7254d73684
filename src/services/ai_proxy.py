"""
Pass-through proxy for OpenAI-compatible chat completions.

The extension sends an ordinary chat completion body; the relay swaps in the
configured upstream model, adds its own API key, and returns the upstream
completion untouched. Works with any OpenAI-compatible API (DeepSeek by default).
"""

from typing import Any, Dict, Optional

import httpx
from loguru import logger
from openai import AsyncOpenAI, APIStatusError, APITimeoutError, OpenAIError

from config.settings import Settings
from core.exceptions import ProxyError, ProxyNotConfiguredError, ValidationError


class CompletionProxy:
    """Forwards chat completion requests to the configured upstream."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = settings.ai_proxy_api_key
        self.base_url = settings.ai_proxy_base_url
        self.model = settings.ai_proxy_model
        self.timeout = settings.http_timeout
        self._transport = transport

    def _create_client(self) -> AsyncOpenAI:
        """Create an OpenAI client with explicit timeouts and no SDK retries."""
        timeout = httpx.Timeout(self.timeout)
        client_kwargs = {
            "api_key": self.api_key,
            "base_url": self.base_url,
            "timeout": timeout,
            "max_retries": 0,
        }
        if self._transport is not None:
            client_kwargs["http_client"] = httpx.AsyncClient(transport=self._transport, timeout=timeout)
        return AsyncOpenAI(**client_kwargs)

    async def complete(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Forward one chat completion.

        Args:
            body: OpenAI-style request; "model" is replaced, "stream" is refused

        Returns:
            Upstream completion as a JSON-ready dict

        Raises:
            ValidationError: No messages, or streaming requested
            ProxyNotConfiguredError: No upstream key configured
            ProxyError: Upstream failure
        """
        messages = body.get("messages")
        if not isinstance(messages, list) or not messages:
            raise ValidationError("Missing messages")
        if body.get("stream"):
            raise ValidationError("Streaming completions are not supported")
        if not self.api_key:
            raise ProxyNotConfiguredError("AI proxy is not configured")

        requested_model = body.get("model")
        extra = {k: v for k, v in body.items() if k not in ("model", "messages", "stream")}

        try:
            async with self._create_client() as client:
                completion = await client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    extra_body=extra or None,
                )
        except APITimeoutError:
            raise ProxyError(f"AI upstream timed out after {self.timeout}s")
        except APIStatusError as e:
            logger.error(f"[AI Proxy Error] upstream HTTP {e.status_code}")
            raise ProxyError(f"AI upstream returned HTTP {e.status_code}", {"status_code": e.status_code})
        except OpenAIError as e:
            logger.error(f"[AI Proxy Error] {type(e).__name__}")
            raise ProxyError(f"AI upstream request failed: {e}")

        logger.info(f"[AI Proxy] {requested_model or '<unset>'} -> {self.model}")
        return completion.model_dump(exclude_unset=True)
