"""
Mocked license verification endpoints.

Stateless echo responders standing in for the LemonSqueezy, Gumroad and
API-key services the extension calls. Nothing is checked or stored.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request
from loguru import logger

from api.schemas import (
    ApiKeyResponse,
    GumroadPurchase,
    GumroadVerifyResponse,
    LemonSqueezyActivateResponse,
    LemonSqueezyValidateResponse,
    LicenseKeyInfo,
)
from config.constants import API_KEY_TTL_SECONDS, GUMROAD_ACTIVATED_EMAIL, PLACEHOLDER_AI_API_KEY

router = APIRouter(tags=["licenses"])


async def read_body(request: Request) -> Dict[str, Any]:
    """Read a JSON or form-encoded body; anything unreadable counts as empty."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return dict(form)
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _redact(body: Dict[str, Any]) -> Dict[str, Any]:
    return {k: ("***" if "key" in k.lower() else v) for k, v in body.items()}


@router.post("/get-api-key", response_model=ApiKeyResponse)
async def get_api_key(request: Request):
    """Hand out the AI API key placeholder with a 30 day expiry."""
    body = await read_body(request)
    logger.info(f"[API Key Request] fields={sorted(body)}")
    return ApiKeyResponse(
        api_key=PLACEHOLDER_AI_API_KEY,
        expires=int(time.time()) + API_KEY_TTL_SECONDS
    )


@router.post("/lemonsqueezy/activate", response_model=LemonSqueezyActivateResponse)
async def lemonsqueezy_activate(request: Request):
    """Mimics https://api.lemonsqueezy.com/v1/licenses/activate."""
    body = await read_body(request)
    logger.info(f"[LemonSqueezy Activate] {_redact(body)}")
    return LemonSqueezyActivateResponse(license_key=LicenseKeyInfo(key=body.get("license_key")))


@router.post("/lemonsqueezy/validate", response_model=LemonSqueezyValidateResponse)
async def lemonsqueezy_validate(request: Request):
    """Mimics https://api.lemonsqueezy.com/v1/licenses/validate."""
    body = await read_body(request)
    logger.info(f"[LemonSqueezy Validate] {_redact(body)}")
    return LemonSqueezyValidateResponse()


@router.post("/gumroad/verify", response_model=GumroadVerifyResponse)
async def gumroad_verify(request: Request):
    """Mimics https://api.gumroad.com/v2/licenses/verify."""
    body = await read_body(request)
    logger.info(f"[Gumroad Verify] {_redact(body)}")
    return GumroadVerifyResponse(
        purchase=GumroadPurchase(
            email=GUMROAD_ACTIVATED_EMAIL,
            created_at=datetime.now(timezone.utc).isoformat()
        )
    )
