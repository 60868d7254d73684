"""
Pydantic schemas for the mocked license endpoints.

These mirror the third-party APIs the extension was originally written
against, so only the fields the extension reads are modelled.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


# ============================================================================
# API key
# ============================================================================

class ApiKeyResponse(BaseModel):
    success: bool = True
    api_key: str
    expires: int  # Unix timestamp


# ============================================================================
# LemonSqueezy
# ============================================================================

class LicenseKeyInfo(BaseModel):
    status: str = "active"
    key: Any = None  # echoed back as sent


class LemonSqueezyActivateResponse(BaseModel):
    activated: bool = True
    license_key: LicenseKeyInfo
    meta: Dict[str, Any] = Field(default_factory=dict)


class LemonSqueezyValidateResponse(BaseModel):
    valid: bool = True
    meta: Dict[str, Any] = Field(default_factory=dict)


# ============================================================================
# Gumroad
# ============================================================================

class GumroadPurchase(BaseModel):
    email: str
    created_at: str


class GumroadVerifyResponse(BaseModel):
    success: bool = True
    purchase: GumroadPurchase
