"""
Core Authentication Schemas.

Pydantic models for passport request/response validation.
"""

from typing import Any

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login request payload."""

    username: str = Field(..., min_length=1, description="Admin username")
    password: str = Field(..., min_length=1, description="Plain text password")


class TokenData(BaseModel):
    """Token issued on successful login."""

    access_token: str = Field(..., description="Signed JWT")
    token_type: str = Field("bearer", description="Authorization scheme")
    expires_in: int = Field(..., description="Seconds until the token expires")


class AdminProfile(BaseModel):
    """Claims of the authenticated admin."""

    adminid: str = Field(..., description="Admin identifier")
    claims: dict[str, Any] = Field(default_factory=dict, description="All token claims")
