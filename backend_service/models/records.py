"""
Record models for the hosted backend.

This module contains Pydantic models for the auth API answers and the rows
read from the row API.
"""

import time
from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Authenticated user record returned by the auth API."""
    id: str = Field(description="Unique user id")
    email: Optional[str] = Field(default=None, description="User email address")


class AuthSession(BaseModel):
    """Tokens and identity obtained from a successful sign-in or refresh."""
    access_token: str = Field(description="Bearer token for the row API")
    refresh_token: Optional[str] = Field(default=None, description="Token used to renew the access token")
    expires_at: Optional[int] = Field(default=None, description="Access token expiry (epoch seconds)")
    user: Optional[Identity] = Field(default=None, description="Identity the session belongs to")

    @classmethod
    def from_token_response(cls, data: Dict[str, Any]) -> "AuthSession":
        """Build a session from an auth API token answer."""
        expires_at = data.get("expires_at")
        if expires_at is None and data.get("expires_in") is not None:
            expires_at = int(time.time()) + int(data["expires_in"])
        user = data.get("user")
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            user=Identity(**user) if user else None,
        )

    def is_expired(self, leeway: int = 10) -> bool:
        """Check whether the access token is expired (or about to be)."""
        if self.expires_at is None:
            return False
        return self.expires_at <= time.time() + leeway


class Profile(BaseModel):
    """Authorization record associated with an identity."""
    id: Optional[str] = Field(default=None, description="Identity id the profile belongs to")
    role: Optional[str] = Field(default=None, description="Role granted to the identity")


class VisitRecord(BaseModel):
    """A single recorded site visit."""
    created_at: datetime = Field(description="When the visit happened")
