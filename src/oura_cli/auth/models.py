"""
Pydantic models for OAuth credential material.

This module defines the persisted credential record, the token pair returned
by the token endpoint and the one-shot result captured by the callback
listener.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def parse_expiry(value: Any) -> Optional[datetime]:
    """Parse a stored ISO-8601 expiry into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        expiry = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        expiry = datetime.fromisoformat(text)
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return expiry.astimezone(timezone.utc)


def mask_credential(value: str) -> str:
    """Mask a credential for display, keeping the first and last 4 characters."""
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}{'*' * min(len(value) - 8, 8)}{value[-4:]}"


class TokenPair(BaseModel):
    """Token endpoint response, in either grant mode."""
    access_token: str = Field(min_length=1)
    refresh_token: Optional[str] = None
    expires_in: int = Field(ge=0)
    token_type: str = "Bearer"
    scope: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class AuthorizationResult(BaseModel):
    """Outcome of the browser redirect: either a code or a provider error."""
    code: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def exactly_one_outcome(self) -> "AuthorizationResult":
        if (self.code is None) == (self.error is None):
            raise ValueError("AuthorizationResult needs exactly one of code or error")
        return self

    @property
    def ok(self) -> bool:
        return self.code is not None


class Credential(BaseModel):
    """
    The single persisted credential record.

    ``expires_at`` is always absolute. It is computed from the provider's
    relative ``expires_in`` at the moment tokens are received, never later.
    """
    client_id: str = ""
    client_secret: str = ""
    access_token: str = ""
    refresh_token: str = ""
    expires_at: Optional[datetime] = None

    @field_validator("expires_at", mode="before")
    @classmethod
    def normalize_expiry(cls, v: Any) -> Optional[datetime]:
        return parse_expiry(v)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    @classmethod
    def from_token_pair(
        cls,
        client_id: str,
        client_secret: str,
        tokens: TokenPair,
        issued_at: datetime,
    ) -> "Credential":
        """Build the first credential after a successful code exchange."""
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token or "",
            expires_at=issued_at + timedelta(seconds=tokens.expires_in),
        )

    def merge_refresh(self, tokens: TokenPair, issued_at: datetime) -> "Credential":
        """
        Apply a refresh response to this credential.

        Client credentials are carried over unchanged. A refresh token that is
        missing or empty in the response keeps the prior value; the provider
        does not distinguish the two.
        """
        return self.model_copy(
            update={
                "access_token": tokens.access_token,
                "refresh_token": tokens.refresh_token or self.refresh_token,
                "expires_at": parse_expiry(issued_at + timedelta(seconds=tokens.expires_in)),
            }
        )

    def to_record(self) -> Dict[str, str]:
        """Serialize to the on-disk JSON shape."""
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expiry": self.expires_at.isoformat() if self.expires_at else "",
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Credential":
        """Deserialize from the on-disk JSON shape; unknown keys are ignored."""
        return cls(
            client_id=record.get("client_id") or "",
            client_secret=record.get("client_secret") or "",
            access_token=record.get("access_token") or "",
            refresh_token=record.get("refresh_token") or "",
            expires_at=record.get("expiry") or None,
        )
