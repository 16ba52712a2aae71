"""Who is calling the backend.

The wizard and the orders client only need something with a
`bearer_token`. A `Session` is the usual thing handed to them.
"""

import base64
import json
import logging
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class BearerCredential(Protocol):
    @property
    def bearer_token(self) -> str | None:
        ...


class AuthUser:
    def __init__(
        self,
        *,
        id: str,
        username: str,
        email: str,
        is_premium: bool = False,
        is_email_verified: bool = False,
        premium_ends_at: str | None = None,
    ) -> None:
        self.id = id
        self.username = username
        self.email = email
        self.is_premium = is_premium
        self.is_email_verified = is_email_verified
        self.premium_ends_at = premium_ends_at

    def __repr__(self) -> str:
        return f"<AuthUser(id={self.id}, username={self.username})>"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthUser":
        return cls(
            id=str(data.get("id") or data.get("sub") or ""),
            username=data.get("username") or "",
            email=data.get("email") or "",
            is_premium=bool(data.get("isPremium", False)),
            is_email_verified=bool(data.get("isEmailVerified", False)),
            premium_ends_at=data.get("premiumEndsAt"),
        )


def decode_claims(token: str) -> dict[str, Any] | None:
    """Payload of a JWT, unverified. The backend does the verifying."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload))
    except ValueError:
        logger.debug("Token payload is not decodable.")
        return None
    return claims if isinstance(claims, dict) else None


class Session:
    def __init__(
        self,
        access_token: str | None = None,
        user: AuthUser | None = None,
    ) -> None:
        self.access_token = access_token
        self.user = user

    @classmethod
    def from_token(cls, token: str | None) -> "Session":
        if not token:
            return cls()
        claims = decode_claims(token)
        user = AuthUser.from_dict(claims) if claims else None
        return cls(access_token=token, user=user)

    @property
    def bearer_token(self) -> str | None:
        return self.access_token

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def logout(self) -> None:
        self.access_token = None
        self.user = None
