# Overview: Service-layer operations for session tokens; issues and verifies signed tenant-scoped tokens.

"""
Session Token Codec with Multi-Tenant Support

Session tokens are HS256-signed JWTs carrying the user id and the
organization id (tenant context). Verification is stateless: nothing is
stored server-side and nothing is looked up on verify, so a token stays
valid until it expires even if its user or organization is later removed.

SECURITY NOTES:
- Signing key is app.config["JWT_SECRET"], required at startup (no fallback)
- Only HS256 is accepted on decode
- 24-hour absolute lifetime; a token is rejected at or after its exp second
- No revocation list
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from flask import current_app
from jose import jwt, JWTError

from ..time_utils import utcnow, to_epoch_seconds, from_epoch_seconds


SESSION_LIFETIME = timedelta(hours=24)
TOKEN_ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """Raised when a token is malformed, tampered with, or expired."""
    pass


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by a verified session token."""
    user_id: str
    organization_id: str
    issued_at: datetime
    expires_at: datetime


def _signing_key() -> str:
    return current_app.config["JWT_SECRET"]


def issue_token(user_id: str, organization_id: str, *, now: datetime | None = None) -> str:
    """
    Issue a signed session token scoped to (user_id, organization_id).

    The token expires exactly SESSION_LIFETIME after issuance.
    """
    if not user_id or not organization_id:
        raise ValueError("user_id and organization_id are required to issue a token")

    issued_at = to_epoch_seconds(now or utcnow())
    claims = {
        "sub": str(user_id),
        "org_id": str(organization_id),
        "iat": issued_at,
        "exp": issued_at + int(SESSION_LIFETIME.total_seconds()),
    }
    return jwt.encode(claims, _signing_key(), algorithm=TOKEN_ALGORITHM)


def _int_claim(claims: dict, name: str) -> int:
    value = claims.get(name)
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidTokenError(f"Token claim {name} is missing or invalid")
    return value


def _str_claim(claims: dict, name: str) -> str:
    value = claims.get(name)
    if not isinstance(value, str) or not value:
        raise InvalidTokenError(f"Token claim {name} is missing or invalid")
    return value


def verify_token(token: str, *, now: datetime | None = None) -> TokenClaims:
    """
    Verify a session token and return its claims verbatim.

    Raises InvalidTokenError if:
    - The token is empty or not a JWT
    - The signature does not match the signing key
    - Required claims (sub, org_id, iat, exp) are missing
    - The current time is at or after exp

    Expiry is checked here rather than by jose so the boundary is exact
    and the clock can be injected.
    """
    if not token or not isinstance(token, str):
        raise InvalidTokenError("Token missing")

    try:
        claims = jwt.decode(
            token,
            _signing_key(),
            algorithms=[TOKEN_ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError as exc:
        raise InvalidTokenError("Token signature or format invalid") from exc

    user_id = _str_claim(claims, "sub")
    organization_id = _str_claim(claims, "org_id")
    issued_at = _int_claim(claims, "iat")
    expires_at = _int_claim(claims, "exp")

    if expires_at <= issued_at:
        raise InvalidTokenError("Token lifetime invalid")

    if to_epoch_seconds(now or utcnow()) >= expires_at:
        raise InvalidTokenError("Token expired")

    return TokenClaims(
        user_id=user_id,
        organization_id=organization_id,
        issued_at=from_epoch_seconds(issued_at),
        expires_at=from_epoch_seconds(expires_at),
    )
