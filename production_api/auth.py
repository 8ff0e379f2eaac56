"""
Bearer-token authentication for admin write routes.

Access and refresh tokens are JWTs signed with one shared secret. A request
whose access token fails verification may still go through when it carries a
valid ``refresh_token`` header; a fresh access token is then returned in the
``Authorization`` response header.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, Request, Response
from jose import JWTError, jwt

from production_api.config import Settings, get_settings
from production_api.errors import AuthError

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


@dataclass
class AdminIdentity:
    """Identity decoded from a verified token."""

    admin_id: str
    email: Optional[str] = None
    refreshed: bool = False


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def _encode(payload: dict, expires_in: timedelta, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    claims = {**payload, "iat": now, "exp": now + expires_in}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(
    admin_id: str, email: Optional[str] = None, settings: Optional[Settings] = None
) -> str:
    settings = settings or get_settings()
    return _encode(
        {"userId": admin_id, "email": email, "type": ACCESS_TOKEN},
        timedelta(minutes=settings.access_token_expire_minutes),
        settings,
    )


def create_refresh_token(
    admin_id: str, email: Optional[str] = None, settings: Optional[Settings] = None
) -> str:
    settings = settings or get_settings()
    return _encode(
        {"userId": admin_id, "email": email, "type": REFRESH_TOKEN},
        timedelta(days=settings.refresh_token_expire_days),
        settings,
    )


def decode_token(token: str, settings: Optional[Settings] = None) -> dict:
    """
    Verify signature and expiry.

    Raises:
        jose.JWTError if the token is invalid or expired
    """
    settings = settings or get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def _bearer(value: str) -> str:
    scheme, _, token = value.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return value.strip()


def authenticate(
    authorization: Optional[str],
    refresh_token: Optional[str],
    settings: Settings,
) -> tuple[AdminIdentity, Optional[str]]:
    """Resolve request credentials to an identity.

    Returns the identity and, when the refresh token was used, the newly
    minted access token. Raises AuthError otherwise.
    """
    if not authorization and not refresh_token:
        # 404 rather than 401 to stay compatible with existing clients.
        raise AuthError("Must be logged in", status_code=404)

    if not authorization:
        raise AuthError("Unable to verify token", status_code=403)

    try:
        payload = decode_token(_bearer(authorization), settings)
    except JWTError:
        payload = None
    if payload is not None and payload.get("type", ACCESS_TOKEN) == ACCESS_TOKEN:
        return (
            AdminIdentity(admin_id=str(payload.get("userId")), email=payload.get("email")),
            None,
        )

    if not refresh_token:
        raise AuthError("Token expired, and no refresh token provided", status_code=403)

    try:
        payload = decode_token(_bearer(refresh_token), settings)
    except JWTError as exc:
        raise AuthError("Invalid refresh token", status_code=403) from exc
    if payload.get("type") != REFRESH_TOKEN:
        raise AuthError("Invalid refresh token", status_code=403)

    admin_id = str(payload.get("userId"))
    new_token = create_access_token(admin_id, payload.get("email"), settings)
    logger.info("Issued refreshed access token for admin %s", admin_id)
    return (
        AdminIdentity(admin_id=admin_id, email=payload.get("email"), refreshed=True),
        new_token,
    )


def require_admin(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings),
) -> AdminIdentity:
    """FastAPI dependency guarding admin write routes."""
    identity, new_token = authenticate(
        request.headers.get("authorization"),
        request.headers.get("refresh_token") or request.headers.get("refresh-token"),
        settings,
    )
    if new_token:
        response.headers["Authorization"] = f"Bearer {new_token}"
    request.state.admin = identity
    return identity
