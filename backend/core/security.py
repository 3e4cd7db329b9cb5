# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Caller identity.  Tokens are issued by the identity service; this module
only verifies them and turns them into a :class:`Caller`.

Responsibilities
----------------
1. JWT decoding / verification              (PyJWT / HS256)
2. Client IP extraction                     (X-Forwarded-For aware)
3. FastAPI dependency guard                 (get_current_caller)
"""

from dataclasses import dataclass
from typing import Optional

import jwt as _jwt        # PyJWT
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.config import settings
from database import get_db


@dataclass(frozen=True)
class Caller:
    """Who is asking, from which kind of device, from where."""

    user_uuid: str
    device_type: Optional[int]
    ip_address: str


# ---------------------------------------------------------------------------
# 1.  JWT – access tokens
# ---------------------------------------------------------------------------


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a JWT.  Raises HTTP 401 on any failure (expired,
    bad signature, malformed, missing ``sub``).
    """
    try:
        payload = _jwt.decode(token, settings.secret_key, algorithms=["HS256"])
    except (_jwt.ExpiredSignatureError, _jwt.InvalidTokenError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return payload


# ---------------------------------------------------------------------------
# 2.  IP Address extraction
# ---------------------------------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from the request.
    Checks X-Forwarded-For header first (for proxies), then falls back to client host.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


# ---------------------------------------------------------------------------
# 3.  FastAPI dependency guard
# ---------------------------------------------------------------------------

# Only used by the auto-generated OpenAPI docs; login happens elsewhere.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/identity/connect/token")


def get_current_caller(
    request: Request,
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Caller:
    """
    Dependency: decode the JWT, make sure the user row exists, and bundle
    the user id with the device type and source IP of this request.

    Raises 401 if the token is invalid or the user is unknown.
    """
    payload = decode_access_token(token)

    # Lazy import to avoid circular dependency at module load time
    from models.user import User  # noqa: E402

    user = db.query(User).filter(User.uuid == payload["sub"]).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    try:
        device_type = int(payload["devicetype"])
    except (KeyError, TypeError, ValueError):
        device_type = None

    return Caller(
        user_uuid=user.uuid,
        device_type=device_type,
        ip_address=get_client_ip(request),
    )
