"""Session cookie handling and the per-request authorization capability.

The portal's login flow issues an HS256-signed session token holding the
member id and role. Routes resolve it once into a ``Principal`` and hand that
object to the services instead of re-reading the cookie.
"""

import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Header, HTTPException, Request, status
from jose import JWTError, jwt

from clubhub.config import settings

SENDER_ROLES = frozenset({"admin", "mentor"})
AUTOMATION_USER_ID = "automation"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""

    user_id: str
    role: str

    @property
    def can_send(self) -> bool:
        return self.role in SENDER_ROLES


def create_session_token(user_id: str, role: str) -> str:
    """Create a signed session token for the portal cookie."""
    expire = datetime.now(timezone.utc) + timedelta(days=settings.session_expire_days)
    payload = {
        "sub": user_id,
        "role": role,
        "exp": expire,
        "type": "session",
    }
    return jwt.encode(payload, settings.session_secret, algorithm="HS256")


def decode_session_token(token: str) -> Principal | None:
    """
    Decode and validate a session token.

    Returns the principal if valid, None if invalid, expired or incomplete.
    """
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=["HS256"])
    except JWTError:
        return None
    if payload.get("type") != "session" or not payload.get("sub"):
        return None
    return Principal(user_id=payload["sub"], role=payload.get("role") or "member")


async def get_principal(
    request: Request,
    x_push_secret: str | None = Header(default=None, alias="X-Push-Secret"),
) -> Principal | None:
    """Resolve the caller from the session cookie or the automation secret header."""
    if x_push_secret and settings.push_send_secret:
        if hmac.compare_digest(x_push_secret, settings.push_send_secret):
            return Principal(user_id=AUTOMATION_USER_ID, role="admin")

    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    return decode_session_token(token)


async def require_sender(
    principal: Principal | None = Depends(get_principal),
) -> Principal:
    """
    Require a caller allowed to send notifications.

    Raises:
        HTTPException: 401 without a valid session, 403 for other roles
    """
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": {
                    "code": "UNAUTHORIZED",
                    "message": "Valid session required",
                }
            },
        )

    if not principal.can_send:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": {
                    "code": "FORBIDDEN",
                    "message": "Admin or mentor access required",
                }
            },
        )

    return principal
