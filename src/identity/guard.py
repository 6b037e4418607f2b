"""Request guard — resolves the caller's bearer token into a SessionContext.

Routes never inspect tokens themselves. They depend on one of:

- ``current_session``: any signed-in user (401 otherwise)
- ``optional_session``: the session if there is one, else None
- ``require_admin``: an ``AdminCapability``; non-admins are turned away
- ``require_customer``: a signed-in user who is *not* an admin

Role lookups hit the UserRole repository on every request; admin status is
never cached in the session.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog
from fastapi import Depends, Header, HTTPException

from identity.account.roles import is_admin
from identity.auth import get_auth_provider
from identity.auth.port import AuthError
from identity.domain import identity

logger = structlog.get_logger(__name__)

HOME_PATH = "/"
AUTH_PATH = "/auth"
ADMIN_HOME_PATH = "/admin/dashboard"


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    email: str
    access_token: str
    full_name: str | None = None
    is_admin: bool = False


@dataclass(frozen=True)
class AdminCapability:
    """Proof that the current request was authorized as an admin."""

    user_id: str
    email: str
    issued_at: datetime = field(default_factory=lambda: datetime.now(UTC))


def _deny(status_code: int, message: str, redirect: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"message": message, "redirect": redirect})


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_session(access_token: str | None) -> SessionContext | None:
    """Look up the user behind ``access_token`` and their admin status."""
    if not access_token:
        return None

    try:
        user = get_auth_provider().get_user(access_token)
    except AuthError as exc:
        logger.warning("Session lookup failed", reason=str(exc))
        return None
    if user is None:
        return None

    with identity.domain_context():
        admin = is_admin(user.id)

    return SessionContext(
        user_id=user.id,
        email=user.email,
        access_token=access_token,
        full_name=user.full_name,
        is_admin=admin,
    )


async def optional_session(authorization: str | None = Header(default=None)) -> SessionContext | None:
    return resolve_session(bearer_token(authorization))


async def current_session(session: SessionContext | None = Depends(optional_session)) -> SessionContext:
    if session is None:
        raise _deny(401, "Please sign in to continue", AUTH_PATH)
    return session


async def require_admin(session: SessionContext = Depends(current_session)) -> AdminCapability:
    if not session.is_admin:
        logger.warning("Admin access denied", user_id=session.user_id)
        raise _deny(403, "You don't have permission to access the admin area", HOME_PATH)
    return AdminCapability(user_id=session.user_id, email=session.email)


async def require_customer(session: SessionContext = Depends(current_session)) -> SessionContext:
    if session.is_admin:
        raise _deny(403, "Admin accounts cannot place orders", ADMIN_HOME_PATH)
    return session
