"""
Session guard.

Resolves the caller's identity from the session cookie or from an
``Authorization: Bearer`` header. Both carry the same HS256 session token.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from fastapi import Depends, Request

from .config import get_settings
from .exceptions import AuthenticationError
from .security import extract_token_from_header, verify_token

logger = logging.getLogger(__name__)


@dataclass
class SessionUser:
    """Authenticated caller, constructed from the session token."""

    id: UUID  # profile id (sub claim)
    email: str
    raw_payload: dict = field(default_factory=dict)


def _read_token(request: Request) -> str | None:
    settings = get_settings()
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    return extract_token_from_header(request.headers.get("authorization"))


def resolve_session(request: Request) -> SessionUser | None:
    """Decode the request's session, returning None when there is none."""
    token = _read_token(request)
    if not token:
        return None

    try:
        payload = verify_token(token)
        user_id = UUID(str(payload["sub"]))
    except (AuthenticationError, ValueError) as e:
        logger.warning("Session verification failed: %s", e)
        return None

    return SessionUser(
        id=user_id,
        email=payload.get("email", ""),
        raw_payload=payload,
    )


# ============ FastAPI Dependencies ============


async def get_current_user(request: Request) -> SessionUser | None:
    """
    Get the current user from the session.

    Returns None if not authenticated (allows unauthenticated access).
    """
    return resolve_session(request)


async def require_current_user(
    user: SessionUser | None = Depends(get_current_user),
) -> SessionUser:
    """
    Require an authenticated user.

    Raises 401 if not authenticated.
    """
    if not user:
        raise AuthenticationError()
    return user
