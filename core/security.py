"""
Security utilities for session tokens and share passwords.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from jose import jwt, JWTError

from .config import get_settings
from .exceptions import AuthenticationError


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed session token.

    Args:
        data: Payload data to encode in the token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()

    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(days=settings.jwt_expire_days)

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    })

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_session_token(user_id: str, email: str, **claims: Any) -> str:
    """Create a session token for a profile."""
    return create_access_token({"sub": str(user_id), "email": email, **claims})


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a session token.

    Raises:
        AuthenticationError: If token is invalid or expired
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(details={"reason": str(e)})

    if not payload.get("sub"):
        raise AuthenticationError(details={"reason": "missing subject"})
    return payload


def extract_token_from_header(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an Authorization header.

    Supports "Bearer <token>" format.
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


def generate_share_token() -> str:
    """Generate an opaque, URL-safe share token."""
    return secrets.token_urlsafe(16)


def hash_password(password: str) -> str:
    """SHA-256 hex digest used for share passwords."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password: str, password_hash: str) -> bool:
    return hmac.compare_digest(hash_password(password), password_hash)
