"""
Sign-in through the external auth service.

Looks up whether an email already has an account, asks the auth service to
send a one-time magic link, and lets a signed-in user add a password.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from urllib.parse import urlencode
from uuid import UUID

import httpx

from core.config import get_settings
from core.exceptions import NotFoundError, UpstreamError, ValidationError
from database.models import AuthMethod, Profile
from database.repositories import ProfileRepository

from .rate_limit import CooldownService

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_SOURCE = "quick_auth_modal"
DEFAULT_ACTION = "login"

# Upstream error fragment -> message shown to the user
_UPSTREAM_ERRORS = (
    ("rate limit", "Demasiados intentos. Intenta nuevamente en unos minutos"),
    ("invalid email", "Email inválido"),
    ("Email not confirmed", "Confirma tu email primero"),
)
_GENERIC_SEND_ERROR = "Error al enviar el código"


@dataclass
class UserStatus:
    exists: bool = False
    has_password: bool = False
    auth_method: str = AuthMethod.MAGIC_LINK.value


def map_upstream_error(message: str) -> str:
    """Translate an auth-service error into a user-facing message."""
    for fragment, user_message in _UPSTREAM_ERRORS:
        if fragment in message:
            return user_message
    return _GENERIC_SEND_ERROR


def build_redirect_url(return_url: str | None, action: str | None) -> str:
    params = {}
    if return_url:
        params["next"] = return_url
    if action:
        params["action"] = action

    redirect = f"{get_settings().site_url.rstrip('/')}/auth/callback"
    if params:
        redirect += f"?{urlencode(params)}"
    return redirect


async def check_user(profiles: ProfileRepository, email: str | None) -> UserStatus:
    """Report whether ``email`` has an account and how it signs in."""
    if not email:
        raise ValidationError("Email is required")

    profile = await profiles.get_by_email(email.lower())
    if profile is None:
        return UserStatus()

    if profile.password_set:
        return UserStatus(exists=True, has_password=True, auth_method=AuthMethod.PASSWORD.value)
    if profile.auth_provider == AuthMethod.GOOGLE.value:
        return UserStatus(exists=True, auth_method=AuthMethod.GOOGLE.value)
    return UserStatus(exists=True)


async def send_magic_link(
    email: str | None,
    source: str | None = None,
    return_url: str | None = None,
    action: str | None = None,
    cooldowns: CooldownService | None = None,
) -> dict:
    """
    Ask the auth service to email a one-time sign-in link.

    Raises:
        ValidationError: missing or malformed email, or upstream rejection
        RateLimitError: a link was sent to this email very recently
    """
    if not email:
        raise ValidationError("Email es requerido")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Formato de email inválido")

    if cooldowns is not None:
        await cooldowns.magic_link(email)

    settings = get_settings()
    payload = {
        "email": email,
        "create_user": True,
        "email_redirect_to": build_redirect_url(return_url, action),
        "data": {
            "source": source or DEFAULT_SOURCE,
            "action": action or DEFAULT_ACTION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "return_url": return_url,
        },
    }
    headers = {"Content-Type": "application/json"}
    if settings.auth_service_api_key:
        headers["apikey"] = settings.auth_service_api_key

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{settings.auth_service_url.rstrip('/')}/otp",
                json=payload,
                headers=headers,
                timeout=10.0,
            )
    except httpx.HTTPError as e:
        logger.error(f"Magic link request failed: {e}")
        raise ValidationError(_GENERIC_SEND_ERROR) from e

    if response.status_code >= 400:
        try:
            body = response.json()
        except ValueError:
            body = {}
        upstream_message = str(body.get("msg") or body.get("message") or body.get("error") or response.text)
        logger.error(f"Magic link send error: {response.status_code} {upstream_message}")
        raise ValidationError(map_upstream_error(upstream_message))

    logger.info(f"Magic link sent to {email} (source={source}, action={action})")
    return {
        "success": True,
        "message": "Código enviado exitosamente",
        "email": email,
    }


MIN_PASSWORD_LENGTH = 8
_SET_PASSWORD_ERROR = "Error al establecer la contraseña"


def _service_headers() -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    api_key = get_settings().auth_service_api_key
    if api_key:
        headers["apikey"] = api_key
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


def validate_new_password(password: str | None, confirm_password: str | None) -> str:
    if not password or not confirm_password:
        raise ValidationError("Password and confirmation are required")
    if password != confirm_password:
        raise ValidationError("Las contraseñas no coinciden")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres")
    return password


async def set_password(
    profiles: ProfileRepository,
    profile_id: UUID,
    password: str | None,
    confirm_password: str | None,
) -> Profile:
    """
    Give a signed-in account a password.

    The password itself is stored by the auth service; the profile only
    records that one exists.

    Raises:
        ValidationError: missing, mismatched or short password, or upstream rejection
        NotFoundError: the caller has no profile
        UpstreamError: the auth service could not be reached
    """
    password = validate_new_password(password, confirm_password)

    profile = await profiles.get_by_id(profile_id)
    if profile is None:
        raise NotFoundError("Perfil no encontrado")

    settings = get_settings()
    payload = {
        "password": password,
        "user_metadata": {
            "password_set": True,
            "auth_method": AuthMethod.PASSWORD.value,
        },
    }

    try:
        async with httpx.AsyncClient() as client:
            response = await client.put(
                f"{settings.auth_service_url.rstrip('/')}/admin/users/{profile.id}",
                json=payload,
                headers=_service_headers(),
                timeout=10.0,
            )
    except httpx.HTTPError as e:
        logger.error(f"Set password request failed for {profile.id}: {e}")
        raise UpstreamError(_SET_PASSWORD_ERROR) from e

    if response.status_code >= 500:
        logger.error(f"Set password upstream error: {response.status_code} {response.text}")
        raise UpstreamError(_SET_PASSWORD_ERROR)
    if response.status_code >= 400:
        try:
            body = response.json()
        except ValueError:
            body = {}
        upstream_message = body.get("msg") or body.get("message") or body.get("error")
        logger.warning(f"Set password rejected for {profile.id}: {response.status_code} {upstream_message}")
        raise ValidationError(str(upstream_message) if upstream_message else _SET_PASSWORD_ERROR)

    profile = await profiles.mark_password_set(profile)
    logger.info(f"Password set for profile {profile.id}")
    return profile
