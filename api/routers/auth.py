"""
Authentication and profile endpoints.

Endpoints:
- POST /api/auth/check-user - Does this email have an account (public)
- POST /api/auth/send-magic-link - Email a one-time sign-in link (public)
- GET /api/auth/profile - Caller's profile
- POST /api/auth/profile - Create the caller's profile if missing
- PATCH /api/auth/profile - Update the display name
- GET /api/auth/set-password - Whether the caller has a password
- POST /api/auth/set-password - Add a password to the caller's account
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import RequestContext, get_cooldowns, get_request_context, require_db_session
from api.schemas.auth import (
    CheckUserRequest,
    CheckUserResponse,
    CreateProfileRequest,
    CreateProfileResponse,
    PasswordStatusResponse,
    ProfileInfo,
    ProfileResponse,
    SendMagicLinkRequest,
    SendMagicLinkResponse,
    SetPasswordRequest,
    SetPasswordResponse,
    UpdateProfileRequest,
)
from core.exceptions import NotFoundError
from database.models import AuthMethod, TransactionType
from database.repositories import ProfileRepository
from services import magic_link
from services.rate_limit import CooldownService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/check-user", response_model=CheckUserResponse)
async def check_user(
    request: CheckUserRequest,
    session: AsyncSession = Depends(require_db_session),
):
    """Report whether an email is registered and how it signs in."""
    status = await magic_link.check_user(ProfileRepository(session), request.email)
    return CheckUserResponse(
        exists=status.exists,
        has_password=status.has_password,
        auth_method=status.auth_method,
    )


@router.post("/send-magic-link", response_model=SendMagicLinkResponse)
async def send_magic_link(
    request: SendMagicLinkRequest,
    cooldowns: CooldownService = Depends(get_cooldowns),
):
    """Send a magic link through the auth service."""
    result = await magic_link.send_magic_link(
        request.email,
        source=request.source,
        return_url=request.return_url,
        action=request.action,
        cooldowns=cooldowns,
    )
    return SendMagicLinkResponse(**result)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(ctx: RequestContext = Depends(get_request_context)):
    """Return the caller's profile and mark it active."""
    profile = await ctx.profiles.get_by_id(ctx.user.id)
    if profile is None:
        return ProfileResponse(exists=False)

    await ctx.profiles.touch_last_active(profile.id)
    return ProfileResponse(exists=True, profile=ProfileInfo.model_validate(profile))


@router.post("/profile", response_model=CreateProfileResponse)
async def create_profile(
    request: CreateProfileRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    """
    Create the caller's profile with the signup bonus.

    Calling it again for an existing profile changes nothing.
    """
    existing = await ctx.profiles.get_by_id(ctx.user.id)
    if existing is not None:
        return CreateProfileResponse(
            message="Profile already exists",
            profile=ProfileInfo.model_validate(existing),
        )

    profile = await ctx.profiles.create(
        profile_id=ctx.user.id,
        email=ctx.user.email,
        full_name=request.full_name or ctx.user.raw_payload.get("full_name"),
        auth_provider=request.auth_provider or AuthMethod.MAGIC_LINK.value,
    )

    bonus = ctx.settings.signup_bonus_tokens
    if bonus > 0:
        await ctx.ledger.credit(
            profile.id,
            bonus,
            type=TransactionType.BONUS,
            description="Tokens de bienvenida",
        )
    await ctx.session.refresh(profile)

    logger.info(f"Created profile {profile.id} with {bonus} bonus tokens")
    return CreateProfileResponse(
        message="Perfil creado exitosamente",
        profile=ProfileInfo.model_validate(profile),
    )


@router.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    request: UpdateProfileRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    profile = await ctx.profiles.get_by_id(ctx.user.id)
    if profile is None:
        raise NotFoundError("Perfil no encontrado")

    full_name = request.full_name.strip() if request.full_name else None
    profile = await ctx.profiles.update_full_name(profile, full_name or None)
    return ProfileResponse(exists=True, profile=ProfileInfo.model_validate(profile))


@router.get("/set-password", response_model=PasswordStatusResponse)
async def get_password_status(ctx: RequestContext = Depends(get_request_context)):
    status = await magic_link.check_user(ctx.profiles, ctx.user.email)
    return PasswordStatusResponse(
        has_password=status.has_password,
        auth_method=status.auth_method,
        email=ctx.user.email,
    )


@router.post("/set-password", response_model=SetPasswordResponse)
async def set_password(
    request: SetPasswordRequest,
    ctx: RequestContext = Depends(get_request_context),
):
    """Set a password so the account can also sign in without a magic link."""
    await magic_link.set_password(
        ctx.profiles,
        ctx.user.id,
        request.password,
        request.confirm_password,
    )
    return SetPasswordResponse(message="Contraseña establecida exitosamente")
