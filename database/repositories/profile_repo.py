"""
Profile repository for account lookups and self-service updates.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import AuthMethod, Profile


class ProfileRepository:
    """Repository for Profile model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, profile_id: UUID) -> Profile | None:
        """Get profile by ID."""
        result = await self.session.execute(select(Profile).where(Profile.id == profile_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Profile | None:
        """Get profile by email (case-insensitive)."""
        result = await self.session.execute(
            select(Profile).where(func.lower(Profile.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_role(self, profile_id: UUID) -> str | None:
        result = await self.session.execute(
            select(Profile.role).where(Profile.id == profile_id)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        profile_id: UUID,
        email: str,
        full_name: str | None = None,
        auth_provider: str = AuthMethod.MAGIC_LINK.value,
    ) -> Profile:
        """Create a new profile with empty token counters."""
        profile = Profile(
            id=profile_id,
            email=email.strip().lower(),
            full_name=full_name,
            auth_provider=auth_provider,
            tokens_available=0,
            tokens_total_purchased=0,
            tokens_total_used=0,
            last_active_at=datetime.now(timezone.utc),
        )
        self.session.add(profile)
        await self.session.flush()
        return profile

    async def update_full_name(self, profile: Profile, full_name: str | None) -> Profile:
        profile.full_name = full_name
        await self.session.flush()
        return profile

    async def touch_last_active(self, profile_id: UUID) -> None:
        """Record that the profile was seen just now."""
        await self.session.execute(
            update(Profile)
            .where(Profile.id == profile_id)
            .values(last_active_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Profile))
        return result.scalar_one()

    async def mark_password_set(self, profile: Profile) -> Profile:
        profile.password_set = True
        profile.auth_provider = AuthMethod.PASSWORD.value
        await self.session.flush()
        return profile
