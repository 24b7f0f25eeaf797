"""
Redis-backed cooldowns.

Redis keys:
- cooldown:magic_link:{email} -> "1" (expires after magic_link_cooldown_seconds)
- cooldown:generation:{user_id} -> "1" (expires after generation_cooldown_seconds)

Without Redis, or while it is unreachable, no cooldown is enforced.
"""

import logging

from redis.exceptions import RedisError

from core.config import get_settings
from core.exceptions import RateLimitError

logger = logging.getLogger(__name__)


class CooldownService:
    """Per-key cooldowns using ``SET NX EX``."""

    def __init__(self, redis_client=None):
        self._redis = redis_client

    @staticmethod
    def _key(scope: str, subject: str) -> str:
        return f"cooldown:{scope}:{subject}"

    async def hit(self, scope: str, subject: str, seconds: int) -> None:
        """
        Start a cooldown for ``subject``.

        Raises:
            RateLimitError: a cooldown for the same subject is still running
        """
        if not self._redis or seconds <= 0:
            return

        try:
            acquired = await self._redis.set(self._key(scope, subject), "1", ex=seconds, nx=True)
        except RedisError as e:
            logger.warning(f"Cooldown check skipped for {scope}:{subject}: {e}")
            return

        if not acquired:
            logger.info(f"Cooldown active for {scope}:{subject}")
            raise RateLimitError(details={"retry_after": seconds})

    async def magic_link(self, email: str) -> None:
        await self.hit("magic_link", email.lower(), get_settings().magic_link_cooldown_seconds)

    async def generation(self, user_id: str) -> None:
        await self.hit("generation", user_id, get_settings().generation_cooldown_seconds)
