"""
Local file system storage provider.

This provider stores files on the local file system.
Suitable for development and single-server deployments.
"""

import logging
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from core.exceptions import StorageError

from .base import StorageConfig, StorageObject, StorageProvider

logger = logging.getLogger(__name__)


class LocalStorageProvider(StorageProvider):
    """Local file system storage provider."""

    def __init__(self, config: StorageConfig):
        self.config = config
        self.base_path = Path(config.local_path)
        self._public_url = config.public_url

        # Ensure base directory exists
        self.base_path.mkdir(parents=True, exist_ok=True)

    @property
    def name(self) -> str:
        return "local"

    def _get_full_path(self, key: str) -> Path:
        """Get full file path for a key, refusing paths outside the base."""
        path = (self.base_path / key).resolve()
        if not path.is_relative_to(self.base_path.resolve()):
            logger.warning(f"Rejected storage key outside base path: {key}")
            raise StorageError()
        return path

    async def save(
        self,
        key: str,
        data: bytes,
        content_type: str = "image/jpeg",
        metadata: dict[str, Any] | None = None,
    ) -> StorageObject:
        """Write bytes to ``base_path/key``."""
        file_path = self._get_full_path(key)

        try:
            await aiofiles.os.makedirs(file_path.parent, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error(f"Failed to write {key}: {e}")
            raise StorageError() from e

        logger.debug(f"Saved file to local storage: {key}")

        return StorageObject(
            key=key,
            size=len(data),
            content_type=content_type,
            public_url=self.get_public_url(key),
            metadata=metadata or {},
        )

    async def load(self, key: str) -> bytes | None:
        file_path = self._get_full_path(key)

        if not file_path.exists():
            return None

        async with aiofiles.open(file_path, "rb") as f:
            return await f.read()

    async def delete(self, key: str) -> bool:
        file_path = self._get_full_path(key)

        if not file_path.exists():
            return False

        await aiofiles.os.remove(file_path)
        logger.debug(f"Deleted file from local storage: {key}")
        return True

    async def exists(self, key: str) -> bool:
        return self._get_full_path(key).exists()

    def get_public_url(self, key: str) -> str:
        """
        Public URL if configured, otherwise a path under the static mount.
        """
        if self._public_url:
            return f"{self._public_url.rstrip('/')}/{key}"
        return f"/uploads/{key}"
