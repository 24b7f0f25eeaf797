"""
Pluggable image storage.

Supports two backends:
- Local file system (development)
- Cloudflare R2 (production)

Usage:
    from services.storage import get_storage

    storage = get_storage()
    stored = await storage.save("users/u1/projects/p1/room.jpg", data, "image/jpeg")
"""

import logging

from .base import StorageConfig, StorageObject, StorageProvider
from .local import LocalStorageProvider
from .r2 import R2StorageProvider

logger = logging.getLogger(__name__)

_storage: StorageProvider | None = None


def get_storage_config() -> StorageConfig:
    """Build the storage configuration from application settings."""
    from core.config import get_settings

    settings = get_settings()

    config = StorageConfig(
        backend=settings.storage_backend,
        public_url=settings.storage_public_url,
        local_path=settings.storage_local_path,
    )

    if settings.storage_backend == "r2":
        config.account_id = settings.r2_account_id
        config.access_key = settings.r2_access_key_id
        config.secret_key = settings.r2_secret_access_key
        config.bucket_name = settings.r2_bucket_name
        config.public_url = settings.r2_public_url or settings.storage_public_url

    return config


def get_storage() -> StorageProvider:
    """Get or create the configured storage backend."""
    global _storage

    if _storage is None:
        from core.config import get_settings

        config = get_storage_config()
        if config.backend == "r2" and get_settings().is_r2_configured:
            _storage = R2StorageProvider(config)
        else:
            if config.backend == "r2":
                logger.warning("R2 selected but not configured, falling back to local storage")
            _storage = LocalStorageProvider(config)
        logger.info(f"Using {_storage.name} storage backend")

    return _storage


def clear_storage_cache() -> None:
    global _storage
    _storage = None


__all__ = [
    "StorageConfig",
    "StorageObject",
    "StorageProvider",
    "LocalStorageProvider",
    "R2StorageProvider",
    "get_storage_config",
    "get_storage",
    "clear_storage_cache",
]
