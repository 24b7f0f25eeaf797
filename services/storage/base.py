"""
Storage provider abstract base class and data types.

This module defines the interface that all storage backends must implement.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class StorageConfig:
    """Storage backend configuration."""

    # Backend type: local, r2
    backend: str = "local"

    bucket_name: str = "decollage-images"
    public_url: str | None = None  # CDN/public URL prefix

    # R2 credentials
    account_id: str | None = None
    access_key: str | None = None
    secret_key: str | None = None

    # Local storage settings
    local_path: str = "uploads"


@dataclass
class StorageObject:
    """Storage object metadata."""

    key: str  # Storage path/key
    size: int = 0  # Size in bytes
    content_type: str = "image/jpeg"
    public_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class StorageProvider(ABC):
    """
    Abstract base class for storage backends.

    All storage providers must implement this interface.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name: local, r2."""
        pass

    @abstractmethod
    async def save(
        self,
        key: str,
        data: bytes,
        content_type: str = "image/jpeg",
        metadata: dict[str, Any] | None = None,
    ) -> StorageObject:
        """
        Save data to storage.

        Args:
            key: Storage key/path
            data: Raw bytes to store
            content_type: MIME type
            metadata: Optional metadata dict

        Returns:
            StorageObject with storage info

        Raises:
            StorageError: if the backend rejects the write
        """
        pass

    @abstractmethod
    async def load(self, key: str) -> bytes | None:
        """
        Load data from storage.

        Returns:
            Raw bytes or None if not found
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def get_public_url(self, key: str) -> str:
        """Public access URL for a key."""
        pass
