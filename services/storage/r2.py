"""
Cloudflare R2 storage provider.

R2 is S3-compatible, so we use boto3 for the client. boto3 is blocking, so
every call runs in the default executor.
"""

import asyncio
import logging
from functools import partial
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import StorageError

from .base import StorageConfig, StorageObject, StorageProvider

logger = logging.getLogger(__name__)


class R2StorageProvider(StorageProvider):
    """Cloudflare R2 storage provider."""

    def __init__(self, config: StorageConfig):
        self.config = config
        self.bucket_name = config.bucket_name
        self._public_url = config.public_url

        endpoint_url = f"https://{config.account_id}.r2.cloudflarestorage.com"
        self._client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            config=Config(
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "standard"},
            ),
        )

    @property
    def name(self) -> str:
        return "r2"

    async def _run(self, func, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, **kwargs))

    async def save(
        self,
        key: str,
        data: bytes,
        content_type: str = "image/jpeg",
        metadata: dict[str, Any] | None = None,
    ) -> StorageObject:
        try:
            await self._run(
                self._client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
                Metadata={k: str(v) for k, v in (metadata or {}).items()},
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload {key} to R2: {e}")
            raise StorageError() from e

        return StorageObject(
            key=key,
            size=len(data),
            content_type=content_type,
            public_url=self.get_public_url(key),
            metadata=metadata or {},
        )

    async def load(self, key: str) -> bytes | None:
        try:
            response = await self._run(self._client.get_object, Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            logger.error(f"Failed to read {key} from R2: {e}")
            raise StorageError() from e
        except BotoCoreError as e:
            logger.error(f"Failed to read {key} from R2: {e}")
            raise StorageError() from e
        body = response["Body"]
        return await asyncio.get_running_loop().run_in_executor(None, body.read)

    async def delete(self, key: str) -> bool:
        try:
            await self._run(self._client.delete_object, Bucket=self.bucket_name, Key=key)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete {key} from R2: {e}")
            return False

    async def exists(self, key: str) -> bool:
        try:
            await self._run(self._client.head_object, Bucket=self.bucket_name, Key=key)
            return True
        except ClientError:
            return False

    def get_public_url(self, key: str) -> str:
        if self._public_url:
            return f"{self._public_url.rstrip('/')}/{key}"
        return f"https://{self.config.account_id}.r2.cloudflarestorage.com/{self.bucket_name}/{key}"
