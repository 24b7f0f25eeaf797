"""
Runware staging provider.

Talks to Runware's task API over HTTP: one ``imageInference`` task with the
room photo as seed image, then downloads the returned image URL.
"""

import base64
import logging
import time
from uuid import uuid4

import httpx

from core.config import get_settings

from .base import (
    BaseStagingProvider,
    ProviderName,
    RunwareMetadata,
    StagingRequest,
    StagingResult,
)

logger = logging.getLogger(__name__)

# Runware rejects longer prompts
MAX_PROMPT_LENGTH = 500
DEFAULT_SIZE = 1024
MAX_SIZE = 2048
SEED_IMAGE_STRENGTH = 0.7


def _round_dimension(value: int | None) -> int:
    """Runware wants multiples of 64 within 128..2048."""
    if not value:
        return DEFAULT_SIZE
    rounded = ((value + 32) // 64) * 64
    return max(128, min(rounded, MAX_SIZE))


class RunwareStagingProvider(BaseStagingProvider):
    """Staging through the Runware HTTP API."""

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        model: str | None = None,
    ):
        settings = get_settings()
        self._api_key = api_key or settings.runware_api_key
        self._api_url = api_url or settings.runware_api_url
        self._model = model or settings.runware_model
        self._timeout = settings.provider_timeout_seconds

    @property
    def name(self) -> str:
        return ProviderName.RUNWARE.value

    @property
    def model(self) -> str:
        return self._model

    @property
    def is_available(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def _build_task(self, request: StagingRequest, task_uuid: str) -> dict:
        encoded = base64.b64encode(request.image_data).decode("ascii")
        return {
            "taskType": "imageInference",
            "taskUUID": task_uuid,
            "positivePrompt": request.prompt[:MAX_PROMPT_LENGTH],
            "seedImage": f"data:{request.mime_type};base64,{encoded}",
            "strength": SEED_IMAGE_STRENGTH,
            "model": self._model,
            "width": _round_dimension(request.width),
            "height": _round_dimension(request.height),
            "numberResults": 1,
            "outputType": "URL",
            "outputFormat": "PNG",
            "includeCost": True,
        }

    async def generate(self, request: StagingRequest) -> StagingResult:
        start_time = time.time()
        result = StagingResult(provider=self.name, model=self._model)

        if not self._api_key:
            return result.fail("Runware API key not configured")

        task_uuid = str(uuid4())
        payload = [self._build_task(request, task_uuid)]

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(self._api_url, json=payload, headers=self._headers())
                body = response.json()

                if response.status_code != 200 or body.get("errors"):
                    errors = body.get("errors") or [{}]
                    message = errors[0].get("message", f"HTTP {response.status_code}")
                    result.fail(f"Runware error: {message}")
                else:
                    item = (body.get("data") or [{}])[0]
                    image_url = item.get("imageURL")
                    if not image_url:
                        result.fail("No image returned by Runware")
                    else:
                        download = await client.get(image_url)
                        download.raise_for_status()
                        result.image_data = download.content
                        result.mime_type = download.headers.get("content-type", "image/png")
                        result.success = True
                        result.metadata = RunwareMetadata(
                            model=self._model,
                            task_uuid=item.get("taskUUID", task_uuid),
                            seed=item.get("seed"),
                            cost_usd=float(item.get("cost") or 0.0),
                        )
        except httpx.TimeoutException:
            result.fail(f"Runware request timed out after {self._timeout}s")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[Runware] Generation failed: {e}")
            result.fail(str(e))

        result.duration = time.time() - start_time
        return result

    async def health_check(self) -> dict:
        if not self._api_key:
            return {"status": "unhealthy", "message": "API key not configured"}

        start = time.time()
        try:
            async with httpx.AsyncClient(timeout=10) as client:
                response = await client.post(
                    self._api_url,
                    json=[{"taskType": "authentication", "apiKey": self._api_key}],
                    headers=self._headers(),
                )
            if response.status_code == 200:
                return {"status": "healthy", "latency_ms": int((time.time() - start) * 1000)}
            return {"status": "unhealthy", "message": f"HTTP {response.status_code}"}
        except httpx.HTTPError as e:
            return {"status": "unhealthy", "message": str(e)[:100]}
