"""
Google Gemini staging provider.

Uses Gemini's native image generation in image-to-image mode: the staging
prompt and the room photo go in, a staged photo comes out.
"""

import asyncio
import logging
import time
from typing import Any

from google import genai
from google.genai import types

from core.config import get_settings

from .base import (
    BaseStagingProvider,
    GeminiMetadata,
    ProviderName,
    StagingRequest,
    StagingResult,
)
from services.prompts import build_staging_prompt

logger = logging.getLogger(__name__)


# ============ Pricing (USD) ============

INPUT_COST_PER_MILLION_TOKENS = 0.30
COST_PER_IMAGE = 0.039
OUTPUT_TOKENS_PER_IMAGE = 1290


def estimate_gemini_cost(prompt_tokens: int, output_tokens: int) -> float:
    """Cost of one call from its usage metadata."""
    if not prompt_tokens and not output_tokens:
        return COST_PER_IMAGE
    input_cost = (prompt_tokens / 1_000_000) * INPUT_COST_PER_MILLION_TOKENS
    images = round(output_tokens / OUTPUT_TOKENS_PER_IMAGE)
    return round(input_cost + images * COST_PER_IMAGE, 6)


# ============ Safety Configuration ============

HARM_CATEGORIES = [
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
]


def build_safety_settings() -> list[types.SafetySetting]:
    """Interior photos rarely trip filters; only block high-probability content."""
    return [
        types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH)
        for category in HARM_CATEGORIES
    ]


class GeminiStagingProvider(BaseStagingProvider):
    """Staging through the google-genai SDK."""

    def __init__(self, api_key: str | None = None, model: str | None = None):
        settings = get_settings()
        self._api_key = api_key or settings.gemini_api_key
        self._model = model or settings.gemini_model
        self._timeout = settings.provider_timeout_seconds
        self._client: genai.Client | None = None

        if self._api_key:
            self._client = genai.Client(api_key=self._api_key)

    @property
    def name(self) -> str:
        return ProviderName.GEMINI.value

    @property
    def model(self) -> str:
        return self._model

    @property
    def is_available(self) -> bool:
        return self._client is not None

    def _extract(self, response: Any, result: StagingResult) -> None:
        """Pull the image and usage numbers out of a response."""
        usage = getattr(response, "usage_metadata", None)
        prompt_tokens = getattr(usage, "prompt_token_count", None) or 0
        output_tokens = getattr(usage, "candidates_token_count", None) or 0
        total_tokens = getattr(usage, "total_token_count", None) or 0

        if not response.candidates:
            result.fail("No image generated in Gemini response")
            return

        candidate = response.candidates[0]
        if str(getattr(candidate, "finish_reason", "")).endswith("SAFETY"):
            result.fail("Content blocked by safety filter")
            return

        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline and inline.data:
                result.image_data = inline.data
                result.mime_type = inline.mime_type or "image/png"
                break

        if result.image_data is None:
            result.fail("No image generated in Gemini response")
            return

        result.success = True
        result.metadata = GeminiMetadata(
            model=self._model,
            prompt_tokens=prompt_tokens,
            output_tokens=output_tokens,
            total_tokens=total_tokens,
            cost_usd=estimate_gemini_cost(prompt_tokens, output_tokens),
        )

    async def generate(self, request: StagingRequest) -> StagingResult:
        start_time = time.time()
        result = StagingResult(provider=self.name, model=self._model)

        if not self._client:
            return result.fail("Gemini API key not configured")

        contents = [
            build_staging_prompt(
                request.prompt,
                style=request.style,
                room_type=request.room_type,
                palette=request.palette,
            ),
            types.Part.from_bytes(data=request.image_data, mime_type=request.mime_type),
        ]
        config = types.GenerateContentConfig(
            response_modalities=["Text", "Image"],
            safety_settings=build_safety_settings(),
        )

        def api_call():
            return self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )

        loop = asyncio.get_running_loop()
        try:
            response = await asyncio.wait_for(
                loop.run_in_executor(None, api_call),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            result.fail(f"Gemini request timed out after {self._timeout}s")
        except Exception as e:
            logger.error(f"[Gemini] Generation failed: {e}")
            result.fail(str(e))
        else:
            self._extract(response, result)

        result.duration = time.time() - start_time
        if result.metadata:
            logger.info(
                f"[Gemini] Generated image in {result.duration:.1f}s, "
                f"cost ${result.metadata.cost_usd:.4f}"
            )
        return result

    async def health_check(self) -> dict:
        if not self._client:
            return {"status": "unhealthy", "message": "API client not initialized"}

        try:
            start = time.time()
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, lambda: self._client.models.get(model=self._model))
            return {
                "status": "healthy",
                "latency_ms": int((time.time() - start) * 1000),
            }
        except Exception as e:
            return {"status": "unhealthy", "message": str(e)[:100]}
