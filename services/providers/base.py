"""
Base protocols and data classes for AI staging providers.

This module defines the abstractions every provider implements, and the
tagged metadata each provider attaches to a finished variant.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

logger = logging.getLogger(__name__)


# ============ Enums ============


class ProviderName(StrEnum):
    """Supported staging providers."""

    GEMINI = "gemini"
    RUNWARE = "runware"


# ============ Error Types ============

ERROR_TYPE_TIMEOUT = "timeout"
ERROR_TYPE_RATE_LIMITED = "rate_limited"
ERROR_TYPE_INVALID_KEY = "invalid_key"
ERROR_TYPE_SAFETY_BLOCKED = "safety_blocked"
ERROR_TYPE_UNAVAILABLE = "unavailable"
ERROR_TYPE_NO_IMAGE = "no_image"
ERROR_TYPE_UNKNOWN = "unknown"


def classify_error(error_msg: str) -> str:
    """Classify a provider error message for logging and metadata."""
    error_lower = error_msg.lower()

    if "timeout" in error_lower or "timed out" in error_lower:
        return ERROR_TYPE_TIMEOUT
    elif "quota" in error_lower or "rate limit" in error_lower or "429" in error_lower:
        return ERROR_TYPE_RATE_LIMITED
    elif "api_key" in error_lower or "api key" in error_lower or "401" in error_lower:
        return ERROR_TYPE_INVALID_KEY
    elif "safety" in error_lower or "blocked" in error_lower:
        return ERROR_TYPE_SAFETY_BLOCKED
    elif "503" in error_lower or "unavailable" in error_lower or "overloaded" in error_lower:
        return ERROR_TYPE_UNAVAILABLE
    elif "no image" in error_lower:
        return ERROR_TYPE_NO_IMAGE
    return ERROR_TYPE_UNKNOWN


# ============ Tagged Metadata ============


class GeminiMetadata(BaseModel):
    """Metadata recorded for a Gemini generation."""

    provider: Literal["gemini"] = "gemini"
    model: str
    prompt_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    cost_usd: float = 0.0


class RunwareMetadata(BaseModel):
    """Metadata recorded for a Runware generation."""

    provider: Literal["runware"] = "runware"
    model: str
    task_uuid: str
    seed: int | None = None
    cost_usd: float = 0.0


GenerationMetadata = Annotated[
    Union[GeminiMetadata, RunwareMetadata],
    Field(discriminator="provider"),
]

_metadata_adapter: TypeAdapter = TypeAdapter(GenerationMetadata)


def parse_metadata(data: dict | None) -> GeminiMetadata | RunwareMetadata | None:
    """Rebuild the tagged metadata stored on a transformation row."""
    if not data or "provider" not in data:
        return None
    return _metadata_adapter.validate_python(data)


# ============ Data Classes ============


@dataclass
class StagingRequest:
    """A single image-to-image staging job."""

    prompt: str
    image_data: bytes
    mime_type: str = "image/jpeg"
    style: str | None = None
    room_type: str | None = None
    palette: str | None = None
    width: int | None = None
    height: int | None = None


@dataclass
class StagingResult:
    """Outcome of a staging job."""

    success: bool = False
    provider: str = ""
    model: str = ""
    image_data: bytes | None = None
    mime_type: str = "image/png"
    metadata: GeminiMetadata | RunwareMetadata | None = None
    duration: float = 0.0  # seconds
    error: str | None = None
    error_type: str | None = None

    def fail(self, error: str) -> "StagingResult":
        self.success = False
        self.error = error
        self.error_type = classify_error(error)
        return self


# ============ Provider Interface ============


class BaseStagingProvider(ABC):
    """
    Abstract staging provider.

    Implementations make exactly one upstream attempt per ``generate`` call;
    retrying is left to the caller.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    async def generate(self, request: StagingRequest) -> StagingResult:
        """Run one staging job. Errors are reported on the result, not raised."""
        pass

    @abstractmethod
    async def health_check(self) -> dict:
        pass

    def info(self) -> dict:
        return {
            "provider": self.name,
            "model": self.model,
            "available": self.is_available,
        }
