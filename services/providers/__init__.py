"""
AI staging providers.

Gemini (google-genai SDK) and Runware (HTTP task API) behind a common
interface, with provider-tagged generation metadata.
"""

from .base import (
    BaseStagingProvider,
    GeminiMetadata,
    GenerationMetadata,
    ProviderName,
    RunwareMetadata,
    StagingRequest,
    StagingResult,
    classify_error,
    parse_metadata,
)
from .gemini import GeminiStagingProvider, estimate_gemini_cost
from .registry import get_provider, list_provider_names, reset_providers
from .runware import RunwareStagingProvider

__all__ = [
    "BaseStagingProvider",
    "GeminiMetadata",
    "GenerationMetadata",
    "ProviderName",
    "RunwareMetadata",
    "StagingRequest",
    "StagingResult",
    "classify_error",
    "parse_metadata",
    "GeminiStagingProvider",
    "RunwareStagingProvider",
    "estimate_gemini_cost",
    "get_provider",
    "list_provider_names",
    "reset_providers",
]
