"""
Provider registry.

Maps provider names to singleton provider instances.
"""

import logging

from core.exceptions import ValidationError

from .base import BaseStagingProvider, ProviderName
from .gemini import GeminiStagingProvider
from .runware import RunwareStagingProvider

logger = logging.getLogger(__name__)

_PROVIDER_CLASSES: dict[str, type[BaseStagingProvider]] = {
    ProviderName.GEMINI.value: GeminiStagingProvider,
    ProviderName.RUNWARE.value: RunwareStagingProvider,
}

_instances: dict[str, BaseStagingProvider] = {}


def get_provider(name: str) -> BaseStagingProvider:
    """
    Get the provider registered under ``name``.

    Raises:
        ValidationError: unknown provider name
    """
    key = (name or "").lower()
    provider_class = _PROVIDER_CLASSES.get(key)
    if provider_class is None:
        raise ValidationError(f"Proveedor no soportado: {name}")

    if key not in _instances:
        _instances[key] = provider_class()
        logger.info(f"Initialized staging provider: {key}")
    return _instances[key]


def list_provider_names() -> list[str]:
    return list(_PROVIDER_CLASSES)


def reset_providers() -> None:
    """Drop cached instances, e.g. after settings change."""
    _instances.clear()
