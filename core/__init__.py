"""
Core modules for the Decollage API.

This package contains fundamental utilities used across the application:
- config: Application settings and configuration
- security: Session token handling
- redis: Redis connection management
- exceptions: Custom exception classes
"""

from .config import Settings, get_settings
from .exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    InsufficientTokensError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Exceptions
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "InsufficientTokensError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
]
