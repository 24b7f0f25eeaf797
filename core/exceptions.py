"""
Custom exception classes for the application.

All exceptions inherit from AppException and include:
- error_code: Machine-readable error code
- message: User-facing (Spanish) error message
- status_code: HTTP status code to return
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors."""

    error_code: str = "internal_error"
    message: str = "Error interno del servidor"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "error": self.message,
            "code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(AppException):
    """Raised when input validation fails."""

    error_code = "validation_error"
    message = "Datos inválidos"
    status_code = 400


class AuthenticationError(AppException):
    """Raised when there is no valid session."""

    error_code = "unauthorized"
    message = "No autorizado"
    status_code = 401


class InsufficientTokensError(AppException):
    """Raised when the caller's token balance cannot cover an operation."""

    error_code = "insufficient_tokens"
    message = "Tokens insuficientes"
    status_code = 402


class AuthorizationError(AppException):
    """Raised when the caller does not own the resource."""

    error_code = "forbidden"
    message = "Acceso denegado"
    status_code = 403


class NotFoundError(AppException):
    """Raised when a resource is not found."""

    error_code = "not_found"
    message = "Recurso no encontrado"
    status_code = 404


class ShareExpiredError(AppException):
    """Raised when a share link is expired or has exhausted its views."""

    error_code = "share_expired"
    message = "Share has expired"
    status_code = 410


class RateLimitError(AppException):
    """Raised when rate limit is exceeded."""

    error_code = "rate_limit_exceeded"
    message = "Demasiados intentos. Intenta nuevamente en unos minutos"
    status_code = 429


class GenerationError(AppException):
    """Raised when image generation fails."""

    error_code = "generation_failed"
    message = "Error al generar la transformación"
    status_code = 500


class StorageError(AppException):
    """Raised when storage operation fails."""

    error_code = "storage_error"
    message = "Error al subir la imagen"
    status_code = 500


class UpstreamError(AppException):
    """Raised when an external service fails."""

    error_code = "upstream_error"
    message = "Error del servicio externo"
    status_code = 502


class ServiceUnavailableError(AppException):
    """Raised when a required backing service is not configured."""

    error_code = "service_unavailable"
    message = "Servicio no disponible"
    status_code = 503
