"""
Global exception handlers for the API.

Every error leaves the API as ``{"error": <message>, "code": <code>}``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import AppException

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    410: "gone",
    429: "rate_limit_exceeded",
    501: "not_implemented",
    503: "service_unavailable",
}


# pydantic error type -> user-facing message
_VALIDATION_MESSAGES = {
    "missing": "Campo requerido",
    "uuid_parsing": "Identificador inválido",
    "uuid_type": "Identificador inválido",
    "string_type": "Se esperaba un texto",
    "string_too_short": "El texto es demasiado corto",
    "string_too_long": "El texto es demasiado largo",
    "int_parsing": "Se esperaba un número entero",
    "int_type": "Se esperaba un número entero",
    "int_from_float": "Se esperaba un número entero",
    "float_parsing": "Se esperaba un número",
    "float_type": "Se esperaba un número",
    "bool_parsing": "Se esperaba verdadero o falso",
    "greater_than": "Valor fuera de rango",
    "greater_than_equal": "Valor fuera de rango",
    "less_than": "Valor fuera de rango",
    "less_than_equal": "Valor fuera de rango",
    "literal_error": "Valor no permitido",
    "enum": "Valor no permitido",
    "datetime_parsing": "Fecha inválida",
    "datetime_from_date_parsing": "Fecha inválida",
    "list_type": "Se esperaba una lista",
    "json_invalid": "JSON inválido",
    "model_attributes_type": "Datos inválidos",
}
DEFAULT_VALIDATION_MESSAGE = "Datos inválidos"


def _field_errors(errors: list[dict]) -> list[dict]:
    result = []
    for error in errors:
        loc = " -> ".join(str(x) for x in error["loc"])
        result.append({
            "field": loc,
            "message": _VALIDATION_MESSAGES.get(error["type"], DEFAULT_VALIDATION_MESSAGE),
            "type": error["type"],
        })
    return result


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle custom application exceptions."""
        logger.warning(
            f"AppException: {exc.error_code} - {exc.message}",
            extra={"path": request.url.path, "details": exc.details}
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException
    ) -> JSONResponse:
        """Wrap framework HTTP errors (unknown routes, wrong methods) in the same shape."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": str(exc.detail),
                "code": _HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError
    ) -> JSONResponse:
        """Handle request validation errors as 400."""
        errors = _field_errors(exc.errors())

        logger.warning(
            f"Validation error on {request.url.path}",
            extra={"errors": errors}
        )

        message = errors[0]["message"] if errors else DEFAULT_VALIDATION_MESSAGE
        return JSONResponse(
            status_code=400,
            content={
                "error": message,
                "code": "validation_error",
                "details": {"errors": errors},
            },
        )

    @app.exception_handler(PydanticValidationError)
    async def pydantic_exception_handler(
        request: Request,
        exc: PydanticValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        return JSONResponse(
            status_code=400,
            content={
                "error": DEFAULT_VALIDATION_MESSAGE,
                "code": "validation_error",
                "details": {"errors": _field_errors(exc.errors())},
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle all unhandled exceptions."""
        logger.exception(
            f"Unhandled exception on {request.url.path}: {exc}",
        )

        # Never leak internals, only the exception type outside production
        from core.config import get_settings
        settings = get_settings()

        content = {
            "error": "Error interno del servidor",
            "code": "internal_error",
        }
        if not settings.is_production:
            content["details"] = {"type": type(exc).__name__}

        return JSONResponse(status_code=500, content=content)
