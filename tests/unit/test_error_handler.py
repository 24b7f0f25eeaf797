"""
Unit tests for error handler middleware.
"""

from uuid import UUID

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from api.middleware.error_handler import setup_exception_handlers
from core.exceptions import (
    AppException,
    AuthorizationError,
    InsufficientTokensError,
    NotFoundError,
    ShareExpiredError,
    ValidationError,
)


class _Body(BaseModel):
    name: str = Field(..., min_length=1)


def _create_test_app() -> FastAPI:
    """Create a minimal FastAPI app with exception handlers for testing."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/raise-app-exception")
    async def raise_app_exception():
        raise AppException(message="Something broke", error_code="test_error")

    @app.get("/raise-not-found")
    async def raise_not_found():
        raise NotFoundError(message="Proyecto no encontrado")

    @app.get("/raise-forbidden")
    async def raise_forbidden():
        raise AuthorizationError(message="No autorizado para este proyecto")

    @app.get("/raise-insufficient-tokens")
    async def raise_insufficient_tokens():
        raise InsufficientTokensError(details={"required": 1, "available": 0})

    @app.get("/raise-share-expired")
    async def raise_share_expired():
        raise ShareExpiredError()

    @app.get("/raise-validation-error")
    async def raise_validation_error():
        raise ValidationError(message="El estilo es requerido")

    @app.get("/items/{item_id}")
    async def get_item(item_id: UUID):
        return {"id": str(item_id)}

    @app.post("/body")
    async def post_body(body: _Body):
        return body

    @app.get("/raise-http-501")
    async def raise_http_501():
        raise HTTPException(status_code=501, detail="Coming soon")

    @app.get("/raise-unexpected")
    async def raise_unexpected():
        raise RuntimeError("Something unexpected")

    return app


@pytest.fixture
def test_client():
    app = _create_test_app()
    return TestClient(app, raise_server_exceptions=False)


class TestAppExceptionHandler:
    """AppException subclasses become {error, code[, details]} bodies."""

    def test_app_exception(self, test_client):
        resp = test_client.get("/raise-app-exception")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Something broke", "code": "test_error"}

    def test_not_found(self, test_client):
        resp = test_client.get("/raise-not-found")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Proyecto no encontrado"
        assert resp.json()["code"] == "not_found"

    def test_forbidden(self, test_client):
        resp = test_client.get("/raise-forbidden")
        assert resp.status_code == 403
        assert resp.json()["code"] == "forbidden"

    def test_insufficient_tokens_with_details(self, test_client):
        resp = test_client.get("/raise-insufficient-tokens")
        assert resp.status_code == 402
        body = resp.json()
        assert body["code"] == "insufficient_tokens"
        assert body["details"]["available"] == 0

    def test_share_expired(self, test_client):
        resp = test_client.get("/raise-share-expired")
        assert resp.status_code == 410
        assert resp.json()["error"] == "Share has expired"

    def test_validation_error(self, test_client):
        resp = test_client.get("/raise-validation-error")
        assert resp.status_code == 400
        assert resp.json()["code"] == "validation_error"


class TestRequestValidationHandler:
    """Malformed input is a 400, never FastAPI's default 422."""

    def test_malformed_uuid_path(self, test_client):
        resp = test_client.get("/items/not-a-uuid")
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "validation_error"
        assert body["details"]["errors"][0]["field"] == "path -> item_id"
        assert body["error"] == "Identificador inválido"

    def test_invalid_body(self, test_client):
        resp = test_client.post("/body", json={"name": ""})
        assert resp.status_code == 400
        assert resp.json()["code"] == "validation_error"
        assert resp.json()["error"] == "El texto es demasiado corto"

    def test_missing_field_is_localized(self, test_client):
        resp = test_client.post("/body", json={})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Campo requerido"

    def test_unknown_error_type_falls_back(self):
        from api.middleware.error_handler import _field_errors

        (error,) = _field_errors([{"loc": ("body", "x"), "msg": "Value error, nope", "type": "value_error"}])

        assert error["message"] == "Datos inválidos"


class TestHTTPExceptionHandler:
    """Framework HTTP errors use the same body shape."""

    def test_unknown_route(self, test_client):
        resp = test_client.get("/nope")
        assert resp.status_code == 404
        assert resp.json()["code"] == "not_found"

    def test_http_501(self, test_client):
        resp = test_client.get("/raise-http-501")
        assert resp.status_code == 501
        assert resp.json() == {"error": "Coming soon", "code": "not_implemented"}


class TestGeneralExceptionHandler:
    """Unhandled exceptions never leak their message."""

    def test_unexpected_error(self, test_client):
        resp = test_client.get("/raise-unexpected")
        assert resp.status_code == 500
        body = resp.json()
        assert body["code"] == "internal_error"
        assert "Something unexpected" not in body["error"]
