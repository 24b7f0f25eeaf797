"""
Unit tests for passwordless sign-in.
"""

import json
from unittest.mock import patch

import httpx
import pytest

from core.exceptions import RateLimitError, ValidationError
from services import magic_link
from services.rate_limit import CooldownService
from tests.conftest import create_profile


def _mock_client_factory(handler):
    real_client = httpx.AsyncClient

    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    return factory


class TestRedirectUrl:
    def test_with_params(self):
        url = magic_link.build_redirect_url("/projects/1", "signup")
        assert url == "https://decollage.test/auth/callback?next=%2Fprojects%2F1&action=signup"

    def test_without_params(self):
        assert magic_link.build_redirect_url(None, None) == "https://decollage.test/auth/callback"


class TestUpstreamErrors:
    @pytest.mark.parametrize(
        "upstream,expected",
        [
            ("For security purposes, rate limit exceeded", "Demasiados intentos. Intenta nuevamente en unos minutos"),
            ("Unable to validate: invalid email", "Email inválido"),
            ("Email not confirmed", "Confirma tu email primero"),
            ("Database exploded", "Error al enviar el código"),
        ],
    )
    def test_map_upstream_error(self, upstream, expected):
        assert magic_link.map_upstream_error(upstream) == expected


class TestSendMagicLink:
    async def test_sends_otp_request(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={})

        with patch("services.magic_link.httpx.AsyncClient", _mock_client_factory(handler)):
            result = await magic_link.send_magic_link(
                "ana@example.com",
                source="landing",
                return_url="/projects",
                action="login",
            )

        assert result == {
            "success": True,
            "message": "Código enviado exitosamente",
            "email": "ana@example.com",
        }
        assert captured["url"] == "https://auth.decollage.test/auth/v1/otp"
        assert captured["body"]["email"] == "ana@example.com"
        assert captured["body"]["create_user"] is True
        assert captured["body"]["data"]["source"] == "landing"
        assert captured["body"]["email_redirect_to"].startswith("https://decollage.test/auth/callback?")

    @pytest.mark.parametrize(
        "email,message",
        [(None, "Email es requerido"), ("", "Email es requerido"), ("no-at-sign", "Formato de email inválido")],
    )
    async def test_validation(self, email, message):
        with pytest.raises(ValidationError) as exc_info:
            await magic_link.send_magic_link(email)
        assert exc_info.value.message == message

    async def test_upstream_rejection(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"msg": "email rate limit exceeded"})

        with patch("services.magic_link.httpx.AsyncClient", _mock_client_factory(handler)):
            with pytest.raises(ValidationError) as exc_info:
                await magic_link.send_magic_link("ana@example.com")

        assert exc_info.value.message == "Demasiados intentos. Intenta nuevamente en unos minutos"

    async def test_cooldown_blocks_resend(self, mock_redis):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        cooldowns = CooldownService(mock_redis)
        with patch("services.magic_link.httpx.AsyncClient", _mock_client_factory(handler)):
            await magic_link.send_magic_link("ana@example.com", cooldowns=cooldowns)
            with pytest.raises(RateLimitError):
                await magic_link.send_magic_link("ana@example.com", cooldowns=cooldowns)


class TestCheckUser:
    async def test_unknown_email(self, db_session):
        from database.repositories import ProfileRepository

        status = await magic_link.check_user(ProfileRepository(db_session), "nadie@example.com")

        assert status.exists is False
        assert status.auth_method == "magic_link"

    async def test_password_account(self, db_session, session_factory):
        from database.repositories import ProfileRepository

        await create_profile(session_factory, "pw@example.com", password_set=True)

        status = await magic_link.check_user(ProfileRepository(db_session), "PW@example.com")

        assert status.exists is True
        assert status.has_password is True
        assert status.auth_method == "password"

    async def test_google_account(self, db_session, session_factory):
        from database.repositories import ProfileRepository

        await create_profile(session_factory, "g@example.com", auth_provider="google")

        status = await magic_link.check_user(ProfileRepository(db_session), "g@example.com")

        assert status.auth_method == "google"

    async def test_email_required(self, db_session):
        from database.repositories import ProfileRepository

        with pytest.raises(ValidationError):
            await magic_link.check_user(ProfileRepository(db_session), None)


class TestSetPassword:
    @pytest.mark.parametrize(
        "password,confirm,message",
        [
            (None, "secreto123", "Password and confirmation are required"),
            ("secreto123", "otro12345", "Las contraseñas no coinciden"),
            ("corta", "corta", "La contraseña debe tener al menos 8 caracteres"),
        ],
    )
    def test_validation(self, password, confirm, message):
        with pytest.raises(ValidationError) as exc_info:
            magic_link.validate_new_password(password, confirm)
        assert exc_info.value.message == message

    async def test_updates_auth_service_and_profile(self, db_session, session_factory):
        from database.repositories import ProfileRepository

        profile = await create_profile(session_factory, "nueva@example.com")
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["method"] = request.method
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": str(profile.id)})

        with patch("services.magic_link.httpx.AsyncClient", _mock_client_factory(handler)):
            updated = await magic_link.set_password(
                ProfileRepository(db_session), profile.id, "secreto123", "secreto123"
            )

        assert captured["method"] == "PUT"
        assert captured["url"] == f"https://auth.decollage.test/auth/v1/admin/users/{profile.id}"
        assert captured["body"]["password"] == "secreto123"
        assert captured["body"]["user_metadata"] == {"password_set": True, "auth_method": "password"}
        assert updated.password_set is True
        assert updated.auth_provider == "password"

    async def test_upstream_rejection_keeps_profile(self, db_session, session_factory):
        from database.repositories import ProfileRepository

        profile = await create_profile(session_factory, "debil@example.com")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"msg": "Password is known to be weak"})

        with patch("services.magic_link.httpx.AsyncClient", _mock_client_factory(handler)):
            with pytest.raises(ValidationError) as exc_info:
                await magic_link.set_password(
                    ProfileRepository(db_session), profile.id, "password1", "password1"
                )

        assert exc_info.value.message == "Password is known to be weak"
        assert (await ProfileRepository(db_session).get_by_id(profile.id)).password_set is False

    async def test_unreachable_auth_service(self, db_session, session_factory):
        from core.exceptions import UpstreamError
        from database.repositories import ProfileRepository

        profile = await create_profile(session_factory, "caida@example.com")

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        with patch("services.magic_link.httpx.AsyncClient", _mock_client_factory(handler)):
            with pytest.raises(UpstreamError):
                await magic_link.set_password(
                    ProfileRepository(db_session), profile.id, "secreto123", "secreto123"
                )
