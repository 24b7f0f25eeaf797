"""
Unit tests for domain services that need no database.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from core.config import get_settings
from core.exceptions import AuthorizationError, NotFoundError, RateLimitError, ValidationError
from core.security import hash_password
from tests.conftest import make_png


class TestEnsureOwner:
    def test_owner(self):
        from services.ownership import ensure_owner

        owner = uuid4()
        resource = SimpleNamespace(user_id=owner)

        assert ensure_owner(resource, owner, "missing", "forbidden") is resource

    def test_missing_is_404(self):
        from services.ownership import ensure_owner

        with pytest.raises(NotFoundError) as exc_info:
            ensure_owner(None, uuid4(), "Proyecto no encontrado", "forbidden")
        assert exc_info.value.message == "Proyecto no encontrado"

    def test_foreign_is_403(self):
        from services.ownership import ensure_owner

        with pytest.raises(AuthorizationError):
            ensure_owner(SimpleNamespace(user_id=uuid4()), uuid4(), "missing", "No autorizado")

    def test_custom_owner_attribute(self):
        from services.ownership import ensure_owner

        owner = uuid4()
        share = SimpleNamespace(created_by=owner)

        assert ensure_owner(share, owner, "m", "f", owner_attr="created_by") is share


class TestUploads:
    def test_validate_accepts_images(self):
        from services.uploads import validate_upload

        assert validate_upload("image/PNG", 100) == "image/png"

    def test_validate_rejects_other_types(self):
        from services.uploads import UNSUPPORTED_FORMAT_MESSAGE, validate_upload

        with pytest.raises(ValidationError) as exc_info:
            validate_upload("application/pdf", 100)
        assert exc_info.value.message == UNSUPPORTED_FORMAT_MESSAGE

    def test_validate_rejects_large_files(self):
        from services.uploads import FILE_TOO_LARGE_MESSAGE, validate_upload

        with pytest.raises(ValidationError) as exc_info:
            validate_upload("image/jpeg", 10 * 1024 * 1024 + 1)
        assert exc_info.value.message == FILE_TOO_LARGE_MESSAGE

    def test_prepare_small_upload_keeps_bytes(self):
        from services.uploads import prepare_upload

        data = make_png(120, 80)
        upload = prepare_upload(data, "image/png")

        assert upload.data == data
        assert upload.content_type == "image/png"
        assert upload.extension == "png"
        assert (upload.width, upload.height) == (120, 80)

    def test_prepare_large_upload_compresses(self, monkeypatch):
        from services.uploads import COMPRESS_MAX_SIDE, prepare_upload

        monkeypatch.setattr(get_settings(), "compress_threshold_mb", 0)
        upload = prepare_upload(make_png(COMPRESS_MAX_SIDE + 200, 100), "image/png")

        assert upload.content_type == "image/jpeg"
        assert upload.extension == "jpg"
        assert upload.width == COMPRESS_MAX_SIDE

    def test_unreadable_image_is_stored_as_is(self, monkeypatch):
        from services.uploads import prepare_upload

        monkeypatch.setattr(get_settings(), "compress_threshold_mb", 0)
        upload = prepare_upload(b"not really a jpeg", "image/jpeg")

        assert upload.data == b"not really a jpeg"
        assert upload.width is None

    def test_storage_key_layout(self):
        from services.uploads import build_storage_key

        user_id, project_id = uuid4(), uuid4()
        key = build_storage_key(user_id, project_id, "jpg", timestamp=1700000000000)

        prefix = f"users/{user_id}/projects/{project_id}/1700000000000-"
        assert key.startswith(prefix)
        assert key.endswith(".jpg")
        assert len(key[len(prefix):-len(".jpg")]) == 8

    async def test_store_upload(self, storage):
        from services.uploads import prepare_upload, store_upload

        user_id, project_id = uuid4(), uuid4()
        upload = prepare_upload(make_png(), "image/png")

        key, url = await store_upload(storage, user_id, project_id, upload)

        assert await storage.load(key) == upload.data
        assert url == f"/uploads/{key}"


class TestLocalStorage:
    async def test_save_load_delete(self, storage):
        stored = await storage.save("a/b/c.png", b"data", content_type="image/png")

        assert stored.size == 4
        assert await storage.exists("a/b/c.png") is True
        assert await storage.load("a/b/c.png") == b"data"
        assert await storage.delete("a/b/c.png") is True
        assert await storage.load("a/b/c.png") is None
        assert await storage.delete("a/b/c.png") is False

    async def test_rejects_paths_outside_base(self, storage):
        from core.exceptions import StorageError

        with pytest.raises(StorageError) as exc_info:
            await storage.save("../escape.png", b"data")
        assert "escape" not in str(exc_info.value.to_dict())
        assert exc_info.value.to_dict() == {"error": "Error al subir la imagen", "code": "storage_error"}

    def test_public_url_prefix(self, tmp_path):
        from services.storage import LocalStorageProvider, StorageConfig

        provider = LocalStorageProvider(
            StorageConfig(local_path=str(tmp_path), public_url="https://cdn.test/")
        )
        assert provider.get_public_url("x/y.png") == "https://cdn.test/x/y.png"


class TestCooldowns:
    async def test_second_hit_is_rate_limited(self, mock_redis):
        from services.rate_limit import CooldownService

        cooldowns = CooldownService(mock_redis)
        await cooldowns.hit("generation", "u1", 3)

        with pytest.raises(RateLimitError) as exc_info:
            await cooldowns.hit("generation", "u1", 3)
        assert exc_info.value.details == {"retry_after": 3}

    async def test_subjects_are_independent(self, mock_redis):
        from services.rate_limit import CooldownService

        cooldowns = CooldownService(mock_redis)
        await cooldowns.hit("generation", "u1", 3)
        await cooldowns.hit("generation", "u2", 3)
        await cooldowns.hit("magic_link", "u1", 3)

    async def test_magic_link_key_is_case_insensitive(self, mock_redis):
        from services.rate_limit import CooldownService

        cooldowns = CooldownService(mock_redis)
        await cooldowns.magic_link("Ana@Example.com")

        assert await mock_redis.get("cooldown:magic_link:ana@example.com") == "1"
        with pytest.raises(RateLimitError):
            await cooldowns.magic_link("ana@example.com")

    async def test_unreachable_redis_is_skipped(self, mock_redis):
        from redis.exceptions import ConnectionError as RedisConnectionError

        from services.rate_limit import CooldownService

        mock_redis.set = AsyncMock(side_effect=RedisConnectionError("connection refused"))
        cooldowns = CooldownService(mock_redis)

        await cooldowns.hit("generation", "u1", 3)
        await cooldowns.magic_link("ana@example.com")

        assert mock_redis.set.await_count == 2

    async def test_without_redis_nothing_is_enforced(self):
        from services.rate_limit import CooldownService

        cooldowns = CooldownService(None)
        await cooldowns.hit("generation", "u1", 3)
        await cooldowns.hit("generation", "u1", 3)


class TestShareHelpers:
    def _share(self, **fields):
        defaults = {
            "share_token": "tok",
            "expires_at": None,
            "max_views": None,
            "current_views": 0,
            "password_hash": None,
        }
        defaults.update(fields)
        return SimpleNamespace(**defaults)

    def test_links(self):
        from services.shares import build_share_links

        links = build_share_links(self._share(share_token="abc"))

        assert links.share_url == "https://decollage.test/share/abc"
        assert links.og_image_url == "/api/og?token=abc"
        assert 'src="https://decollage.test/share/abc"' in links.embed_code
        assert 'width="800"' in links.embed_code

    def test_expiry(self):
        from services.shares import is_expired

        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        future = datetime.now(timezone.utc) + timedelta(days=1)

        assert is_expired(self._share()) is False
        assert is_expired(self._share(expires_at=past)) is True
        assert is_expired(self._share(expires_at=future)) is False
        # naive values are read as UTC
        assert is_expired(self._share(expires_at=past.replace(tzinfo=None))) is True

    def test_views_exhausted(self):
        from services.shares import views_exhausted

        assert views_exhausted(self._share()) is False
        assert views_exhausted(self._share(max_views=2, current_views=1)) is False
        assert views_exhausted(self._share(max_views=2, current_views=2)) is True

    def test_password(self):
        from services.shares import validate_share_password

        protected = self._share(password_hash=hash_password("secreto"))

        assert validate_share_password(self._share(), None) is True
        assert validate_share_password(protected, "secreto") is True
        assert validate_share_password(protected, "otro") is False
        assert validate_share_password(protected, None) is False


class TestProjectRules:
    def test_clean_name(self):
        from services.projects import clean_name

        assert clean_name("  Casa  ") == "Casa"

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_name_required(self, name):
        from services.projects import clean_name

        with pytest.raises(ValidationError) as exc_info:
            clean_name(name)
        assert exc_info.value.message == "El nombre del proyecto es requerido"

    def test_name_too_long(self):
        from services.projects import clean_name

        with pytest.raises(ValidationError) as exc_info:
            clean_name("x" * 101)
        assert exc_info.value.message == "El nombre del proyecto no puede exceder 100 caracteres"

    def test_updates_only_include_present_fields(self):
        from services.projects import build_project_updates

        assert build_project_updates({"status": "archived"}) == {"status": "archived"}
        assert build_project_updates({"description": "  "}) == {"description": None}
        assert build_project_updates({}) == {}

    def test_invalid_status(self):
        from services.projects import build_project_updates

        with pytest.raises(ValidationError):
            build_project_updates({"status": "deleted"})
