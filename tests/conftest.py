"""
Pytest configuration and fixtures.
"""

import os
import tempfile
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from io import BytesIO
from typing import Any
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "testing"
os.environ["DEBUG"] = "true"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-32chars!"
os.environ["DATABASE_ENABLED"] = "false"
os.environ["REDIS_ENABLED"] = "false"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_LOCAL_PATH"] = tempfile.mkdtemp(prefix="decollage-test-")
os.environ["SITE_URL"] = "https://decollage.test"
os.environ["AUTH_SERVICE_URL"] = "https://auth.decollage.test/auth/v1"
os.environ["SIGNUP_BONUS_TOKENS"] = "5"
os.environ["TOKEN_COST_PER_GENERATION"] = "1"


# ============ Mock Redis ============


class MockRedis:
    """Mock Redis client for testing."""

    def __init__(self):
        self._data: dict[str, Any] = {}
        self._expiry: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str, ex: int = None, nx: bool = False) -> bool | None:
        if nx and key in self._data:
            return None
        self._data[key] = value
        if ex:
            self._expiry[key] = ex
        return True

    async def delete(self, key: str) -> int:
        if key in self._data:
            del self._data[key]
            self._expiry.pop(key, None)
            return 1
        return 0

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass


@pytest.fixture
def mock_redis():
    """Create a mock Redis instance."""
    return MockRedis()


# ============ Database ============


@pytest.fixture
async def engine():
    """In-memory SQLite engine shared by every session of one test."""
    from database.models import Base

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for service-level tests; the test decides when to commit."""
    async with session_factory() as session:
        yield session


# ============ Storage ============


@pytest.fixture
def storage(tmp_path):
    from services.storage import LocalStorageProvider, StorageConfig

    return LocalStorageProvider(StorageConfig(backend="local", local_path=str(tmp_path / "uploads")))


def make_png(width: int = 64, height: int = 48, color: str = "white") -> bytes:
    from PIL import Image

    buffer = BytesIO()
    Image.new("RGB", (width, height), color=color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


# ============ Fake Provider ============


class FakeStagingProvider:
    """Stands in for Gemini; returns a fixed image or a fixed error."""

    name = "gemini"
    model = "fake-image-model"

    def __init__(self):
        self.is_available = True
        self.error: str | None = None
        self.crash: Exception | None = None
        self.calls: list = []
        self.image_data = make_png(color="blue")

    async def generate(self, request):
        from services.providers import GeminiMetadata, StagingResult

        self.calls.append(request)
        if self.crash:
            raise self.crash
        result = StagingResult(provider=self.name, model=self.model)
        if self.error:
            return result.fail(self.error)

        result.success = True
        result.image_data = self.image_data
        result.mime_type = "image/png"
        result.metadata = GeminiMetadata(
            model=self.model,
            prompt_tokens=120,
            output_tokens=1290,
            total_tokens=1410,
            cost_usd=0.039,
        )
        return result

    async def health_check(self) -> dict:
        return {"status": "healthy"}

    def info(self) -> dict:
        return {"provider": self.name, "model": self.model, "available": self.is_available}


@pytest.fixture
def fake_provider(monkeypatch) -> FakeStagingProvider:
    provider = FakeStagingProvider()
    monkeypatch.setattr("services.staging.get_provider", lambda name: provider)
    return provider


# ============ App Fixtures ============


@pytest.fixture
def app(session_factory, storage):
    """Application with the database, storage and cooldowns swapped for test doubles."""
    from api.dependencies import get_cooldowns, get_db_session, get_storage_provider
    from api.main import app
    from services.rate_limit import CooldownService

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_storage_provider] = lambda: storage
    app.dependency_overrides[get_cooldowns] = lambda: CooldownService(None)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Asynchronous test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


def session_headers(user_id: UUID, email: str = "ana@example.com") -> dict[str, str]:
    from core.security import create_session_token

    return {"Authorization": f"Bearer {create_session_token(str(user_id), email)}"}


# ============ Test Data Fixtures ============


@dataclass
class Catalog:
    style: Any
    room_type: Any
    palette: Any


async def create_profile(
    session_factory,
    email: str,
    tokens: int = 5,
    role: str = "user",
    **fields,
):
    from database.models import Profile

    async with session_factory() as session:
        profile = Profile(
            id=uuid4(),
            email=email,
            role=role,
            tokens_available=tokens,
            tokens_total_purchased=tokens,
            tokens_total_used=0,
            **fields,
        )
        session.add(profile)
        await session.commit()
        return profile


@pytest.fixture
async def profile(session_factory):
    return await create_profile(session_factory, "ana@example.com", full_name="Ana")


@pytest.fixture
async def other_profile(session_factory):
    return await create_profile(session_factory, "luis@example.com", full_name="Luis")


@pytest.fixture
async def admin_profile(session_factory):
    return await create_profile(session_factory, "admin@example.com", role="admin")


@pytest.fixture
def auth_headers(profile) -> dict[str, str]:
    return session_headers(profile.id, profile.email)


@pytest.fixture
def other_headers(other_profile) -> dict[str, str]:
    return session_headers(other_profile.id, other_profile.email)


@pytest.fixture
async def catalog(session_factory) -> Catalog:
    from database.models import ColorPalette, DesignStyle, RoomType

    async with session_factory() as session:
        style = DesignStyle(
            code="modern",
            name="Modern",
            base_prompt="Modern minimalist interior with clean lines",
            sort_order=1,
        )
        room_type = RoomType(code="living_room", name="Living Room", sort_order=1)
        palette = ColorPalette(
            code="warm_neutrals",
            name="Warm Neutrals",
            primary_colors=["#F5F5DC", "#D2B48C"],
            sort_order=1,
        )
        session.add_all([style, room_type, palette])
        await session.commit()
        return Catalog(style=style, room_type=room_type, palette=palette)


@pytest.fixture
async def project(session_factory, profile):
    from database.models import Project

    async with session_factory() as session:
        project = Project(user_id=profile.id, name="Casa Playa", description="Sala y comedor")
        session.add(project)
        await session.commit()
        return project


@pytest.fixture
async def base_image(session_factory, storage, profile, project, png_bytes):
    from database.models import Image

    key = f"users/{profile.id}/projects/{project.id}/1700000000000-abcdef12.png"
    await storage.save(key, png_bytes, content_type="image/png")

    async with session_factory() as session:
        image = Image(
            project_id=project.id,
            user_id=profile.id,
            url=storage.get_public_url(key),
            storage_key=key,
            name="sala",
            width=64,
            height=48,
            size_bytes=len(png_bytes),
            content_type="image/png",
            upload_order=1,
            is_primary=True,
        )
        session.add(image)
        await session.commit()
        return image
