"""
Application configuration using Pydantic Settings.

Supports loading from environment variables and .env files.
"""

from functools import lru_cache
from typing import Optional, List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============ Application ============
    app_name: str = "Decollage API"
    app_version: str = "0.1.0"
    service_name: str = "virtualstaging-api"
    debug: bool = False
    environment: str = "development"  # development, staging, production, testing

    # ============ Server ============
    host: str = "0.0.0.0"
    port: int = 8000

    # ============ Security ============
    secret_key: str = "change-me-in-production-use-a-long-random-string"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7
    session_cookie_name: str = "decollage_session"

    # ============ CORS ============
    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    # ============ Database ============
    database_enabled: bool = True
    database_url: Optional[str] = None
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_echo: bool = False

    # ============ Redis ============
    redis_enabled: bool = True
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 10

    # ============ Auth Service (magic links) ============
    auth_service_url: str = "http://localhost:9999/auth/v1"
    auth_service_api_key: Optional[str] = None
    site_url: str = "http://localhost:3000"

    # ============ AI Providers ============
    default_provider: str = "gemini"
    provider_timeout_seconds: int = 120
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash-image-preview"
    runware_api_key: Optional[str] = None
    runware_api_url: str = "https://api.runware.ai/v1"
    runware_model: str = "runware:101@1"

    # ============ Tokens ============
    token_cost_per_generation: int = 1
    signup_bonus_tokens: int = 5

    # ============ Storage ============
    storage_backend: str = "local"  # local or r2
    storage_local_path: str = "uploads"
    storage_public_url: Optional[str] = None
    max_upload_size_mb: int = 10
    compress_threshold_mb: int = 5

    # ============ Cloudflare R2 Storage ============
    r2_account_id: Optional[str] = None
    r2_access_key_id: Optional[str] = None
    r2_secret_access_key: Optional[str] = None
    r2_bucket_name: str = "decollage-images"
    r2_public_url: Optional[str] = None

    # ============ Rate Limiting ============
    magic_link_cooldown_seconds: int = 60
    generation_cooldown_seconds: int = 3

    # ============ Logging ============
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_database_configured(self) -> bool:
        return bool(self.database_enabled and self.database_url)

    @property
    def is_r2_configured(self) -> bool:
        """Check if R2 storage is properly configured."""
        return all([
            self.r2_account_id,
            self.r2_access_key_id,
            self.r2_secret_access_key,
        ])

    @property
    def is_gemini_configured(self) -> bool:
        return bool(self.gemini_api_key)

    @property
    def is_runware_configured(self) -> bool:
        return bool(self.runware_api_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
