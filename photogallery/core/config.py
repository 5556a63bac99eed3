"""Application configuration loaded from environment variables."""

import re
from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Azure container naming rules (module-level so validators can use it).
CONTAINER_NAME_PATTERN = re.compile(r"^[a-z0-9](?!.*--)[a-z0-9-]{1,61}[a-z0-9]$")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    # Forces DEBUG logging; never exposes tracebacks to clients
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Bind address for `python -m photogallery`
    HOST: str = "127.0.0.1"
    PORT: int = 3000

    # Blob storage: "azure" in production, "memory" for local development and tests
    BLOB_BACKEND: Literal["azure", "memory"] = "azure"
    AZURE_STORAGE_CONNECTION_STRING: SecretStr | None = None
    AZURE_STORAGE_CONTAINER_NAME: str = "photos"
    MEMORY_BLOB_BASE_URL: str = "http://localhost:3000/blobs"

    # Session cookie (JWT-signed opaque session id)
    SESSION_SECRET: SecretStr = SecretStr("change-me-in-production")
    SESSION_COOKIE_NAME: str = "session"
    SESSION_EXPIRE_MINUTES: int = 1440
    SESSION_COOKIE_SECURE: bool = False

    # Account created at startup. Empty username disables seeding.
    SEED_ADMIN_USERNAME: str = "admin"
    SEED_ADMIN_PASSWORD: SecretStr = SecretStr("password")
    # When False, passwords are stored and compared as plain text. Set to True in production.
    PASSWORD_HASHING: bool = False

    MAX_UPLOAD_MB: int = 20

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}"
            )
        return level

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if v < 1 or v > 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("AZURE_STORAGE_CONNECTION_STRING")
    @classmethod
    def validate_connection_string(cls, v: SecretStr | None) -> SecretStr | None:
        if v is None or not v.get_secret_value().strip():
            return None
        return v

    @field_validator("AZURE_STORAGE_CONTAINER_NAME")
    @classmethod
    def validate_container_name(cls, v: str) -> str:
        name = (v or "").strip()
        if not CONTAINER_NAME_PATTERN.match(name):
            raise ValueError(
                "AZURE_STORAGE_CONTAINER_NAME must be 3-63 characters of lowercase "
                "letters, digits and single hyphens, starting and ending with a letter or digit"
            )
        return name

    @field_validator("MEMORY_BLOB_BASE_URL")
    @classmethod
    def validate_memory_blob_base_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("MEMORY_BLOB_BASE_URL must be set and non-empty")
        s = v.strip().lower()
        if not (s.startswith("http://") or s.startswith("https://")):
            raise ValueError(
                "MEMORY_BLOB_BASE_URL must use http or https (e.g. http://localhost:3000/blobs)"
            )
        return v.strip().rstrip("/")

    @field_validator("SESSION_SECRET")
    @classmethod
    def validate_session_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("SESSION_SECRET must be set and non-empty")
        return v

    @field_validator("SESSION_COOKIE_NAME")
    @classmethod
    def validate_session_cookie_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SESSION_COOKIE_NAME must be set and non-empty")
        return v.strip()

    @field_validator("SESSION_EXPIRE_MINUTES")
    @classmethod
    def validate_session_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 43200:
            raise ValueError(
                "SESSION_EXPIRE_MINUTES must be between 1 and 43200 (1 min to 30 days)"
            )
        return v

    @field_validator("SEED_ADMIN_USERNAME")
    @classmethod
    def validate_seed_admin_username(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("MAX_UPLOAD_MB")
    @classmethod
    def validate_max_upload_mb(cls, v: int) -> int:
        if v < 1 or v > 200:
            raise ValueError("MAX_UPLOAD_MB must be between 1 and 200")
        return v

    @model_validator(mode="after")
    def validate_seed_admin_password(self) -> "Settings":
        if self.SEED_ADMIN_USERNAME and not self.SEED_ADMIN_PASSWORD.get_secret_value().strip():
            raise ValueError(
                "SEED_ADMIN_PASSWORD must be set and non-empty when SEED_ADMIN_USERNAME is set"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
