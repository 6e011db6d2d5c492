"""
Configuration and settings for the storefront backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/api")

    # Firestore credentials: a JSON blob wins over the local key file.
    firebase_service_account: Optional[str] = Field(default=None)
    firebase_credentials_path: str = Field(default="serviceAccountKey.json")

    # Shared secret for the catalog admin endpoints. Unset disables them.
    admin_secret: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias="STOREFRONT_USE_IN_MEMORY_BACKENDS",
    )

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
