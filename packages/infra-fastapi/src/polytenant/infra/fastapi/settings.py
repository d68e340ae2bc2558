"""Application settings for the polytenant FastAPI app factory.

Provides Pydantic Settings for FastAPI configuration, CORS policy, tenancy,
health reporting and auto-discovery filtering.
"""

from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from polytenant.foundation.application.settings import TenancySettings

CommaSeparated = Annotated[list[str], NoDecode]


class CORSSettings(BaseSettings):
    """CORS policy configuration.

    Environment variables use the ``CORS_`` prefix (e.g., ``CORS_ALLOW_ORIGINS``).
    Comma-separated strings are automatically parsed into lists.
    """

    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    allow_origins: CommaSeparated = Field(default=["*"])
    allow_methods: CommaSeparated = Field(default=["*"])
    allow_headers: CommaSeparated = Field(default=["*"])
    allow_credentials: bool = Field(default=False)
    expose_headers: CommaSeparated = Field(default=["X-Correlation-ID"])

    @field_validator(
        "allow_origins",
        "allow_methods",
        "allow_headers",
        "expose_headers",
        mode="before",
    )
    @classmethod
    def _parse_comma_separated(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        if isinstance(v, list):
            return v
        return ["*"]

    @model_validator(mode="after")
    def _validate_credentials_with_wildcard(self) -> CORSSettings:
        if self.allow_credentials and self.allow_origins == ["*"]:
            msg = (
                "CORS allow_credentials=True cannot be used with allow_origins=['*']. "
                "Browsers will reject the response. Specify explicit origins instead."
            )
            raise ValueError(msg)
        return self


def _default_version() -> str:
    """Resolve default app version from package metadata."""
    try:
        return version("polytenant")
    except PackageNotFoundError:
        return "0.0.0"


class AppSettings(BaseSettings):
    """Application factory settings.

    Environment variables use the ``APP_`` prefix (e.g., ``APP_TITLE``).
    Tenancy settings nest under ``tenancy`` and read ``TENANCY_*``.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        extra="ignore",
    )

    title: str = Field(default="Polytenant Application")
    version: str = Field(default_factory=_default_version)
    description: str = Field(default="")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str | None = Field(default="/openapi.json")
    debug: bool = Field(default=False)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    tenancy: TenancySettings = Field(default_factory=TenancySettings)

    # Discovery filtering
    exclude_groups: frozenset[str] = Field(default=frozenset())
    exclude_entry_points: frozenset[str] = Field(default=frozenset())


class HealthSettings(BaseSettings):
    """Values reported by the health capability.

    Environment variables use the ``APP_`` prefix (e.g., ``APP_ENVIRONMENT``).
    """

    model_config = SettingsConfigDict(env_prefix="APP_", extra="ignore")

    name: str = Field(default="Polytenant")
    environment: str = Field(default="production")
    debug: bool = Field(default=False)
    timezone: str = Field(default="UTC")


@lru_cache(maxsize=1)
def get_health_settings() -> HealthSettings:
    """Get cached health settings (loaded once from environment)."""
    return HealthSettings()
