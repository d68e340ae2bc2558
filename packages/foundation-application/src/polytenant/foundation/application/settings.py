"""Tenancy settings.

Environment variables use the ``TENANCY_`` prefix
(e.g., ``TENANCY_KNOWN_TENANTS=AcMe,Beta,WayneEnt``).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class TenancySettings(BaseSettings):
    """Tenant resolution configuration.

    Attributes:
        known_tenants: Canonical tenant identifiers, in display casing.
            Comma-separated strings are parsed into lists.
        default_tenant: Last-resort tenant when no signal matches.
            Used verbatim, it does not need to be a known tenant.
        tenant_header: Request header carrying an explicit tenant.
    """

    model_config = SettingsConfigDict(env_prefix="TENANCY_", extra="ignore")

    known_tenants: Annotated[list[str], NoDecode] = Field(default_factory=list)
    default_tenant: str | None = Field(default=None)
    tenant_header: str = Field(default="X-Tenant-ID")

    @field_validator("known_tenants", mode="before")
    @classmethod
    def _parse_comma_separated(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        if isinstance(v, (list, tuple, set, frozenset)):
            return [str(s).strip() for s in v if str(s).strip()]
        return []

    @field_validator("default_tenant", mode="before")
    @classmethod
    def _blank_default_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache(maxsize=1)
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings (loaded once from environment)."""
    return TenancySettings()
