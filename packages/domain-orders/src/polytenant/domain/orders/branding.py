"""Tenant email branding with a per-process TTL cache.

Cache: cachetools.TTLCache, 1 hour TTL, keyed by ``tenant_email_config:{key}``
where ``key`` is the lower-cased tenant identifier. Tenants without a stored
record get the default branding.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Protocol

from cachetools import TTLCache  # type: ignore[import-untyped]

from polytenant.foundation.domain.identifiers import TenantId, normalize_tenant_key

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 3600
CACHE_KEY_PREFIX = "tenant_email_config:"
DEFAULT_FOOTER = "If you have any questions, please contact your administrator."


@dataclass(frozen=True, slots=True)
class TenantBranding:
    """Email presentation settings for one tenant.

    Attributes:
        header_text: Heading shown above every mail.
        footer_text: Closing line shown below every mail.
        primary_color: Accent color for HTML templates.
        support_email: Reply-to / support address. None if unset.
        cc_emails: Addresses copied on every notification.
        logo_url: Optional logo.
        banner_image_url: Optional banner image.
    """

    header_text: str = ""
    footer_text: str = DEFAULT_FOOTER
    primary_color: str = "#2563eb"
    support_email: str | None = None
    cc_emails: tuple[str, ...] = field(default=())
    logo_url: str | None = None
    banner_image_url: str | None = "images/bookshelf.jpg"


class BrandingRepository(Protocol):
    """Lookup of stored branding records."""

    def find(self, tenant_key: str) -> TenantBranding | None:
        """Return the stored branding for a normalized tenant key, if any."""
        ...


class InMemoryBrandingRepository:
    """Branding records held in a dict, keyed by normalized tenant."""

    def __init__(self, records: Mapping[str, TenantBranding] | None = None) -> None:
        self._records: dict[str, TenantBranding] = {
            normalize_tenant_key(k): v for k, v in (records or {}).items()
        }

    def find(self, tenant_key: str) -> TenantBranding | None:
        return self._records.get(tenant_key)

    def save(self, tenant: TenantId | str, branding: TenantBranding) -> None:
        key = tenant.key if isinstance(tenant, TenantId) else normalize_tenant_key(tenant)
        self._records[key] = branding


class TenantBrandingService:
    """Cached branding lookup.

    Args:
        repository: Source of stored branding records.
        defaults: Branding for tenants without a record (and for no tenant).
        ttl: Cache TTL in seconds (default: 3600 = 1 hour).
        maxsize: Maximum cached tenants.
    """

    def __init__(
        self,
        repository: BrandingRepository,
        defaults: TenantBranding | None = None,
        ttl: int = CACHE_TTL_SECONDS,
        maxsize: int = 1024,
    ) -> None:
        self._repository = repository
        self._defaults = defaults if defaults is not None else TenantBranding()
        self._cache: TTLCache[str, TenantBranding] = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.Lock()

    @property
    def defaults(self) -> TenantBranding:
        return self._defaults

    def _cache_key(self, tenant: TenantId | str) -> str:
        key = tenant.key if isinstance(tenant, TenantId) else normalize_tenant_key(tenant)
        return f"{CACHE_KEY_PREFIX}{key}"

    def get_branding(self, tenant: TenantId | str | None) -> TenantBranding:
        """Return branding for ``tenant``, loading and caching on miss."""
        if tenant is None:
            return self._defaults

        cache_key = self._cache_key(tenant)
        with self._lock:
            cached: TenantBranding | None = self._cache.get(cache_key)
            if cached is not None:
                return cached

        record = self._repository.find(cache_key.removeprefix(CACHE_KEY_PREFIX))
        branding = record if record is not None else self._defaults
        with self._lock:
            self._cache[cache_key] = branding
        logger.debug(
            "branding_loaded",
            extra={"tenant_id": str(tenant), "stored": record is not None},
        )
        return branding

    def get_cc_emails(self, tenant: TenantId | str | None) -> tuple[str, ...]:
        return self.get_branding(tenant).cc_emails

    def clear_cache(self, tenant: TenantId | str) -> None:
        """Drop the cached branding for one tenant."""
        with self._lock:
            self._cache.pop(self._cache_key(tenant), None)

    def clear_all(self) -> None:
        with self._lock:
            self._cache.clear()


@lru_cache(maxsize=1)
def get_branding_repository() -> InMemoryBrandingRepository:
    """Process-wide branding records. Applications seed this at startup."""
    return InMemoryBrandingRepository()


@lru_cache(maxsize=1)
def get_branding_service() -> TenantBrandingService:
    """Process-wide cached branding lookup."""
    return TenantBrandingService(get_branding_repository())
