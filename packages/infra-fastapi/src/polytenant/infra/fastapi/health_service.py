"""Health capability variants.

``DefaultHealthService`` reports application, server, tenant and cache
sections. WayneEnt's variant adds its own service marker and a
``wayne_custom`` block.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo

from cachetools import TTLCache  # type: ignore[import-untyped]

from polytenant.foundation.application.capabilities import HEALTH
from polytenant.foundation.application.contributions import VariantContribution
from polytenant.infra.fastapi.settings import HealthSettings, get_health_settings

if TYPE_CHECKING:
    from polytenant.foundation.domain.identifiers import TenantId

logger = logging.getLogger(__name__)

HealthProbe = Callable[[], dict[str, Any]]

# Scratch cache for the round-trip check, entries expire after 5 seconds
_status_cache: TTLCache[str, str] = TTLCache(maxsize=64, ttl=5)


class DefaultHealthService:
    """Status report shared by tenants without a customization.

    Args:
        settings: Application values to report.
        tenant: Tenant this instance was bound for.
        probes: Extra named checks. A probe that raises is reported as
            ``{"status": "error"}`` instead of failing the report.
        clock: Returns the current epoch time in seconds.
    """

    cache_key_prefix = "status_check_"

    def __init__(
        self,
        settings: HealthSettings | None = None,
        tenant: TenantId | None = None,
        probes: Mapping[str, HealthProbe] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings if settings is not None else get_health_settings()
        self._tenant = tenant
        self._probes = dict(probes or {})
        self._clock = clock

    def get_status(self) -> dict[str, Any]:
        now = datetime.fromtimestamp(self._clock(), tz=ZoneInfo(self._settings.timezone))
        status: dict[str, Any] = {
            "app": {
                "name": self._settings.name,
                "env": self._settings.environment,
                "debug": self._settings.debug,
                "status": "running",
            },
            "server": {
                "time": now.strftime("%Y-%m-%d %H:%M:%S"),
                "timezone": self._settings.timezone,
                "timestamp": int(now.timestamp()),
            },
            "tenant": str(self._tenant) if self._tenant is not None else None,
            "cache": self._check_cache(int(now.timestamp())),
        }
        for name, probe in self._probes.items():
            status[name] = _run_probe(name, probe)
        return status

    def _check_cache(self, timestamp: int) -> dict[str, Any]:
        key = f"{self.cache_key_prefix}{timestamp}"
        _status_cache[key] = "test"
        retrieved = _status_cache.get(key)
        _status_cache.pop(key, None)
        return {
            "driver": "cachetools",
            "status": "connected" if retrieved == "test" else "error",
        }


class WayneEntHealthService(DefaultHealthService):
    """Wayne Enterprises variant with its custom service block."""

    cache_key_prefix = "wayne_status_check_"

    def get_status(self) -> dict[str, Any]:
        status = super().get_status()
        status["tenant"] = "WayneEnt"
        status["app"]["custom_service"] = "WayneEnt Custom Health Service"
        status["wayne_custom"] = {
            "special_service": "operational",
            "bat_signal": "ready",
        }
        return status


def _run_probe(name: str, probe: HealthProbe) -> dict[str, Any]:
    try:
        return probe()
    except Exception as exc:
        logger.warning("health_probe_failed", extra={"probe": name, "error": str(exc)})
        return {"status": "error", "message": str(exc)}


def default_health(tenant: TenantId | None) -> DefaultHealthService:
    return DefaultHealthService(tenant=tenant)


def wayneent_health(tenant: TenantId | None) -> WayneEntHealthService:
    return WayneEntHealthService(tenant=tenant)


# Module-level contributions for auto-discovery via entry points.
contributions = [
    VariantContribution(capability=HEALTH.name, factory=default_health),
    VariantContribution(capability=HEALTH.name, factory=wayneent_health, tenant="WayneEnt"),
]
