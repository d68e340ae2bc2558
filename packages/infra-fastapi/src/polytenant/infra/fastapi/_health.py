"""Liveness and status endpoints.

``/healthz`` answers as long as the process serves requests. ``/status``
returns the report of the health capability bound for the request's
tenant, so tenants with a custom health variant see their own sections.
"""

# NOTE: No ``from __future__ import annotations``: FastAPI resolves the
# ``Annotated[..., Depends(...)]`` parameters at runtime.

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from polytenant.foundation.application.capabilities import HEALTH
from polytenant.foundation.application.context import get_current_tenant_id
from polytenant.foundation.domain import HealthCapability
from polytenant.infra.fastapi.dependencies import use_capability

router = APIRouter(tags=["health"])

Health = Annotated[HealthCapability, Depends(use_capability(HEALTH))]


def _degraded(report: dict[str, Any]) -> bool:
    return any(
        isinstance(section, dict) and section.get("status") == "error"
        for section in report.values()
    )


@router.get("/healthz")
async def healthz() -> dict[str, Any]:
    """Liveness probe."""
    tenant = get_current_tenant_id()
    return {"status": "ok", "tenant": str(tenant) if tenant is not None else None}


@router.get("/status")
def status(health: Health) -> Any:
    """Tenant-aware status report.

    Returns HTTP 200 when every section is healthy, HTTP 503 when any
    section reports ``"status": "error"``.
    """
    report = health.get_status()
    return JSONResponse(content=report, status_code=503 if _degraded(report) else 200)
