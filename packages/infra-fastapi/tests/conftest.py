"""Shared fixtures for infra-fastapi tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from polytenant.foundation.application import (
    TenancyRuntime,
    TenancySettings,
    VariantContribution,
    build_runtime,
)
from polytenant.infra.fastapi.health_service import contributions as health_contributions


def _labelled(label: str):  # type: ignore[no-untyped-def]
    return lambda tenant: SimpleNamespace(label=label, tenant=tenant)


@pytest.fixture()
def tenancy_settings() -> TenancySettings:
    """Three known tenants, no default."""
    return TenancySettings(known_tenants=["AcMe", "Beta", "WayneEnt"], default_tenant=None)


@pytest.fixture()
def runtime(tenancy_settings: TenancySettings) -> TenancyRuntime:
    """Runtime with labelled order/notification stand-ins and the real health variants."""
    return build_runtime(
        tenancy_settings,
        variants=[
            VariantContribution(capability="orders", factory=_labelled("default-orders")),
            VariantContribution(
                capability="orders", factory=_labelled("acme-orders"), tenant="AcMe"
            ),
            VariantContribution(
                capability="notifications", factory=_labelled("default-notifications")
            ),
            *health_contributions,
        ],
        discover_variants=False,
    )
