"""Shared fixtures for foundation-application tests."""

from __future__ import annotations

from uuid import uuid4

import pytest

from polytenant.foundation.application.binding_registry import BindingRegistry
from polytenant.foundation.application.capabilities import (
    BUILTIN_CAPABILITIES,
    HEALTH,
    NOTIFICATIONS,
    ORDERS,
)
from polytenant.foundation.application.tenant_registry import TenantRegistry
from polytenant.foundation.domain.principal import OrganizationRef, Principal


class _FakeService:
    """Stand-in capability implementation that remembers its variant."""

    def __init__(self, label: str, tenant: object) -> None:
        self.label = label
        self.tenant = tenant


def _factory(label: str):  # type: ignore[no-untyped-def]
    return lambda tenant: _FakeService(label, tenant)


@pytest.fixture()
def tenant_registry() -> TenantRegistry:
    """Registry with the three demo tenants."""
    return TenantRegistry(["AcMe", "Beta", "WayneEnt"])


@pytest.fixture()
def binding_registry(tenant_registry: TenantRegistry) -> BindingRegistry:
    """Frozen registry with Defaults for all builtin capabilities and an AcMe order variant."""
    registry = BindingRegistry(tenant_registry)
    registry.register_default(ORDERS, _factory("default-orders"))
    registry.register_default(NOTIFICATIONS, _factory("default-notifications"))
    registry.register_default(HEALTH, _factory("default-health"))
    registry.register(ORDERS, "AcMe", _factory("acme-orders"))
    registry.register(HEALTH, "WayneEnt", _factory("wayneent-health"))
    registry.freeze(BUILTIN_CAPABILITIES)
    return registry


def _make_principal(*slugs: str, ids: tuple[int, ...] | None = None) -> Principal:
    org_ids = ids if ids is not None else tuple(range(1, len(slugs) + 1))
    return Principal(
        subject="user-1",
        user_id=uuid4(),
        email="user@example.com",
        organizations=tuple(
            OrganizationRef(id=org_id, slug=slug) for org_id, slug in zip(org_ids, slugs, strict=True)
        ),
    )


@pytest.fixture()
def make_principal():  # type: ignore[no-untyped-def]
    """Build a principal belonging to organizations with the given slugs."""
    return _make_principal


@pytest.fixture()
def make_factory():  # type: ignore[no-untyped-def]
    """Build a variant factory whose instances carry a label and the tenant."""
    return _factory
