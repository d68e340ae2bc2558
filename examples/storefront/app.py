"""Storefront application factory.

Demonstrates the consumer pattern: configure tenants, bring demo
authentication, and let the framework auto-discover everything else
(tenant binding, error handlers, health, orders API, variants).

Usage::

    from examples.storefront.app import create_storefront_app

    app = create_storefront_app()

    # curl -H "X-Tenant-ID: AcMe" -H "X-Demo-User: alice@acme.com" /orders
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from polytenant.foundation.application import TenancySettings
from polytenant.infra.fastapi import AppSettings, create_app

from .auth import contribution as demo_auth
from .branding import seed_branding

if TYPE_CHECKING:
    from fastapi import FastAPI

DEMO_TENANTS = ("AcMe", "Beta", "WayneEnt")

# Entry points excluded because they require external services.
_DEFAULT_EXCLUDE_NAMES = frozenset(
    {
        "observability",  # Reconfigures root logging (optional, noisy in dev)
        "taskiq",  # Needs Redis broker
    }
)


def create_storefront_app(
    *,
    tenancy: TenancySettings | None = None,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create a Storefront app backed by polytenant.

    Args:
        tenancy: Tenancy settings. Defaults to the three demo tenants with
            AcMe as the fallback tenant.
        exclude_names: Entry-point names to suppress. Defaults to hooks that
            need external infrastructure.
    """
    if tenancy is None:
        tenancy = TenancySettings(known_tenants=list(DEMO_TENANTS), default_tenant="AcMe")
    seed_branding()
    return create_app(
        settings=AppSettings(title="Storefront", version="0.1.0", tenancy=tenancy),
        extra_middleware=[demo_auth],
        exclude_names=exclude_names if exclude_names is not None else _DEFAULT_EXCLUDE_NAMES,
    )
