"""Storefront: example app demonstrating per-tenant capability bindings.

Three tenants share one deployment. AcMe tags order details, WayneEnt
reports a custom health status, and Beta runs the defaults. Tenancy
plumbing and the orders API are auto-discovered from installed polytenant
packages; the app only supplies demo authentication and branding records.

Modules:
    auth:     Header-based demo principals (DemoPrincipalMiddleware)
    branding: Seed branding records for the demo tenants
    app:      Application factory (create_storefront_app)
"""

from .app import create_storefront_app
from .auth import DEMO_USERS, DemoPrincipalMiddleware

__all__ = ["DEMO_USERS", "DemoPrincipalMiddleware", "create_storefront_app"]
