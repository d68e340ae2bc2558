"""Branding records for the demo tenants."""

from __future__ import annotations

from polytenant.domain.orders.branding import (
    InMemoryBrandingRepository,
    TenantBranding,
    get_branding_repository,
    get_branding_service,
)

DEMO_BRANDING: dict[str, TenantBranding] = {
    "WayneEnt": TenantBranding(
        header_text="Wayne Enterprises",
        footer_text="Wayne Enterprises - Building a better Gotham.",
        primary_color="#1a1a1a",
        support_email="support@wayneent.com",
        cc_emails=("admin@wayneent.com", "notifications@wayneent.com"),
    ),
    "AcMe": TenantBranding(
        header_text="AcMe Corporation",
        footer_text="AcMe Corporation - Quality products since 1949.",
        primary_color="#dc2626",
        support_email="help@acme.com",
    ),
    "Beta": TenantBranding(
        header_text="Beta Company",
        primary_color="#7c3aed",
        support_email="beta@example.com",
    ),
}


def seed_branding(repository: InMemoryBrandingRepository | None = None) -> None:
    """Store the demo branding records and drop stale cache entries."""
    repository = repository if repository is not None else get_branding_repository()
    for tenant, branding in DEMO_BRANDING.items():
        repository.save(tenant, branding)
    get_branding_service().clear_all()
