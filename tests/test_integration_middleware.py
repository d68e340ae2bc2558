"""Integration tests: middleware stack behaviour through the Storefront."""

from __future__ import annotations

from uuid import UUID

import pytest


@pytest.mark.integration
class TestCorrelationIdPropagation:
    """TenantBindingMiddleware generates / propagates X-Correlation-ID."""

    def test_generates_correlation_id(self, client) -> None:
        resp = client.get("/healthz")
        UUID(resp.headers["X-Correlation-ID"])

    def test_propagates_provided_correlation_id(self, client) -> None:
        resp = client.get("/healthz", headers={"X-Correlation-ID": "custom-corr-123"})
        assert resp.headers["X-Correlation-ID"] == "custom-corr-123"

    def test_malformed_correlation_id_is_replaced(self, client) -> None:
        resp = client.get("/healthz", headers={"X-Correlation-ID": "bad id; drop table"})
        echoed = resp.headers["X-Correlation-ID"]
        assert echoed != "bad id; drop table"
        UUID(echoed)

    def test_overlong_correlation_id_is_replaced(self, client) -> None:
        resp = client.get("/healthz", headers={"X-Correlation-ID": "a" * 129})
        UUID(resp.headers["X-Correlation-ID"])

    def test_no_request_id_header(self, client) -> None:
        resp = client.get("/healthz")
        assert "X-Request-ID" not in resp.headers


@pytest.mark.integration
class TestTenantResolutionOrder:
    """Explicit header, then host, then the principal's organization, then default."""

    def test_explicit_header_wins_over_principal(self, client, user_headers) -> None:
        resp = client.get("/healthz", headers=user_headers("bruce@wayneent.com", "beta"))
        assert resp.json()["tenant"] == "Beta"

    def test_host_wins_over_principal(self, client, user_headers) -> None:
        headers = {**user_headers("alice@acme.com"), "Host": "wayneent.shop.example.com"}
        resp = client.get("/healthz", headers=headers)
        assert resp.json()["tenant"] == "WayneEnt"

    def test_unknown_header_falls_through_to_host(self, client) -> None:
        headers = {"X-Tenant-ID": "globex", "Host": "beta.shop.example.com:8443"}
        resp = client.get("/healthz", headers=headers)
        assert resp.json()["tenant"] == "Beta"

    def test_primary_organization_of_principal(self, client, user_headers) -> None:
        """bruce belongs to beta (id 12) and wayneent (id 7): lowest id wins."""
        resp = client.get("/healthz", headers=user_headers("bruce@wayneent.com"))
        assert resp.json()["tenant"] == "WayneEnt"

    def test_two_label_host_is_ignored(self, client, user_headers) -> None:
        headers = {**user_headers("bob@beta.example.com"), "Host": "acme.com"}
        resp = client.get("/healthz", headers=headers)
        assert resp.json()["tenant"] == "Beta"

    def test_default_tenant_without_signals(self, client) -> None:
        resp = client.get("/healthz")
        assert resp.json()["tenant"] == "AcMe"

    def test_context_does_not_leak_between_requests(self, client, user_headers) -> None:
        assert client.get("/healthz", headers=user_headers(tenant="WayneEnt")).json()[
            "tenant"
        ] == "WayneEnt"
        assert client.get("/healthz").json()["tenant"] == "AcMe"
