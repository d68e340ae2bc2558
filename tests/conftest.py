"""Shared fixtures for integration tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from examples.storefront.app import create_storefront_app
from fastapi.testclient import TestClient

from polytenant.domain.orders.notification_service import get_outbox_mailer
from polytenant.domain.orders.order_store import get_order_store

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from fastapi import FastAPI

# Entry-point names excluded in integration tests (no external services).
TEST_EXCLUDE_NAMES = frozenset({"observability", "taskiq"})


@pytest.fixture(autouse=True)
def _clean_process_state() -> Iterator[None]:
    """Orders and sent mail live in process-wide stores."""
    get_order_store().clear()
    get_outbox_mailer().clear()
    yield
    get_order_store().clear()
    get_outbox_mailer().clear()


@pytest.fixture()
def storefront_app() -> FastAPI:
    """Create a fresh Storefront app for each test (AcMe is the default tenant)."""
    return create_storefront_app(exclude_names=TEST_EXCLUDE_NAMES)


@pytest.fixture()
def client(storefront_app: FastAPI) -> Iterator[TestClient]:
    """TestClient for the Storefront app (lifespan hooks executed)."""
    with TestClient(storefront_app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture()
def user_headers() -> Callable[..., dict[str, str]]:
    """Build request headers for a demo user and optional explicit tenant."""

    def _headers(user: str | None = None, tenant: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if user is not None:
            headers["X-Demo-User"] = user
        if tenant is not None:
            headers["X-Tenant-ID"] = tenant
        return headers

    return _headers
