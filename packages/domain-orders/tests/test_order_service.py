"""Unit tests for polytenant.domain.orders.order_service."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from polytenant.domain.orders.order_service import AcmeOrderService, DefaultOrderService
from polytenant.domain.orders.order_store import InMemoryOrderStore
from polytenant.foundation.domain import OrderCapability, TenantId, ValidationError


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2025, 11, 14, 9, 30, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture()
def store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


class TestDefaultOrderService:
    @pytest.mark.unit
    def test_satisfies_contract(self, store: InMemoryOrderStore) -> None:
        assert isinstance(DefaultOrderService(store), OrderCapability)

    @pytest.mark.unit
    def test_create_stores_details_verbatim(self, store: InMemoryOrderStore) -> None:
        service = DefaultOrderService(store, TenantId("Beta"))
        user_id = uuid4()

        order = service.create_order(user_id, "owner@example.com", 3, "Ten widgets")

        assert order.details == "Ten widgets"
        assert order.tenant == "Beta"
        assert order.owner_email == "owner@example.com"
        assert service.get_order(order.guid) == order

    @pytest.mark.unit
    def test_no_tenant_recorded_as_none(self, store: InMemoryOrderStore) -> None:
        order = DefaultOrderService(store).create_order(uuid4(), None, 1, "x")
        assert order.tenant is None

    @pytest.mark.unit
    def test_update_replaces_fields(self, store: InMemoryOrderStore) -> None:
        service = DefaultOrderService(store, clock=_Clock())
        order = service.create_order(uuid4(), None, 1, "first")

        updated = service.update_order(order, 2, "second")

        assert updated.guid == order.guid
        assert updated.project_id == 2
        assert updated.details == "second"
        assert updated.updated_at > order.updated_at
        assert updated.created_at == order.created_at
        assert service.get_order(order.guid) == updated

    @pytest.mark.unit
    def test_delete(self, store: InMemoryOrderStore) -> None:
        service = DefaultOrderService(store)
        order = service.create_order(uuid4(), None, 1, "x")

        assert service.delete_order(order) is True
        assert service.get_order(order.guid) is None
        assert service.delete_order(order) is False

    @pytest.mark.unit
    def test_get_orders_pages_newest_first(self, store: InMemoryOrderStore) -> None:
        service = DefaultOrderService(store, clock=_Clock())
        user_id = uuid4()
        created = [service.create_order(user_id, None, 1, f"order {i}") for i in range(5)]
        service.create_order(uuid4(), None, 1, "someone else")

        first = service.get_orders(user_id, page=1, per_page=2)
        last = service.get_orders(user_id, page=3, per_page=2)

        assert [o.details for o in first.items] == ["order 4", "order 3"]
        assert first.total == 5
        assert first.last_page == 3
        assert last.items == (created[0],)

    @pytest.mark.unit
    @pytest.mark.parametrize(("page", "per_page"), [(0, 10), (1, 0), (1, 101)])
    def test_get_orders_rejects_bad_paging(
        self, store: InMemoryOrderStore, page: int, per_page: int
    ) -> None:
        with pytest.raises(ValidationError):
            DefaultOrderService(store).get_orders(uuid4(), page, per_page)

    @pytest.mark.unit
    @pytest.mark.parametrize("details", ["", "   ", "x" * 5001])
    def test_create_rejects_bad_details(self, store: InMemoryOrderStore, details: str) -> None:
        with pytest.raises(ValidationError, match="details"):
            DefaultOrderService(store).create_order(uuid4(), None, 1, details)


class TestAcmeOrderService:
    @pytest.mark.unit
    def test_create_prefixes_details(self, store: InMemoryOrderStore) -> None:
        service = AcmeOrderService(store, TenantId("AcMe"))
        order = service.create_order(uuid4(), None, 1, "Rocket skates")
        assert order.details == "[AcMe] Rocket skates"
        assert order.tenant == "AcMe"

    @pytest.mark.unit
    def test_update_keeps_single_prefix(self, store: InMemoryOrderStore) -> None:
        service = AcmeOrderService(store, TenantId("AcMe"))
        order = service.create_order(uuid4(), None, 1, "Anvil")

        resubmitted = service.update_order(order, 1, order.details)
        changed = service.update_order(resubmitted, 2, "Giant magnet")

        assert resubmitted.details == "[AcMe] Anvil"
        assert changed.details == "[AcMe] Giant magnet"

    @pytest.mark.unit
    def test_shares_store_with_default(self, store: InMemoryOrderStore) -> None:
        order = AcmeOrderService(store).create_order(uuid4(), None, 1, "Anvil")
        assert DefaultOrderService(store).get_order(order.guid) == order
