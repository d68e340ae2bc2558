"""Order capability variants.

``DefaultOrderService`` serves every tenant without a customization.
``AcmeOrderService`` is AcMe's variant: it prefixes order details with the
tenant marker on create and update.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from polytenant.foundation.domain.exceptions import ValidationError
from polytenant.foundation.domain.order_value_objects import Order, OrderPage

if TYPE_CHECKING:
    from uuid import UUID

    from polytenant.domain.orders.order_store import InMemoryOrderStore
    from polytenant.foundation.domain.identifiers import TenantId

logger = logging.getLogger(__name__)

MAX_DETAILS_LENGTH = 5000
MAX_PER_PAGE = 100


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DefaultOrderService:
    """Stores orders exactly as submitted.

    Args:
        store: Order storage.
        tenant: Tenant this instance was bound for, recorded on new orders.
        clock: Returns the current time (UTC).
    """

    def __init__(
        self,
        store: InMemoryOrderStore,
        tenant: TenantId | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._tenant = tenant
        self._clock = clock

    @property
    def tenant(self) -> TenantId | None:
        return self._tenant

    def get_orders(self, user_id: UUID, page: int = 1, per_page: int = 10) -> OrderPage:
        """Return one page of the user's orders, newest first.

        Raises:
            ValidationError: If page or per_page is out of range.
        """
        if page < 1:
            raise ValidationError("page", "must be at least 1")
        if not 1 <= per_page <= MAX_PER_PAGE:
            raise ValidationError("per_page", f"must be between 1 and {MAX_PER_PAGE}")

        orders = self._store.for_user(user_id)
        start = (page - 1) * per_page
        return OrderPage(
            items=tuple(orders[start : start + per_page]),
            total=len(orders),
            page=page,
            per_page=per_page,
        )

    def create_order(
        self,
        user_id: UUID,
        owner_email: str | None,
        project_id: int,
        details: str,
    ) -> Order:
        """Create and store a new order."""
        now = self._clock()
        order = Order(
            guid=str(uuid4()),
            user_id=user_id,
            project_id=project_id,
            details=self._prepare_details(self._check_details(details)),
            created_at=now,
            updated_at=now,
            owner_email=owner_email,
            tenant=str(self._tenant) if self._tenant is not None else None,
        )
        self._store.save(order)
        logger.info(
            "order_created",
            extra={"order_guid": order.guid, "tenant_id": order.tenant, "project_id": project_id},
        )
        return order

    def get_order(self, guid: str) -> Order | None:
        return self._store.get(guid)

    def update_order(self, order: Order, project_id: int, details: str) -> Order:
        """Replace the project and details of an existing order."""
        updated = replace(
            order,
            project_id=project_id,
            details=self._prepare_details(self._check_details(details)),
            updated_at=self._clock(),
        )
        self._store.save(updated)
        logger.info("order_updated", extra={"order_guid": order.guid, "tenant_id": order.tenant})
        return updated

    def delete_order(self, order: Order) -> bool:
        deleted = self._store.remove(order.guid)
        if deleted:
            logger.info(
                "order_deleted", extra={"order_guid": order.guid, "tenant_id": order.tenant}
            )
        return deleted

    def _prepare_details(self, details: str) -> str:
        return details

    @staticmethod
    def _check_details(details: str) -> str:
        if not details.strip():
            raise ValidationError("details", "Order details are required")
        if len(details) > MAX_DETAILS_LENGTH:
            raise ValidationError(
                "details", f"Order details must not exceed {MAX_DETAILS_LENGTH} characters"
            )
        return details


class AcmeOrderService(DefaultOrderService):
    """AcMe Corporation variant: details always carry the ``[AcMe]`` marker."""

    DETAILS_PREFIX = "[AcMe] "

    def _prepare_details(self, details: str) -> str:
        # Updates resubmit stored details, so the marker is never doubled
        if details.startswith(self.DETAILS_PREFIX):
            return details
        return f"{self.DETAILS_PREFIX}{details}"
