"""Port interface for the order capability.

Every tenant-specific order variant implements this protocol. Handlers only
ever see the protocol; which implementation they get is decided per request
by the binding registry.

Example:
    >>> from polytenant.foundation.domain.ports import OrderCapability
    >>> def latest(orders: OrderCapability, user_id) -> list:
    ...     return list(orders.get_orders(user_id, page=1, per_page=5).items)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID

    from polytenant.foundation.domain.order_value_objects import Order, OrderPage


@runtime_checkable
class OrderCapability(Protocol):
    """Order lifecycle operations."""

    def get_orders(self, user_id: UUID, page: int, per_page: int) -> OrderPage:
        """Return a page of the user's orders, newest first."""
        ...

    def create_order(
        self,
        user_id: UUID,
        owner_email: str | None,
        project_id: int,
        details: str,
    ) -> Order:
        """Create and store a new order.

        Args:
            user_id: Owner of the order.
            owner_email: Notification address for the owner, if known.
            project_id: Project the order is filed against.
            details: Free-text order details.

        Returns:
            The stored order.
        """
        ...

    def get_order(self, guid: str) -> Order | None:
        """Return the order with this guid, or None."""
        ...

    def update_order(self, order: Order, project_id: int, details: str) -> Order:
        """Store new project and details for an existing order."""
        ...

    def delete_order(self, order: Order) -> bool:
        """Delete an order. Returns False if it was already gone."""
        ...
