"""Port interface for the notification capability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from polytenant.foundation.domain.order_value_objects import Order


@runtime_checkable
class NotificationCapability(Protocol):
    """Order notifications.

    Tenants customize how they are told about their orders: the default
    sends a plain branded email, a tenant variant might add SMS or chat.
    """

    def notify_order_created(self, order: Order) -> None:
        """Send notification when an order is created."""
        ...

    def notify_order_updated(self, order: Order) -> None:
        """Send notification when an order is updated."""
        ...
