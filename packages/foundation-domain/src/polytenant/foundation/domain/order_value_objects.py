"""Value objects shared by the order capability contract.

Immutable records. Variants produce updated copies with
:func:`dataclasses.replace` instead of mutating in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class Order:
    """A customer order.

    Attributes:
        guid: Public identifier used in URLs.
        user_id: Owner of the order.
        project_id: Project the order is filed against.
        details: Free-text order details.
        owner_email: Where notifications for this order go. None if unknown.
        tenant: Tenant the order was created under, if any.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC).
    """

    guid: str
    user_id: UUID
    project_id: int
    details: str
    created_at: datetime
    updated_at: datetime
    owner_email: str | None = None
    tenant: str | None = None


@dataclass(frozen=True, slots=True)
class OrderPage:
    """One page of orders, newest first.

    Attributes:
        items: Orders on this page.
        total: Total orders across all pages.
        page: 1-based page number.
        per_page: Page size used for the query.
    """

    items: tuple[Order, ...]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        """Number of the final page (1 when empty)."""
        if self.total == 0:
            return 1
        return (self.total + self.per_page - 1) // self.per_page
