"""In-memory order storage.

Stands in for the persistence collaborator. Thread-safe because sync FastAPI
endpoints run in a worker thread pool.
"""

from __future__ import annotations

import threading
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from polytenant.foundation.domain.order_value_objects import Order


class InMemoryOrderStore:
    """Orders keyed by guid."""

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()

    def save(self, order: Order) -> Order:
        """Insert or replace ``order``."""
        with self._lock:
            self._orders[order.guid] = order
        return order

    def get(self, guid: str) -> Order | None:
        with self._lock:
            return self._orders.get(guid)

    def remove(self, guid: str) -> bool:
        """Delete an order. Returns False when it did not exist."""
        with self._lock:
            return self._orders.pop(guid, None) is not None

    def for_user(self, user_id: UUID) -> list[Order]:
        """Orders owned by ``user_id``, newest first."""
        with self._lock:
            owned = [o for o in self._orders.values() if o.user_id == user_id]
        return sorted(owned, key=lambda o: o.created_at, reverse=True)

    def clear(self) -> None:
        with self._lock:
            self._orders.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)


@lru_cache(maxsize=1)
def get_order_store() -> InMemoryOrderStore:
    """Process-wide store shared by every order variant."""
    return InMemoryOrderStore()
