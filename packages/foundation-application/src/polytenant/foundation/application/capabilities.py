"""Capability descriptors.

A capability names a contract whose implementation may vary per tenant.
The contract itself is a Protocol in :mod:`polytenant.foundation.domain.ports`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from polytenant.foundation.domain.ports import (
    HealthCapability,
    NotificationCapability,
    OrderCapability,
)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Capability(Generic[T]):
    """A named, tenant-customizable contract.

    Attributes:
        name: Stable name used by registrations and entry points.
        contract: Protocol every variant must satisfy.
    """

    name: str
    contract: type[T]

    def __str__(self) -> str:
        return self.name


ORDERS: Capability[OrderCapability] = Capability("orders", OrderCapability)
NOTIFICATIONS: Capability[NotificationCapability] = Capability(
    "notifications", NotificationCapability
)
HEALTH: Capability[HealthCapability] = Capability("health", HealthCapability)

# Bound for every request, in this order
BUILTIN_CAPABILITIES: tuple[Capability[object], ...] = (ORDERS, NOTIFICATIONS, HEALTH)  # type: ignore[assignment]
