"""Capability port interfaces.

Ports define the contracts that tenant variants implement. Implementations
(adapters) live in domain and infrastructure packages and are selected per
request by the binding registry.
"""

from polytenant.foundation.domain.ports.health import HealthCapability
from polytenant.foundation.domain.ports.notifications import NotificationCapability
from polytenant.foundation.domain.ports.orders import OrderCapability

__all__ = ["HealthCapability", "NotificationCapability", "OrderCapability"]
