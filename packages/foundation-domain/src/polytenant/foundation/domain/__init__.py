"""Polytenant Foundation Domain -- pure Python domain primitives.

This package provides the foundational domain building blocks for
multi-tenant applications: identifiers, exceptions, value objects and the
capability port interfaces that tenant variants implement.
"""

from polytenant.foundation.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateVariantError,
    NoTenantError,
    NotFoundError,
    UnknownVariantConfigurationError,
    ValidationError,
    VariantConfigurationError,
)
from polytenant.foundation.domain.identifiers import TenantId, normalize_tenant_key
from polytenant.foundation.domain.order_value_objects import Order, OrderPage
from polytenant.foundation.domain.ports import (
    HealthCapability,
    NotificationCapability,
    OrderCapability,
)
from polytenant.foundation.domain.principal import OrganizationRef, Principal

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "DomainError",
    "DuplicateVariantError",
    "HealthCapability",
    "NoTenantError",
    "NotFoundError",
    "NotificationCapability",
    "Order",
    "OrderCapability",
    "OrderPage",
    "OrganizationRef",
    "Principal",
    "TenantId",
    "UnknownVariantConfigurationError",
    "ValidationError",
    "VariantConfigurationError",
    "normalize_tenant_key",
]
