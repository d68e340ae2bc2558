"""Capability variants contributed by the orders package.

Registered through the ``polytenant.variants`` entry point group. Every
factory receives the resolved tenant (or None) and shares the process-wide
store, mailer and branding cache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from polytenant.domain.orders.branding import get_branding_service
from polytenant.domain.orders.notification_service import (
    DefaultNotificationService,
    get_outbox_mailer,
)
from polytenant.domain.orders.order_service import AcmeOrderService, DefaultOrderService
from polytenant.domain.orders.order_store import get_order_store
from polytenant.foundation.application.capabilities import NOTIFICATIONS, ORDERS
from polytenant.foundation.application.contributions import VariantContribution

if TYPE_CHECKING:
    from polytenant.foundation.domain.identifiers import TenantId


def default_orders(tenant: TenantId | None) -> DefaultOrderService:
    return DefaultOrderService(get_order_store(), tenant)


def acme_orders(tenant: TenantId | None) -> AcmeOrderService:
    return AcmeOrderService(get_order_store(), tenant)


def default_notifications(tenant: TenantId | None) -> DefaultNotificationService:
    return DefaultNotificationService(get_outbox_mailer(), get_branding_service(), tenant)


contributions = [
    VariantContribution(capability=ORDERS.name, factory=default_orders),
    VariantContribution(capability=ORDERS.name, factory=acme_orders, tenant="AcMe"),
    VariantContribution(capability=NOTIFICATIONS.name, factory=default_notifications),
]
