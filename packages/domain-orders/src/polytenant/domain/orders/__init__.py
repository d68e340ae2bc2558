"""Polytenant Domain Orders: order and notification capability variants."""

from polytenant.domain.orders.branding import (
    InMemoryBrandingRepository,
    TenantBranding,
    TenantBrandingService,
    get_branding_repository,
    get_branding_service,
)
from polytenant.domain.orders.notification_service import (
    DefaultNotificationService,
    Mailer,
    OutboxMailer,
    SentMail,
    get_outbox_mailer,
)
from polytenant.domain.orders.order_service import AcmeOrderService, DefaultOrderService
from polytenant.domain.orders.order_store import InMemoryOrderStore, get_order_store

__all__ = [
    "AcmeOrderService",
    "DefaultNotificationService",
    "DefaultOrderService",
    "InMemoryBrandingRepository",
    "InMemoryOrderStore",
    "Mailer",
    "OutboxMailer",
    "SentMail",
    "TenantBranding",
    "TenantBrandingService",
    "get_branding_repository",
    "get_branding_service",
    "get_order_store",
    "get_outbox_mailer",
]
