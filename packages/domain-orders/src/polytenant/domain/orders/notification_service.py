"""Order notification variant and mail delivery port."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from polytenant.domain.orders.branding import TenantBranding, TenantBrandingService
    from polytenant.foundation.domain.identifiers import TenantId
    from polytenant.foundation.domain.order_value_objects import Order

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class Mailer(Protocol):
    """Outbound plain-text mail."""

    def send_text(self, to: str, subject: str, body: str, *, cc: Sequence[str] = ()) -> None:
        """Queue a plain-text message."""
        ...


@dataclass(frozen=True, slots=True)
class SentMail:
    to: str
    subject: str
    body: str
    cc: tuple[str, ...] = ()


class OutboxMailer:
    """Mailer that records messages in memory instead of delivering them."""

    def __init__(self) -> None:
        self._sent: list[SentMail] = []
        self._lock = threading.Lock()

    @property
    def sent(self) -> tuple[SentMail, ...]:
        with self._lock:
            return tuple(self._sent)

    def send_text(self, to: str, subject: str, body: str, *, cc: Sequence[str] = ()) -> None:
        with self._lock:
            self._sent.append(SentMail(to=to, subject=subject, body=body, cc=tuple(cc)))
        logger.info("text_email_queued", extra={"to": to, "subject": subject, "cc": list(cc)})

    def clear(self) -> None:
        with self._lock:
            self._sent.clear()


class DefaultNotificationService:
    """Sends branded plain-text mails to the order owner.

    Args:
        mailer: Delivery port.
        branding: Branding lookup for the bound tenant.
        tenant: Tenant this instance was bound for.
    """

    def __init__(
        self,
        mailer: Mailer,
        branding: TenantBrandingService,
        tenant: TenantId | None = None,
    ) -> None:
        self._mailer = mailer
        self._branding = branding
        self._tenant = tenant

    def notify_order_created(self, order: Order) -> None:
        self._send(
            order,
            subject=f"New Order Created - Project #{order.project_id}",
            summary="Your order has been created successfully.",
            stamp=f"Created: {order.created_at.strftime(TIMESTAMP_FORMAT)}",
        )

    def notify_order_updated(self, order: Order) -> None:
        self._send(
            order,
            subject=f"Order Updated - Project #{order.project_id}",
            summary="Your order has been updated.",
            stamp=f"Updated: {order.updated_at.strftime(TIMESTAMP_FORMAT)}",
        )

    def _send(self, order: Order, *, subject: str, summary: str, stamp: str) -> None:
        if not order.owner_email:
            logger.warning("notification_skipped_no_recipient", extra={"order_guid": order.guid})
            return

        branding = self._branding.get_branding(self._tenant)
        body = _render_body(branding, order.owner_email, summary, order, stamp)
        self._mailer.send_text(order.owner_email, subject, body, cc=branding.cc_emails)


def _render_body(
    branding: TenantBranding, recipient: str, summary: str, order: Order, stamp: str
) -> str:
    lines: list[str] = []
    if branding.header_text:
        lines += [branding.header_text, ""]
    lines += [
        f"Hello {recipient},",
        "",
        summary,
        "",
        f"Project: #{order.project_id}",
        f"Details: {order.details}",
        stamp,
        "",
        "Thank you!",
        "",
        "--",
        branding.footer_text,
    ]
    if branding.support_email:
        lines.append(f"Support: {branding.support_email}")
    return "\n".join(lines)


@lru_cache(maxsize=1)
def get_outbox_mailer() -> OutboxMailer:
    """Process-wide outbox used by the default notification variant."""
    return OutboxMailer()
