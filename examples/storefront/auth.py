"""Header-based demo authentication.

Stands in for a real identity provider: the ``X-Demo-User`` header names
one of :data:`DEMO_USERS` and the matching principal is placed in the
principal context. Unknown or missing users continue unauthenticated, so
protected endpoints answer 401.

Runs in the security band, outside ``TenantBindingMiddleware``, so the
principal is visible to tenant resolution.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from uuid import UUID

from polytenant.foundation.application.context import (
    clear_principal_context,
    set_principal_context,
)
from polytenant.foundation.application.contributions import MiddlewareContribution
from polytenant.foundation.domain.principal import OrganizationRef, Principal
from polytenant.infra.fastapi.middleware.tenant_binding import extract_header

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

DEMO_USER_HEADER = b"x-demo-user"

DEMO_USERS: dict[str, Principal] = {
    "alice@acme.com": Principal(
        subject="demo|alice",
        user_id=UUID("00000000-0000-0000-0000-00000000a11c"),
        email="alice@acme.com",
        organizations=(OrganizationRef(id=1, slug="acme", name="AcMe Corporation"),),
    ),
    "bob@beta.example.com": Principal(
        subject="demo|bob",
        user_id=UUID("00000000-0000-0000-0000-000000000b0b"),
        email="bob@beta.example.com",
        organizations=(OrganizationRef(id=3, slug="beta", name="Beta Company"),),
    ),
    # Member of two organizations; WayneEnt has the lower id
    "bruce@wayneent.com": Principal(
        subject="demo|bruce",
        user_id=UUID("00000000-0000-0000-0000-00000000b7ce"),
        email="bruce@wayneent.com",
        organizations=(
            OrganizationRef(id=12, slug="beta", name="Beta Company"),
            OrganizationRef(id=7, slug="wayneent", name="Wayne Enterprises"),
        ),
    ),
    "carol@example.com": Principal(
        subject="demo|carol",
        user_id=UUID("00000000-0000-0000-0000-0000000ca401"),
        email="carol@example.com",
    ),
}


class DemoPrincipalMiddleware:
    """Pure ASGI middleware that authenticates from ``X-Demo-User``.

    Args:
        app: The ASGI application.
        users: Principals by email. Defaults to :data:`DEMO_USERS`.
    """

    def __init__(self, app: Any, users: dict[str, Principal] | None = None) -> None:
        self.app = app
        self._users = users if users is not None else DEMO_USERS

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        email = extract_header(scope.get("headers", []), DEMO_USER_HEADER).strip().lower()
        principal = self._users.get(email) if email else None
        if principal is None:
            if email:
                logger.info("demo_user_unknown", extra={"path": scope.get("path")})
            await self.app(scope, receive, send)
            return

        token = set_principal_context(principal)
        try:
            await self.app(scope, receive, send)
        finally:
            clear_principal_context(token)


contribution = MiddlewareContribution(
    middleware_class=DemoPrincipalMiddleware,
    priority=150,  # Security band (100-199)
)
