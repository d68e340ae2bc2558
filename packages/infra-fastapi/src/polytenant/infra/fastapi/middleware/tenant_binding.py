"""Middleware that resolves the tenant and binds capabilities per request.

For each HTTP request the middleware builds a fresh resolver over the
request's signals, runs the binder, and activates the resulting
:class:`RequestContext` for the rest of the request. Handlers downstream
read capabilities through ``get_capability`` or the FastAPI dependencies in
:mod:`polytenant.infra.fastapi.dependencies`.

The principal is read from the principal context, so authentication
middleware must sit in a lower priority band (outer) than this one.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

from polytenant.foundation.application import MiddlewareContribution
from polytenant.foundation.application.context import (
    clear_request_context,
    get_optional_principal,
    set_request_context,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from polytenant.foundation.application import TenancyRuntime
    from polytenant.foundation.domain.principal import Principal

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Client ids outside this shape are replaced, never echoed
_CORRELATION_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def extract_header(headers: list[tuple[bytes, bytes]], name: bytes) -> str:
    """Return the first value of header ``name`` (lower-case) from raw ASGI headers."""
    for key, value in headers:
        if key.lower() == name:
            return value.decode("latin-1")
    return ""


def accept_correlation_id(value: str) -> str:
    """Return ``value`` when it is a usable correlation ID, else a fresh UUID4.

    Accepted IDs are 1-128 characters of letters, digits and ``._:-``.
    Anything else (blank, overlong, whitespace or control characters) is
    dropped so it never reaches logs or response headers.
    """
    value = value.strip()
    if _CORRELATION_ID_PATTERN.fullmatch(value):
        return value
    if value:
        logger.debug("correlation_id_rejected", extra={"length": len(value)})
    return str(uuid4())


class RequestSignals:
    """Tenant signals read from a raw ASGI scope.

    Args:
        scope: ASGI connection scope.
        tenant_header: Name of the explicit tenant header.
    """

    def __init__(self, scope: dict[str, Any], tenant_header: str) -> None:
        self._headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
        self._server: tuple[str, int | None] | None = scope.get("server")
        self._tenant_header = tenant_header.lower().encode("latin-1")

    def explicit_tenant(self) -> str | None:
        value = extract_header(self._headers, self._tenant_header).strip()
        return value or None

    def host(self) -> str | None:
        value = extract_header(self._headers, b"host").strip()
        if value:
            return value
        if self._server is not None:
            return self._server[0]
        return None

    def principal(self) -> Principal | None:
        return get_optional_principal()


def _runtime_from_scope(scope: dict[str, Any]) -> TenancyRuntime | None:
    app = scope.get("app")
    if app is None:
        return None
    return getattr(app.state, "tenancy", None)


class TenantBindingMiddleware:
    """Pure ASGI middleware that binds a request context per request.

    Request flow:
    1. Take a well-formed X-Correlation-ID from the request, or generate one
    2. Resolve the tenant and bind every capability for it
    3. Activate the context and bind ``correlation_id`` for structlog
    4. Echo X-Correlation-ID on the response
    5. Clear both when the request completes

    Args:
        app: The ASGI application.
        runtime: Tenancy runtime. When omitted it is read from
            ``app.state.tenancy``, which :func:`create_app` populates.
            Requests pass through unbound if neither is available.
    """

    def __init__(self, app: Any, runtime: TenancyRuntime | None = None) -> None:
        self.app = app
        self._runtime = runtime

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        runtime = self._runtime or _runtime_from_scope(scope)
        if runtime is None:
            logger.debug("tenant_binding_skipped_no_runtime", extra={"path": scope.get("path")})
            await self.app(scope, receive, send)
            return

        headers = scope.get("headers", [])
        correlation_id = accept_correlation_id(extract_header(headers, b"x-correlation-id"))
        # Outlives the request context, so the catch-all 500 handler can still read it
        scope.setdefault("state", {})["correlation_id"] = correlation_id

        context = runtime.new_context(
            RequestSignals(scope, runtime.tenant_header),
            correlation_id=correlation_id,
        )
        token = set_request_context(context)
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        async def send_with_correlation_id(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                resp_headers = list(message.get("headers", []))
                resp_headers.append((b"x-correlation-id", correlation_id.encode("latin-1")))
                message = {**message, "headers": resp_headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_correlation_id)
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id")
            clear_request_context(token)


# Module-level contribution for auto-discovery via entry points.
contribution = MiddlewareContribution(
    middleware_class=TenantBindingMiddleware,
    priority=200,  # Context band (200-299)
)
